"""Full-text index on SQLite FTS5.

The index lives in a single ``index.db`` file holding:

- ``documents``: stored fields (path, size, archive) keyed by an integer id,
- ``fts``: a contentless FTS5 table over file content, so file content is indexed but not stored,
- ``fts_vocab``: the FTS5 term vocabulary, used to expand wildcard terms.
"""

import logging
import os
import re
import sqlite3
from dataclasses import dataclass, field
from pathlib import Path
from zipfile import ZipFile

logger = logging.getLogger(__name__)

INDEX_FILE_NAME = "index.db"

SCHEMA = """
CREATE TABLE IF NOT EXISTS documents (
    id INTEGER PRIMARY KEY,
    path TEXT NOT NULL,
    size INTEGER NOT NULL,
    archive TEXT
);
CREATE INDEX IF NOT EXISTS idx_documents_path ON documents(path);
CREATE VIRTUAL TABLE IF NOT EXISTS fts USING fts5(
    content,
    content = '',
    tokenize = 'porter unicode61'
);
CREATE VIRTUAL TABLE IF NOT EXISTS fts_vocab USING fts5vocab(fts, row);
"""

WILDCARD_CHARS = re.compile(r"[*?]")


@dataclass
class FileRecord:
    """Metadata record for one indexed file."""

    path: str  # Relative to the partition root, "/" separated
    size: int
    content: str | None = None  # Indexed, never stored
    archive: str | None = None  # Container holding the file


@dataclass
class SearchHit:
    path: str
    archive: str | None
    score: float


@dataclass
class SearchResult:
    total_hits: int
    total_documents: int
    hits: list[SearchHit] = field(default_factory=list)


class IndexSink:
    """Write handle on an index directory."""

    def __init__(self, index_dir: Path) -> None:
        self.index_dir = index_dir
        self.index_file = index_dir / INDEX_FILE_NAME
        self.submitted = 0
        self._conn: sqlite3.Connection | None = None

    def open(self) -> "IndexSink":
        self.index_dir.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(self.index_file)
        # Commits are only synced on a durable flush
        conn.execute("PRAGMA synchronous=OFF")
        conn.executescript(SCHEMA)
        conn.commit()
        self._conn = conn
        logger.debug(f"Opened index {self.index_file}")
        return self

    def submit(self, record: FileRecord) -> None:
        conn = self._require_open()
        cursor = conn.execute(
            "INSERT INTO documents (path, size, archive) VALUES (?, ?, ?)",
            (record.path, record.size, record.archive),
        )
        if record.content is not None:
            conn.execute(
                "INSERT INTO fts (rowid, content) VALUES (?, ?)",
                (cursor.lastrowid, record.content),
            )
        self.submitted += 1

    def flush(self, durable: bool = False) -> None:
        """Commit pending records; a durable flush also syncs the file to disk."""
        self._require_open().commit()
        if durable:
            fd = os.open(self.index_file, os.O_RDWR)
            try:
                os.fsync(fd)
            finally:
                os.close(fd)
            logger.debug(f"Synced index {self.index_file}")

    def close(self) -> None:
        if self._conn is None:
            return
        self._conn.commit()
        self._conn.close()
        self._conn = None

    def _require_open(self) -> sqlite3.Connection:
        if self._conn is None:
            raise sqlite3.ProgrammingError(f"Index is not open: {self.index_file}")
        return self._conn

    def __enter__(self) -> "IndexSink":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class IndexSource:
    """Read handle on an index directory or a packaged ``.zip`` snapshot."""

    def __init__(self, conn: sqlite3.Connection, location: Path) -> None:
        self._conn = conn
        self.location = location

    @classmethod
    def open(cls, location: Path) -> "IndexSource":
        if location.suffix == ".zip":
            return cls(_load_snapshot(location), location)

        index_file = location / INDEX_FILE_NAME
        if not index_file.is_file():
            raise FileNotFoundError(f"No index found at {location}")
        conn = sqlite3.connect(f"{index_file.resolve().as_uri()}?mode=ro", uri=True)
        return cls(conn, location)

    def document_count(self) -> int:
        return self._conn.execute("SELECT count(*) FROM documents").fetchone()[0]

    def search(self, terms: list[str], limit: int | None = None) -> SearchResult:
        """Find documents whose content matches every term, best first."""
        expression = self._build_query(terms)
        total_documents = self.document_count()
        if expression is None:
            return SearchResult(total_hits=0, total_documents=total_documents)

        rows = self._conn.execute(
            """
            SELECT d.path, d.archive, m.score
            FROM (
                SELECT rowid, -bm25(fts) AS score FROM fts WHERE fts MATCH ?
            ) AS m
            JOIN documents AS d ON d.id = m.rowid
            ORDER BY m.score DESC, d.path
            """,
            (expression,),
        ).fetchall()

        hits = [SearchHit(path=path, archive=archive, score=score) for path, archive, score in rows]
        return SearchResult(
            total_hits=len(hits),
            total_documents=total_documents,
            hits=hits[:limit] if limit is not None else hits,
        )

    def _build_query(self, terms: list[str]) -> str | None:
        """Build an FTS5 expression ANDing all terms.

        Returns None when a wildcard term matches no indexed term at all.
        """
        words = [word for term in terms for word in term.split()]
        if not words:
            raise ValueError("At least one search term is required")

        clauses = []
        for word in words:
            clause = self._term_clause(word)
            if clause is None:
                return None
            clauses.append(clause)
        return " AND ".join(clauses)

    def _term_clause(self, word: str) -> str | None:
        stem = word[:-1]
        if word.endswith("*") and stem and not WILDCARD_CHARS.search(stem):
            return f"{_quote(stem)} *"
        if not WILDCARD_CHARS.search(word):
            return _quote(word)

        # Leading or inner wildcard: expand against the term vocabulary
        matches = [
            row[0]
            for row in self._conn.execute(
                "SELECT term FROM fts_vocab WHERE term GLOB ?", (word.lower(),)
            )
        ]
        if not matches:
            logger.debug(f"No indexed term matches '{word}'")
            return None
        return "(" + " OR ".join(_quote(term) for term in matches) + ")"

    def close(self) -> None:
        self._conn.close()

    def __enter__(self) -> "IndexSource":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def _quote(term: str) -> str:
    return '"' + term.replace('"', '""') + '"'


def _load_snapshot(archive_path: Path) -> sqlite3.Connection:
    """Copy a packaged index into an in-memory database."""
    with ZipFile(archive_path) as archive:
        try:
            data = archive.read(INDEX_FILE_NAME)
        except KeyError as e:
            raise FileNotFoundError(f"No {INDEX_FILE_NAME} entry in {archive_path}") from e

    conn = sqlite3.connect(":memory:")
    conn.deserialize(data)
    logger.debug(f"Loaded index snapshot from {archive_path} ({len(data)} bytes)")
    return conn
