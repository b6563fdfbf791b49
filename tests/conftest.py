"""Shared test fixtures."""

from pathlib import Path

import pytest

from archiver.storage.index_store import FileRecord


class RecordingSink:
    """In-memory stand-in for IndexSink."""

    def __init__(self) -> None:
        self.records: list[FileRecord] = []
        self.flushes: list[bool] = []

    @property
    def submitted(self) -> int:
        return len(self.records)

    def submit(self, record: FileRecord) -> None:
        self.records.append(record)

    def flush(self, durable: bool = False) -> None:
        self.flushes.append(durable)

    def by_path(self) -> dict[str, FileRecord]:
        return {r.path: r for r in self.records}


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def tmp_tree(tmp_path: Path) -> Path:
    """Create a source tree covering every partitioning case.

    src/
        a.txt
        docs/readme.md        (only file mentioning "zebra")
        docs/photo.jpg
        docs/guide/intro.md
        proj/sub/0_dev/x.txt  (promoted folder)
        proj/main.py
        secret.p12
        .git/config
    """
    src = tmp_path / "src"
    src.mkdir()
    (src / "a.txt").write_text("top level notes about apples")
    (src / "secret.p12").write_bytes(b"\x00\x01certificate")

    docs = src / "docs"
    (docs / "guide").mkdir(parents=True)
    (docs / "readme.md").write_text("# Readme\n\nThe zebra lives here.")
    (docs / "photo.jpg").write_bytes(b"\xff\xd8\xff\xe0jpeg")
    (docs / "guide" / "intro.md").write_text("Introduction to apples and oranges.")

    dev = src / "proj" / "sub" / "0_dev"
    dev.mkdir(parents=True)
    (dev / "x.txt").write_text("developer scratch file")
    (src / "proj" / "main.py").write_text("print('hello apples')\n")

    git = src / ".git"
    git.mkdir()
    (git / "config").write_text("[core]\n")

    return src
