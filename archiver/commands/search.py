"""Search an index directory or a packaged index."""

from pathlib import Path

from archiver.storage import IndexSource, SearchResult


def search(index: Path, terms: list[str], limit: int | None = None) -> SearchResult:
    """Run an AND query of terms against the index at the given location."""
    with IndexSource.open(index) as source:
        return source.search(terms, limit=limit)
