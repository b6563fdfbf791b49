"""Archive containers and the full-text index."""

from .archive import ArchiveUnit, package_directory
from .index_store import FileRecord, IndexSink, IndexSource, SearchHit, SearchResult

__all__ = [
    "ArchiveUnit",
    "FileRecord",
    "IndexSink",
    "IndexSource",
    "SearchHit",
    "SearchResult",
    "package_directory",
]
