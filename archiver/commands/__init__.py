"""Workflows behind the command-line interface."""

from .compress import CompressResult, compress
from .index import build_index
from .search import search

__all__ = [
    "CompressResult",
    "build_index",
    "compress",
    "search",
]
