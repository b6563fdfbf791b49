"""Archiver - partition a directory tree into zip archives and index it for search."""

__version__ = "0.1.0"
