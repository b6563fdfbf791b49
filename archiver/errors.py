"""Errors raised by archiver."""


class ArchiverError(Exception):
    """Base class for archiver errors."""


class ContentReadError(ArchiverError):
    """A file flagged for content indexing could not be decoded."""


class ArchiveClosedError(ArchiverError):
    """An archive unit was written to or closed after it was closed."""
