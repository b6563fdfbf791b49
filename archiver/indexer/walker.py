"""Depth-first directory traversal with pluggable visitor callbacks."""

import logging
import os
from enum import Enum
from pathlib import Path
from typing import Generic, Protocol, TypeVar

logger = logging.getLogger(__name__)


class VisitState(Enum):
    CONTINUE = "continue"
    SKIP_SUBTREE = "skip_subtree"


class UnsupportedEntryError(ValueError):
    """A directory entry is neither a regular file nor a directory."""


class VisitorHandler(Protocol):
    """Callbacks invoked by TreeWalker."""

    def on_directory(self, directory: Path) -> VisitState: ...

    def on_directory_exit(self, directory: Path) -> None:
        """Only called when on_directory returned CONTINUE and all children were visited."""
        ...

    def on_file(self, file: Path) -> None: ...


H = TypeVar("H", bound=VisitorHandler)


class TreeWalker(Generic[H]):
    """Walks a directory tree depth-first, in native enumeration order.

    Children are visited in the order the filesystem returns them. No sorting
    happens here: archive partitioning relies on every directory being entered
    before its files are seen.
    """

    def __init__(self, root: Path, handler: H) -> None:
        self.root = root
        self.handler = handler

    def visit(self) -> H:
        """Visit the tree and return the handler."""
        if self.root.is_dir():
            self._visit(self.root)
        else:
            logger.debug(f"Nothing to visit at {self.root}")
        return self.handler

    def _visit(self, directory: Path) -> None:
        if self.handler.on_directory(directory) == VisitState.SKIP_SUBTREE:
            return

        with os.scandir(directory) as entries:
            children = list(entries)

        for entry in children:
            path = directory / entry.name
            if entry.is_file():
                self.handler.on_file(path)
            elif entry.is_dir():
                self._visit(path)
            else:
                raise UnsupportedEntryError(f"Unsupported directory entry: {path}")

        self.handler.on_directory_exit(directory)
