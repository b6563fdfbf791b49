"""Zip archive units written by the partitioner."""

import logging
from pathlib import Path
from zipfile import ZIP_DEFLATED, ZipFile

from archiver.errors import ArchiveClosedError

logger = logging.getLogger(__name__)

ARCHIVE_SUFFIX = ".zip"

# Smallest output over speed
COMPRESSION_LEVEL = 9


class ArchiveUnit:
    """One zip container, append-only while open, never reopened once closed."""

    def __init__(self, container_path: Path, owning_directory: Path, name: str) -> None:
        self.container_path = container_path
        self.owning_directory = owning_directory
        self.name = name
        self.entries: list[str] = []
        self._zip: ZipFile | None = None
        self._closed = False

    @classmethod
    def create(cls, container_path: Path, owning_directory: Path, name: str) -> "ArchiveUnit":
        """Create the container on disk, replacing any previous one."""
        unit = cls(container_path, owning_directory, name)
        unit.open()
        return unit

    @property
    def is_open(self) -> bool:
        return self._zip is not None

    def open(self) -> None:
        if self._closed or self._zip is not None:
            raise ArchiveClosedError(f"Archive unit cannot be reopened: {self.name}")
        self.container_path.parent.mkdir(parents=True, exist_ok=True)
        self._zip = ZipFile(
            self.container_path,
            "w",
            compression=ZIP_DEFLATED,
            compresslevel=COMPRESSION_LEVEL,
        )
        logger.info(f"Creating {self.container_path}")

    def add_file(self, source: Path, entry_name: str) -> None:
        """Add a file under entry_name (``/`` separated)."""
        self._require_open().write(source, arcname=entry_name)
        self.entries.append(entry_name)

    def add_directory(self, entry_name: str) -> None:
        """Add an empty directory marker; a trailing ``/`` is appended if missing."""
        if not entry_name.endswith("/"):
            entry_name += "/"
        self._require_open().mkdir(entry_name)
        self.entries.append(entry_name)

    def close(self) -> None:
        self._require_open().close()
        self._zip = None
        self._closed = True
        logger.info(f"Archived '{self.owning_directory}'")

    def _require_open(self) -> ZipFile:
        if self._zip is None:
            raise ArchiveClosedError(f"Archive unit is not open: {self.name}")
        return self._zip

    def __repr__(self) -> str:
        state = "open" if self.is_open else "closed"
        return f"ArchiveUnit({self.name!r}, {state})"


def package_directory(source_dir: Path, destination: Path) -> Path:
    """Zip the files directly under source_dir into destination, entry = file name."""
    if not source_dir.is_dir():
        raise FileNotFoundError(f"Package source directory not found: {source_dir}")

    destination.parent.mkdir(parents=True, exist_ok=True)
    with ZipFile(destination, "w", compression=ZIP_DEFLATED) as archive:
        for path in sorted(source_dir.iterdir()):
            if path.is_file():
                archive.write(path, arcname=path.name)

    logger.info(f"Packaged {source_dir} into {destination}")
    return destination
