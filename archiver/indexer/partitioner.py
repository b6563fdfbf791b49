"""Archive partitioner - splits a tree into zip archives while indexing it.

Each directory directly under the partition root becomes one archive holding
its whole subtree; files sitting directly under the root go to a root archive
named after the root. Promoted folders (``0_dev`` by default) are pulled out
wherever they are nested and partitioned on their own, into an output
directory mirroring their location.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from archiver.storage.archive import ARCHIVE_SUFFIX, ArchiveUnit
from archiver.storage.index_store import IndexSink

from .classifier import Outcome, RecordClassifier
from .visitor import BULK_SIZE, IndexVisitor
from .walker import TreeWalker, VisitState

logger = logging.getLogger(__name__)

DEFAULT_PROMOTED_FOLDERS = frozenset({"0_dev"})


@dataclass
class PartitionState:
    """The archive unit currently receiving files, and the directory owning it."""

    current_directory: Path | None = None
    current_archive: ArchiveUnit | None = None

    @property
    def is_open(self) -> bool:
        return self.current_archive is not None

    def open(self, directory: Path, archive: ArchiveUnit) -> None:
        if self.is_open:
            raise RuntimeError(f"Archive already open for '{self.current_directory}'")
        self.current_directory = directory
        self.current_archive = archive

    def clear(self) -> None:
        self.current_directory = None
        self.current_archive = None


@dataclass
class Placement:
    archive: ArchiveUnit
    entry_name: str


class ArchivePartitioner:
    """Visitor writing archive units for one partition root and indexing its files."""

    def __init__(
        self,
        root: Path,
        output_dir: Path,
        sink: IndexSink,
        classifier: RecordClassifier,
        promoted_folders: frozenset[str] = DEFAULT_PROMOTED_FOLDERS,
        archive_base: Path | None = None,
        flush_every: int = BULK_SIZE,
        reserved_paths: frozenset[Path] = frozenset(),
    ) -> None:
        self.root = root
        self.output_dir = output_dir
        # Archive names are relative to the top-level output directory
        self.archive_base = archive_base or output_dir
        self.sink = sink
        self.classifier = classifier
        self.promoted_folders = promoted_folders
        self.flush_every = flush_every
        # Output locations owned by the caller, never written by a unit
        self.reserved_paths = reserved_paths
        self.state = PartitionState()
        self.indexer = IndexVisitor(root, sink, classifier, flush_every)
        self.units: list[ArchiveUnit] = []
        self.partitions: list["ArchivePartitioner"] = []

        output_dir.mkdir(parents=True, exist_ok=True)
        self.root_archive = self._create_unit(output_dir / f"{root.name}{ARCHIVE_SUFFIX}", root)

    def run(self) -> "ArchivePartitioner":
        """Walk the partition root to completion, closing any unit a failure leaves open."""
        try:
            return TreeWalker(self.root, self).visit()
        finally:
            self.close_open_units()

    def close_open_units(self) -> None:
        for unit in self.units:
            if unit.is_open:
                unit.close()
        self.state.clear()

    def all_units(self) -> list[ArchiveUnit]:
        """Units of this partition followed by those of its promoted partitions."""
        units = list(self.units)
        for nested in self.partitions:
            units.extend(nested.all_units())
        return units

    def on_directory(self, directory: Path) -> VisitState:
        if directory == self.root:
            return VisitState.CONTINUE

        if self.indexer.on_directory(directory) == VisitState.SKIP_SUBTREE:
            return VisitState.SKIP_SUBTREE

        # Nested promoted folders are ignored by this pass and become their own root
        if directory.name in self.promoted_folders:
            self._partition_promoted(directory)
            return VisitState.SKIP_SUBTREE

        if self.state.is_open:
            entry = directory.relative_to(self.state.current_directory).as_posix() + "/"
            logger.info(f"Adding directory '{entry}' from '{self.state.current_directory}'")
            self.state.current_archive.add_directory(entry)
            return VisitState.CONTINUE

        relative = directory.relative_to(self.root).as_posix()
        container_path = self.output_dir / f"{relative}{ARCHIVE_SUFFIX}"
        if container_path == self.root_archive.container_path:
            raise ValueError(f"Archive for '{directory}' would overwrite the root archive")
        self.state.open(directory, self._create_unit(container_path, directory))
        return VisitState.CONTINUE

    def on_directory_exit(self, directory: Path) -> None:
        if directory == self.state.current_directory:
            self.state.current_archive.close()
            self.state.clear()
        elif directory == self.root:
            self.root_archive.close()

    def on_file(self, file: Path) -> None:
        classification = self.classifier.classify_path(file)

        if classification.outcome == Outcome.INDEX_AND_ARCHIVE:
            placement = self._archive(file)
            archive = placement.archive.name if placement else None
            self.indexer.submit(self.indexer.build_record(file, classification, archive))
        elif classification.outcome == Outcome.ARCHIVE_ONLY:
            self._archive(file)
        else:
            logger.debug(f"Dropping '{file}'")

    def _archive(self, file: Path) -> Placement | None:
        placement = self._resolve_placement(file)
        if placement is None:
            logger.info(f"Ignoring {file}")
            return None

        logger.info(f"Adding '{file}' from '{placement.archive.owning_directory}'")
        placement.archive.add_file(file, placement.entry_name)
        return placement

    def _resolve_placement(self, file: Path) -> Placement | None:
        """Pick the archive a file goes to: the open unit, else the root archive."""
        if self.state.is_open:
            entry = file.relative_to(self.state.current_directory).as_posix()
            return Placement(self.state.current_archive, entry)

        if file.parent == self.root:
            return Placement(self.root_archive, file.name)
        # Only reachable with an enumeration order listing files before their directory
        return None

    def _partition_promoted(self, directory: Path) -> None:
        target = self.output_dir / directory.relative_to(self.root)
        self._check_reserved(target, directory)
        logger.info(f"Specific handling of '{directory}' to '{target}'")

        nested = ArchivePartitioner(
            directory,
            target,
            self.sink,
            self.classifier,
            promoted_folders=self.promoted_folders,
            archive_base=self.archive_base,
            flush_every=self.flush_every,
            reserved_paths=self.reserved_paths,
        )
        self.partitions.append(nested)
        nested.run()
        self.sink.flush()

    def _create_unit(self, container_path: Path, directory: Path) -> ArchiveUnit:
        self._check_reserved(container_path, directory)
        name = container_path.relative_to(self.archive_base).as_posix()
        unit = ArchiveUnit.create(container_path, directory, name)
        self.units.append(unit)
        return unit

    def _check_reserved(self, path: Path, directory: Path) -> None:
        for reserved in self.reserved_paths:
            if path == reserved or path.is_relative_to(reserved):
                raise ValueError(f"Output for '{directory}' would overwrite reserved path '{reserved}'")
