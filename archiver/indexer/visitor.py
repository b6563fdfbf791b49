"""Plain indexing visitor - submits file records to the index."""

import logging
from pathlib import Path

from archiver.errors import ContentReadError
from archiver.storage.index_store import FileRecord, IndexSink

from .classifier import Classification, Outcome, RecordClassifier
from .walker import VisitState

logger = logging.getLogger(__name__)

# Non-durable flush every N submitted records
BULK_SIZE = 100


class IndexVisitor:
    """Indexes every file of a tree that classifies as INDEX_AND_ARCHIVE."""

    def __init__(
        self,
        root: Path,
        sink: IndexSink,
        classifier: RecordClassifier,
        flush_every: int = BULK_SIZE,
    ) -> None:
        self.root = root
        self.sink = sink
        self.classifier = classifier
        self.flush_every = flush_every
        self._bulk_counter = 0

    def on_directory(self, directory: Path) -> VisitState:
        if self.classifier.is_forbidden_directory(directory.name):
            logger.debug(f"Skipping '{directory}'")
            return VisitState.SKIP_SUBTREE
        return VisitState.CONTINUE

    def on_directory_exit(self, directory: Path) -> None:
        pass

    def on_file(self, file: Path) -> None:
        classification = self.classifier.classify_path(file)
        if classification.outcome == Outcome.INDEX_AND_ARCHIVE:
            self.submit(self.build_record(file, classification))
        else:
            logger.debug(f"Not indexing '{file}' ({classification.outcome.value})")

    def build_record(
        self,
        file: Path,
        classification: Classification,
        archive: str | None = None,
    ) -> FileRecord:
        """Create the index record of a file, reading its content when flagged."""
        content = None
        if classification.include_content:
            try:
                content = file.read_text(encoding="utf-8-sig")
            except UnicodeDecodeError as e:
                raise ContentReadError(f"Cannot decode '{file}' as UTF-8: {e}") from e

        return FileRecord(
            path=file.relative_to(self.root).as_posix(),
            size=file.stat().st_size,
            content=content,
            archive=archive,
        )

    def submit(self, record: FileRecord) -> None:
        self.sink.submit(record)
        logger.info(f"Indexing '{record.path}'")

        self._bulk_counter += 1
        if self._bulk_counter == self.flush_every:
            logger.info("Flushing")
            self.sink.flush()
            self._bulk_counter = 0
