"""Compress a directory into partitioned archives and index it."""

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path

from archiver.config import Settings
from archiver.indexer import ArchivePartitioner, RecordClassifier
from archiver.storage import IndexSink, package_directory

logger = logging.getLogger(__name__)

# Working index location under the output directory, and its packaged form
WORK_INDEX_NAME = "_index"
INDEX_ARCHIVE_NAME = "_index.zip"


@dataclass
class CompressResult:
    """Outcome of a compress run."""

    records: int
    index_archive: Path
    archives: list[str] = field(default_factory=list)  # Relative to the output directory


def compress(
    input_dir: Path,
    output_dir: Path,
    settings: Settings,
    promoted_folders: frozenset[str] | None = None,
) -> CompressResult:
    """Partition input_dir into archives under output_dir, packaging the index alongside."""
    root = input_dir.resolve()
    if not root.is_dir():
        raise FileNotFoundError(f"Input directory does not exist: {input_dir}")

    output = output_dir.resolve()
    if output.is_relative_to(root):
        raise ValueError(f"Output directory must not be inside the input directory: {output_dir}")
    output.mkdir(parents=True, exist_ok=True)

    work_index = output / WORK_INDEX_NAME
    if work_index.exists():
        logger.info(f"Removing stale index {work_index}")
        shutil.rmtree(work_index)

    with IndexSink(work_index) as sink:
        partitioner = ArchivePartitioner(
            root,
            output,
            sink,
            RecordClassifier(settings.rules()),
            promoted_folders=promoted_folders if promoted_folders is not None else settings.promoted,
            flush_every=settings.flush_every,
            reserved_paths=frozenset({output / INDEX_ARCHIVE_NAME, work_index}),
        ).run()
        sink.flush(durable=True)

    index_archive = package_directory(work_index, output / INDEX_ARCHIVE_NAME)
    shutil.rmtree(work_index)

    archives = [unit.name for unit in partitioner.all_units()]
    logger.info(f"Compressed {root} into {len(archives)} archives, {sink.submitted} files indexed")
    return CompressResult(records=sink.submitted, index_archive=index_archive, archives=archives)
