"""Index a directory without archiving it."""

import logging
from pathlib import Path

from archiver.config import Settings
from archiver.indexer import IndexVisitor, RecordClassifier, TreeWalker
from archiver.storage import IndexSink

logger = logging.getLogger(__name__)


def build_index(source: Path, index_dir: Path, settings: Settings) -> int:
    """Index every eligible file under source into index_dir.

    Returns:
        Number of records submitted
    """
    root = source.resolve()
    if not root.is_dir():
        raise FileNotFoundError(f"Source directory does not exist: {source}")

    classifier = RecordClassifier(settings.rules())
    with IndexSink(index_dir) as sink:
        TreeWalker(root, IndexVisitor(root, sink, classifier, settings.flush_every)).visit()
        sink.flush(durable=True)

    logger.info(f"Indexed {sink.submitted} files from {root}")
    return sink.submitted
