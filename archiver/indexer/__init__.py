"""Directory traversal, classification and archive partitioning."""

from .classifier import (
    Classification,
    ClassificationRules,
    Outcome,
    RecordClassifier,
    extension_of,
)
from .partitioner import ArchivePartitioner, PartitionState
from .visitor import IndexVisitor
from .walker import TreeWalker, UnsupportedEntryError, VisitorHandler, VisitState

__all__ = [
    "ArchivePartitioner",
    "Classification",
    "ClassificationRules",
    "IndexVisitor",
    "Outcome",
    "PartitionState",
    "RecordClassifier",
    "TreeWalker",
    "UnsupportedEntryError",
    "VisitState",
    "VisitorHandler",
    "extension_of",
]
