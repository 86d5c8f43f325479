"""Directory skeleton replication."""

from .executor import DirectoryReplicator, FileReplicator, destination_for, relative_path
from .models import EntryFailure, PassResult, ReplicationSummary
from .progress import ProgressSnapshot, ProgressState, ProgressTracker, estimate, format_snapshot
from .service import SkeletonCloner, prepare_destination

__all__ = [
    "DirectoryReplicator",
    "FileReplicator",
    "destination_for",
    "relative_path",
    "EntryFailure",
    "PassResult",
    "ReplicationSummary",
    "ProgressSnapshot",
    "ProgressState",
    "ProgressTracker",
    "estimate",
    "format_snapshot",
    "SkeletonCloner",
    "prepare_destination",
]
