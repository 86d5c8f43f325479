"""dirskel mirrors a directory tree as empty folders and zero-byte placeholder files."""

from importlib import metadata as _metadata

from dirskel.errors import (
    DestinationCreateError,
    EntryAccessError,
    PathNotFoundError,
    ReplicationError,
)
from dirskel.replication import ReplicationSummary, SkeletonCloner

__all__ = [
    "__version__",
    "SkeletonCloner",
    "ReplicationSummary",
    "ReplicationError",
    "PathNotFoundError",
    "DestinationCreateError",
    "EntryAccessError",
]


def __getattr__(name: str):
    if name == "__version__":
        return _metadata.version("dirskel")
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
