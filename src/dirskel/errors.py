"""Errors raised while cloning a directory skeleton."""

from __future__ import annotations

from pathlib import Path


class ReplicationError(Exception):
    """Base exception for skeleton replication failures."""


class PathNotFoundError(ReplicationError):
    """Raised when the source root cannot be resolved to an existing directory."""

    def __init__(self, path: Path | str) -> None:
        super().__init__(f"Source path not found: {path}")
        self.path = Path(path)


class DestinationCreateError(ReplicationError):
    """Raised when the destination root cannot be created or is unusable."""

    def __init__(self, path: Path | str, reason: str) -> None:
        super().__init__(f"Cannot create destination {path}: {reason}")
        self.path = Path(path)
        self.reason = reason


class EntryAccessError(ReplicationError):
    """Raised when a single entry cannot be enumerated or created.

    Attributes:
        path: Path of the entry that failed.
        operation: One of ``enumerate``, ``create_directory`` or ``create_file``.
    """

    def __init__(self, path: Path | str, operation: str, reason: str) -> None:
        super().__init__(f"{operation} failed for {path}: {reason}")
        self.path = Path(path)
        self.operation = operation
        self.reason = reason


__all__ = [
    "ReplicationError",
    "PathNotFoundError",
    "DestinationCreateError",
    "EntryAccessError",
]
