"""Executors that recreate directories and placeholder files at the destination."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path, PurePath
from typing import Iterable, Literal

from dirskel.errors import EntryAccessError
from dirskel.scanning.models import Entry

from .models import EntryFailure, PassResult
from .progress import ProgressTracker

LOGGER = logging.getLogger(__name__)

ErrorPolicy = Literal["abort", "skip"]


def relative_path(path: Path, source_root: Path) -> PurePath:
    """Return path with the source root prefix (and leading separator) removed."""
    try:
        return path.relative_to(source_root)
    except ValueError as exc:
        raise ValueError(f"{path} is outside source root {source_root}") from exc


def destination_for(entry: Entry, source_root: Path, destination_root: Path) -> Path:
    """Map a source entry to its location under the destination root."""
    return destination_root / relative_path(entry.path, source_root)


def record_failure(
    error: EntryAccessError,
    result: PassResult,
    *,
    on_error: ErrorPolicy,
) -> None:
    """Apply the error policy: raise on ``abort``, log and record on ``skip``."""
    if on_error == "abort":
        raise error
    LOGGER.warning("Skipping entry: %s", error)
    result.failures.append(
        EntryFailure(path=error.path, operation=error.operation, message=error.reason)
    )


class _PassExecutor(ABC):
    operation = ""

    def __init__(self, *, on_error: ErrorPolicy = "abort") -> None:
        self.on_error = on_error

    def replicate(
        self,
        entries: Iterable[Entry],
        *,
        source_root: Path,
        destination_root: Path,
        result: PassResult,
        tracker: ProgressTracker | None = None,
    ) -> PassResult:
        """Create the destination counterpart of each entry, in order.

        Args:
            entries: Materialized entries for this pass.
            source_root: Resolved source root the entries live under.
            destination_root: Destination root receiving the skeleton.
            result: Pass result updated in place.
            tracker: Optional progress tracker advanced once per entry.

        Returns:
            PassResult: The updated pass result.

        Raises:
            EntryAccessError: When creation fails and the policy is ``abort``.
        """
        for entry in entries:
            target = destination_for(entry, source_root, destination_root)
            try:
                self._create(target)
            except OSError as exc:
                error = EntryAccessError(target, self.operation, exc.strerror or str(exc))
                error.__cause__ = exc
                record_failure(error, result, on_error=self.on_error)
            else:
                result.created += 1
            if tracker is not None:
                tracker.advance()
        return result

    @abstractmethod
    def _create(self, target: Path) -> None:
        """Create the destination counterpart at target."""


class DirectoryReplicator(_PassExecutor):
    """Recreate directories under the destination with create-if-absent semantics."""

    operation = "create_directory"

    def _create(self, target: Path) -> None:
        if target.is_symlink() or (target.exists() and not target.is_dir()):
            target.unlink()
        target.mkdir(parents=True, exist_ok=True)


class FileReplicator(_PassExecutor):
    """Create zero-length placeholders, truncating any existing file."""

    operation = "create_file"

    def _create(self, target: Path) -> None:
        parent = target.parent
        if not parent.is_dir():
            LOGGER.debug("Creating missing parent %s", parent)
            parent.mkdir(parents=True, exist_ok=True)
        if target.is_symlink():
            target.unlink()
        with target.open("wb"):
            pass


__all__ = [
    "ErrorPolicy",
    "DirectoryReplicator",
    "FileReplicator",
    "destination_for",
    "record_failure",
    "relative_path",
]
