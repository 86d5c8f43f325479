"""Two-pass skeleton cloning: directories first, then placeholder files."""

from __future__ import annotations

import logging
from functools import partial
from pathlib import Path

from dirskel.config.models import DirskelConfig
from dirskel.errors import DestinationCreateError, EntryAccessError
from dirskel.scanning.discovery import SourceEnumerator, resolve_root
from dirskel.scanning.models import Entry

from .executor import DirectoryReplicator, ErrorPolicy, FileReplicator, record_failure
from .models import PassResult, ReplicationSummary
from .progress import ProgressObserver, ProgressTracker

LOGGER = logging.getLogger(__name__)

DIRECTORY_LABEL = "Folders"
FILE_LABEL = "Files"


def prepare_destination(destination: Path | str, source_root: Path) -> Path:
    """Create the destination root and return its resolved path.

    Raises:
        DestinationCreateError: If the root cannot be created or overlaps the source.
    """
    target = Path(destination).expanduser().resolve()
    if target == source_root or source_root in target.parents:
        raise DestinationCreateError(target, f"destination lies inside source {source_root}")
    try:
        target.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise DestinationCreateError(target, exc.strerror or str(exc)) from exc
    return target


class SkeletonCloner:
    """Mirror a source tree into a destination as empty directories and files."""

    def __init__(
        self,
        config: DirskelConfig | None = None,
        *,
        observer: ProgressObserver | None = None,
    ) -> None:
        self.config = config or DirskelConfig()
        self.observer = observer
        self._unreadable: set[Path] = set()

    @property
    def on_error(self) -> ErrorPolicy:
        return self.config.replication.on_error

    def run(self, source: Path | str, destination: Path | str) -> ReplicationSummary:
        """Replicate the structure of source into destination.

        Args:
            source: Source root to mirror.
            destination: Destination root; created when missing.

        Returns:
            ReplicationSummary: Counts and failures for both passes.

        Raises:
            PathNotFoundError: If the source root cannot be resolved.
            DestinationCreateError: If the destination root cannot be created.
            EntryAccessError: If an entry fails and the policy is ``abort``.
        """
        source_root = resolve_root(source)
        destination_root = prepare_destination(destination, source_root)
        summary = ReplicationSummary(source=source_root, destination=destination_root)
        self._unreadable.clear()

        LOGGER.info("Cloning structure of %s into %s", source_root, destination_root)
        self.replicate_directories(source_root, destination_root, summary.directories)
        self.replicate_files(source_root, destination_root, summary.files)
        return summary

    def replicate_directories(
        self, source_root: Path, destination_root: Path, result: PassResult
    ) -> PassResult:
        """Run the directory pass."""
        enumerator = self._enumerator(result)
        entries = enumerator.directories(source_root)
        return self._run_pass(
            DirectoryReplicator(on_error=self.on_error),
            entries,
            label=DIRECTORY_LABEL,
            interval=self.config.progress.directory_interval,
            source_root=source_root,
            destination_root=destination_root,
            result=result,
        )

    def replicate_files(
        self, source_root: Path, destination_root: Path, result: PassResult
    ) -> PassResult:
        """Run the file pass."""
        enumerator = self._enumerator(result)
        entries = enumerator.files(source_root)
        return self._run_pass(
            FileReplicator(on_error=self.on_error),
            entries,
            label=FILE_LABEL,
            interval=self.config.progress.file_interval,
            source_root=source_root,
            destination_root=destination_root,
            result=result,
        )

    def _enumerator(self, result: PassResult) -> SourceEnumerator:
        return SourceEnumerator(
            dotfiles_hidden=self.config.scanning.dotfiles_hidden,
            on_error=partial(self._record_enumeration_failure, result=result),
        )

    def _record_enumeration_failure(self, error: EntryAccessError, result: PassResult) -> None:
        # Each unreadable path is recorded once per run, not once per pass.
        if error.path in self._unreadable:
            return
        self._unreadable.add(error.path)
        record_failure(error, result, on_error=self.on_error)

    def _run_pass(
        self,
        executor: DirectoryReplicator | FileReplicator,
        entries: list[Entry],
        *,
        label: str,
        interval: int,
        source_root: Path,
        destination_root: Path,
        result: PassResult,
    ) -> PassResult:
        result.total = len(entries)
        LOGGER.info("%s pass: %d entries", label, result.total)
        tracker = ProgressTracker(label, result.total, interval=interval, observer=self.observer)
        executor.replicate(
            entries,
            source_root=source_root,
            destination_root=destination_root,
            result=result,
            tracker=tracker,
        )
        result.elapsed_seconds = tracker.elapsed()
        LOGGER.info(
            "%s pass finished: created=%d failures=%d in %.2fs",
            label,
            result.created,
            result.skipped,
            result.elapsed_seconds,
        )
        return result


__all__ = ["SkeletonCloner", "prepare_destination", "DIRECTORY_LABEL", "FILE_LABEL"]
