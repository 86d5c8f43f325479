"""Progress estimation for replication passes."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable


@dataclass(slots=True)
class ProgressState:
    """Mutable counters for a single pass.

    Attributes:
        total: Number of entries the pass will process.
        processed: Entries processed so far.
        started_at: Monotonic timestamp captured when the pass began.
    """

    total: int
    processed: int = 0
    started_at: float = field(default_factory=time.monotonic)


@dataclass(frozen=True, slots=True)
class ProgressSnapshot:
    """Point-in-time view of a pass.

    Attributes:
        label: Pass name, e.g. ``Folders`` or ``Files``.
        processed: Entries processed so far.
        total: Entries in the pass.
        elapsed: Seconds since the pass started.
        average: Mean seconds per processed entry.
        remaining: Linear projection of seconds left.
        percent: Completion percentage in ``[0, 100]``.
    """

    label: str
    processed: int
    total: int
    elapsed: float
    average: float
    remaining: float
    percent: float

    @property
    def finished(self) -> bool:
        return self.processed >= self.total


ProgressObserver = Callable[[ProgressSnapshot], None]


def estimate(
    state: ProgressState, *, label: str = "", now: float | None = None
) -> ProgressSnapshot:
    """Compute elapsed time, per-item average and the remaining-time projection."""
    current = time.monotonic() if now is None else now
    elapsed = max(current - state.started_at, 0.0)
    average = elapsed / state.processed if state.processed else 0.0
    outstanding = max(state.total - state.processed, 0)
    percent = 100.0 if state.total == 0 else min(state.processed / state.total * 100.0, 100.0)
    return ProgressSnapshot(
        label=label,
        processed=state.processed,
        total=state.total,
        elapsed=elapsed,
        average=average,
        remaining=average * outstanding,
        percent=percent,
    )


class ProgressTracker:
    """Advance a pass's counters and notify an observer at a fixed cadence.

    The observer is called every ``interval`` entries and always on the final
    entry of the pass. Passes with no entries never emit.
    """

    def __init__(
        self,
        label: str,
        total: int,
        *,
        interval: int,
        observer: ProgressObserver | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if interval < 1:
            raise ValueError("interval must be at least 1")
        self.label = label
        self.interval = interval
        self.observer = observer
        self._clock = clock
        self.state = ProgressState(total=total, started_at=clock())

    def advance(self) -> ProgressSnapshot | None:
        """Count one processed entry and emit a snapshot when the cadence is due."""
        self.state.processed += 1
        processed = self.state.processed
        if processed % self.interval and processed != self.state.total:
            return None
        snapshot = self.snapshot()
        if self.observer is not None:
            self.observer(snapshot)
        return snapshot

    def snapshot(self) -> ProgressSnapshot:
        return estimate(self.state, label=self.label, now=self._clock())

    def elapsed(self) -> float:
        return max(self._clock() - self.state.started_at, 0.0)


def format_snapshot(snapshot: ProgressSnapshot) -> str:
    """Render a snapshot as a single human-readable progress line."""
    return (
        f"{snapshot.label} {snapshot.processed}/{snapshot.total} "
        f"({snapshot.percent:.1f}%) ~ {snapshot.remaining:.0f}s remaining"
    )


__all__ = [
    "ProgressState",
    "ProgressSnapshot",
    "ProgressObserver",
    "ProgressTracker",
    "estimate",
    "format_snapshot",
]
