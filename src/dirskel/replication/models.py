"""Replication result data models."""

from __future__ import annotations

from pathlib import Path
from typing import List, Literal

from pydantic import BaseModel, Field


class EntryFailure(BaseModel):
    """Describes an entry that could not be enumerated or created.

    Attributes:
        path: Source or destination path that failed.
        operation: Operation that failed.
        message: Error text reported by the operating system.
    """

    path: Path
    operation: str
    message: str


class PassResult(BaseModel):
    """Outcome of a single replication pass.

    Attributes:
        kind: Which pass produced the result.
        total: Qualifying entries enumerated for the pass.
        created: Destination entries created or refreshed.
        failures: Entries skipped because of access errors.
        elapsed_seconds: Wall-clock duration of the pass.
    """

    kind: Literal["directories", "files"]
    total: int = 0
    created: int = 0
    failures: List[EntryFailure] = Field(default_factory=list)
    elapsed_seconds: float = 0.0

    @property
    def skipped(self) -> int:
        return len(self.failures)


class ReplicationSummary(BaseModel):
    """Aggregate outcome of a clone run."""

    source: Path
    destination: Path
    directories: PassResult = Field(default_factory=lambda: PassResult(kind="directories"))
    files: PassResult = Field(default_factory=lambda: PassResult(kind="files"))

    @property
    def failures(self) -> list[EntryFailure]:
        return [*self.directories.failures, *self.files.failures]


__all__ = ["EntryFailure", "PassResult", "ReplicationSummary"]
