"""Configuration models describing dirskel settings."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class DirskelBaseModel(BaseModel):
    """Shared configuration for dirskel Pydantic models."""

    model_config = ConfigDict(extra="forbid")


class ScanningOptions(DirskelBaseModel):
    """Options governing how source entries are classified during enumeration.

    Attributes:
        dotfiles_hidden: Whether a leading ``.`` marks an entry as hidden.
            ``auto`` applies the convention only on platforms without a
            hidden attribute, ``always`` and ``never`` force the choice.
    """

    dotfiles_hidden: Literal["auto", "always", "never"] = "auto"


class ProgressOptions(DirskelBaseModel):
    """Progress reporting cadence for each replication pass.

    Attributes:
        directory_interval: Emit a progress line every N directories.
        file_interval: Emit a progress line every N files.
    """

    directory_interval: int = 100
    file_interval: int = 1_000

    @field_validator("directory_interval", "file_interval")
    @classmethod
    def _positive(cls, value: int) -> int:
        if value < 1:
            raise ValueError("progress intervals must be at least 1")
        return value


class ReplicationOptions(DirskelBaseModel):
    """Behavior applied while creating destination entries.

    Attributes:
        on_error: ``abort`` stops the run on the first entry failure,
            ``skip`` records the failure and continues the pass.
    """

    on_error: Literal["abort", "skip"] = "abort"


class LoggingSettings(DirskelBaseModel):
    """Runtime logging configuration.

    Attributes:
        level: Logging verbosity level.
    """

    level: str = "WARNING"

    @field_validator("level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        normalized = value.upper()
        if normalized not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown logging level: {value}")
        return normalized


class CLIOptions(DirskelBaseModel):
    """CLI behavior defaults and presentation preferences.

    Attributes:
        quiet_default: Whether commands suppress non-error output by default.
        summary_default: Whether commands only print summary lines by default.
    """

    quiet_default: bool = False
    summary_default: bool = False


class DirskelConfig(DirskelBaseModel):
    """Top-level configuration struct for dirskel.

    Attributes:
        scanning: Source enumeration settings.
        progress: Progress reporting cadence.
        replication: Destination creation settings.
        logging: Logging configuration.
        cli: CLI presentation defaults.
    """

    scanning: ScanningOptions = Field(default_factory=ScanningOptions)
    progress: ProgressOptions = Field(default_factory=ProgressOptions)
    replication: ReplicationOptions = Field(default_factory=ReplicationOptions)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    cli: CLIOptions = Field(default_factory=CLIOptions)


__all__ = [
    "DirskelBaseModel",
    "ScanningOptions",
    "ProgressOptions",
    "ReplicationOptions",
    "LoggingSettings",
    "CLIOptions",
    "DirskelConfig",
]
