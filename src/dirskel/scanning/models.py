"""Entry models produced by source enumeration."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class EntryKind(str, Enum):
    """Filesystem node type."""

    DIRECTORY = "directory"
    FILE = "file"


@dataclass(frozen=True, slots=True)
class EntryAttributes:
    """Platform attribute flags relevant to filtering.

    Attributes:
        hidden: Entry carries a hidden marker (attribute bit or dotfile convention).
        system: Entry carries the Windows system attribute.
        flags: Raw platform flag word (``st_file_attributes`` or ``st_flags``).
    """

    hidden: bool = False
    system: bool = False
    flags: int = 0


@dataclass(frozen=True, slots=True)
class Entry:
    """A directory or file discovered under the source root.

    Attributes:
        path: Absolute path of the entry.
        kind: Whether the entry is a directory or a file.
        attributes: Attribute flags read during enumeration.
    """

    path: Path
    kind: EntryKind
    attributes: EntryAttributes = field(default_factory=EntryAttributes)

    @property
    def is_directory(self) -> bool:
        return self.kind is EntryKind.DIRECTORY


__all__ = ["EntryKind", "EntryAttributes", "Entry"]
