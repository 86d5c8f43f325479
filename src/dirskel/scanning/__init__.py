"""Source enumeration for skeleton replication."""

from .attributes import is_excluded, read_attributes
from .discovery import SourceEnumerator, resolve_root
from .models import Entry, EntryAttributes, EntryKind

__all__ = [
    "Entry",
    "EntryAttributes",
    "EntryKind",
    "SourceEnumerator",
    "is_excluded",
    "read_attributes",
    "resolve_root",
]
