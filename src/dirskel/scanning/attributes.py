"""Hidden/system attribute detection across host platforms.

Windows reports attributes through ``st_file_attributes``; macOS and the BSDs
expose a ``UF_HIDDEN`` bit in ``st_flags``. Other POSIX systems have no hidden
bit at all, so the leading-dot naming convention stands in for it there.
"""

from __future__ import annotations

import os
import stat
from typing import Literal

from .models import EntryAttributes

DotfilePolicy = Literal["auto", "always", "never"]


def _is_dotfile(name: str) -> bool:
    return name.startswith(".") and name not in (".", "..")


def read_attributes(
    name: str,
    stat_result: os.stat_result,
    *,
    dotfiles_hidden: DotfilePolicy = "auto",
) -> EntryAttributes:
    """Return the filtering attributes for an entry.

    Args:
        name: Final path component of the entry.
        stat_result: Result of ``lstat`` (or ``DirEntry.stat(follow_symlinks=False)``).
        dotfiles_hidden: Policy for treating leading-dot names as hidden.

    Returns:
        EntryAttributes: Hidden/system flags plus the raw platform flag word.
    """
    win_attributes = getattr(stat_result, "st_file_attributes", None)
    bsd_flags = getattr(stat_result, "st_flags", None)

    hidden = False
    system = False
    flags = 0
    if win_attributes is not None:
        flags = win_attributes
        hidden = bool(win_attributes & stat.FILE_ATTRIBUTE_HIDDEN)
        system = bool(win_attributes & stat.FILE_ATTRIBUTE_SYSTEM)
    elif bsd_flags is not None:
        flags = bsd_flags
        hidden = bool(bsd_flags & stat.UF_HIDDEN)

    has_native_hidden = win_attributes is not None or bsd_flags is not None
    if dotfiles_hidden == "always" or (dotfiles_hidden == "auto" and not has_native_hidden):
        hidden = hidden or _is_dotfile(name)

    return EntryAttributes(hidden=hidden, system=system, flags=flags)


def is_excluded(attributes: EntryAttributes) -> bool:
    """Return True when an entry must not be replicated."""
    return attributes.hidden or attributes.system


__all__ = ["DotfilePolicy", "read_attributes", "is_excluded"]
