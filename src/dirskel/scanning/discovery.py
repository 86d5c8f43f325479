"""Source tree discovery utilities."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Callable, Iterator

from dirskel.errors import EntryAccessError, PathNotFoundError

from .attributes import DotfilePolicy, is_excluded, read_attributes
from .models import Entry, EntryKind

LOGGER = logging.getLogger(__name__)

ErrorHandler = Callable[[EntryAccessError], None]


def resolve_root(path: Path | str) -> Path:
    """Return the absolute, normalized form of a source root.

    Raises:
        PathNotFoundError: If the path does not exist or is not a directory.
    """
    candidate = Path(path).expanduser()
    try:
        resolved = candidate.resolve(strict=True)
    except (OSError, RuntimeError) as exc:
        raise PathNotFoundError(candidate) from exc
    if not resolved.is_dir():
        raise PathNotFoundError(resolved)
    return resolved


def _raise(error: EntryAccessError) -> None:
    raise error


class SourceEnumerator:
    """Enumerate qualifying directories and files beneath a source root.

    Entries flagged hidden or system are dropped, and excluded directories are
    never descended into. Each call walks the whole tree again; nothing is
    cached between the directory and file enumerations.
    """

    def __init__(
        self,
        *,
        dotfiles_hidden: DotfilePolicy = "auto",
        on_error: ErrorHandler | None = None,
    ) -> None:
        self.dotfiles_hidden = dotfiles_hidden
        self.on_error = on_error or _raise

    def directories(self, root: Path) -> list[Entry]:
        """Return every qualifying directory under root, materialized in full."""
        return [entry for entry in self._walk(root) if entry.kind is EntryKind.DIRECTORY]

    def files(self, root: Path) -> list[Entry]:
        """Return every qualifying file under root, materialized in full."""
        return [entry for entry in self._walk(root) if entry.kind is EntryKind.FILE]

    def _walk(self, root: Path) -> Iterator[Entry]:
        """Depth-first walk yielding qualifying entries; symlinks are not followed."""
        pending = [root]
        while pending:
            directory = pending.pop()
            try:
                with os.scandir(directory) as iterator:
                    children = list(iterator)
            except OSError as exc:
                self._report(directory, exc)
                continue

            descend: list[Path] = []
            for child in children:
                entry = self._to_entry(child)
                if entry is None:
                    continue
                if is_excluded(entry.attributes):
                    LOGGER.debug(
                        "Skipping %s (hidden=%s, system=%s)",
                        entry.path,
                        entry.attributes.hidden,
                        entry.attributes.system,
                    )
                    continue
                yield entry
                if entry.is_directory and not child.is_symlink():
                    descend.append(entry.path)
            pending.extend(reversed(descend))

    def _to_entry(self, child: os.DirEntry[str]) -> Entry | None:
        path = Path(child.path)
        try:
            info = child.stat(follow_symlinks=False)
            is_dir = child.is_dir()
        except OSError as exc:
            self._report(path, exc)
            return None
        attributes = read_attributes(child.name, info, dotfiles_hidden=self.dotfiles_hidden)
        kind = EntryKind.DIRECTORY if is_dir else EntryKind.FILE
        return Entry(path=path, kind=kind, attributes=attributes)

    def _report(self, path: Path, exc: OSError) -> None:
        error = EntryAccessError(path, "enumerate", exc.strerror or str(exc))
        error.__cause__ = exc
        self.on_error(error)


__all__ = ["SourceEnumerator", "resolve_root", "ErrorHandler"]
