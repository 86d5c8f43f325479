"""Tests for source tree enumeration."""

from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

from dirskel.errors import EntryAccessError, PathNotFoundError
from dirskel.scanning import discovery
from dirskel.scanning.discovery import SourceEnumerator, resolve_root
from dirskel.scanning.models import EntryAttributes, EntryKind


def _build_tree(root: Path) -> Path:
    """Create a small source tree with visible and hidden entries.

    Layout::

        a/b/file1.txt
        a/c/
        a/.hidden/file2.txt
        a/.hidden/deeper/
        top.txt
        .dotfile
    """
    (root / "a" / "b").mkdir(parents=True)
    (root / "a" / "c").mkdir()
    (root / "a" / ".hidden" / "deeper").mkdir(parents=True)
    (root / "a" / "b" / "file1.txt").write_bytes(b"x" * 10_240)
    (root / "a" / ".hidden" / "file2.txt").write_text("secret", encoding="utf-8")
    (root / "top.txt").write_text("top", encoding="utf-8")
    (root / ".dotfile").write_text("dot", encoding="utf-8")
    return root


def _relative(paths, root: Path) -> set[str]:
    return {entry.path.relative_to(root).as_posix() for entry in paths}


def test_resolve_root_returns_absolute_path(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    (tmp_path / "src").mkdir()
    monkeypatch.chdir(tmp_path)

    resolved = resolve_root("src/../src")

    assert resolved == (tmp_path / "src").resolve()
    assert resolved.is_absolute()


def test_resolve_root_missing_raises(tmp_path: Path) -> None:
    with pytest.raises(PathNotFoundError) as excinfo:
        resolve_root(tmp_path / "missing")

    assert "missing" in str(excinfo.value)


def test_resolve_root_rejects_file(tmp_path: Path) -> None:
    target = tmp_path / "file.txt"
    target.write_text("data", encoding="utf-8")

    with pytest.raises(PathNotFoundError):
        resolve_root(target)


def test_directories_and_files_exclude_hidden_subtrees(tmp_path: Path) -> None:
    root = _build_tree(tmp_path / "src")
    enumerator = SourceEnumerator(dotfiles_hidden="always")

    directories = enumerator.directories(root)
    files = enumerator.files(root)

    assert _relative(directories, root) == {"a", "a/b", "a/c"}
    assert _relative(files, root) == {"a/b/file1.txt", "top.txt"}
    assert all(entry.kind is EntryKind.DIRECTORY for entry in directories)
    assert all(entry.kind is EntryKind.FILE for entry in files)
    assert all(entry.path.is_absolute() for entry in [*directories, *files])


def test_dotfiles_included_when_policy_is_never(tmp_path: Path) -> None:
    root = _build_tree(tmp_path / "src")
    enumerator = SourceEnumerator(dotfiles_hidden="never")

    assert "a/.hidden/deeper" in _relative(enumerator.directories(root), root)
    assert ".dotfile" in _relative(enumerator.files(root), root)


def test_parent_appears_before_children(tmp_path: Path) -> None:
    root = _build_tree(tmp_path / "src")

    order = [entry.path for entry in SourceEnumerator(dotfiles_hidden="always").directories(root)]

    assert order.index(root / "a") < order.index(root / "a" / "b")
    assert order.index(root / "a") < order.index(root / "a" / "c")


def test_each_entry_appears_once(tmp_path: Path) -> None:
    root = _build_tree(tmp_path / "src")
    enumerator = SourceEnumerator(dotfiles_hidden="never")

    directories = [entry.path for entry in enumerator.directories(root)]
    files = [entry.path for entry in enumerator.files(root)]

    assert len(directories) == len(set(directories))
    assert len(files) == len(set(files))


def test_system_flag_excludes_entry_and_descendants(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    root = tmp_path / "src"
    (root / "System Volume Information" / "inner").mkdir(parents=True)
    (root / "System Volume Information" / "tracking.log").write_text("x", encoding="utf-8")
    (root / "docs").mkdir()
    (root / "pagefile.sys").write_text("x", encoding="utf-8")

    def _fake_attributes(name, stat_result, *, dotfiles_hidden="auto"):
        return EntryAttributes(system=name in {"System Volume Information", "pagefile.sys"})

    monkeypatch.setattr(discovery, "read_attributes", _fake_attributes)
    enumerator = SourceEnumerator()

    assert _relative(enumerator.directories(root), root) == {"docs"}
    assert _relative(enumerator.files(root), root) == set()


@pytest.mark.skipif(sys.platform == "win32", reason="symlinks need privileges on Windows")
def test_symlinked_directory_is_listed_but_not_descended(tmp_path: Path) -> None:
    outside = tmp_path / "outside"
    (outside / "nested").mkdir(parents=True)
    (outside / "nested" / "payload.txt").write_text("x", encoding="utf-8")
    root = tmp_path / "src"
    root.mkdir()
    (root / "link").symlink_to(outside, target_is_directory=True)
    enumerator = SourceEnumerator(dotfiles_hidden="always")

    assert _relative(enumerator.directories(root), root) == {"link"}
    assert _relative(enumerator.files(root), root) == set()


def _failing_scandir(blocked: Path):
    real_scandir = os.scandir

    def _scandir(path):
        if Path(path) == blocked:
            raise PermissionError(13, "Permission denied", str(path))
        return real_scandir(path)

    return _scandir


def test_unreadable_directory_raises_by_default(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    root = _build_tree(tmp_path / "src")
    monkeypatch.setattr(discovery.os, "scandir", _failing_scandir(root / "a" / "b"))

    with pytest.raises(EntryAccessError) as excinfo:
        SourceEnumerator(dotfiles_hidden="always").files(root)

    assert excinfo.value.operation == "enumerate"
    assert excinfo.value.path == root / "a" / "b"
    assert isinstance(excinfo.value.__cause__, PermissionError)
    assert excinfo.value.reason == "Permission denied"


def test_unreadable_directory_reported_to_handler(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    root = _build_tree(tmp_path / "src")
    monkeypatch.setattr(discovery.os, "scandir", _failing_scandir(root / "a" / "b"))
    errors: list[EntryAccessError] = []

    files = SourceEnumerator(dotfiles_hidden="always", on_error=errors.append).files(root)

    assert _relative(files, root) == {"top.txt"}
    assert [error.path for error in errors] == [root / "a" / "b"]
