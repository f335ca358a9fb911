"""
Tree scanning.

Turns a directory tree into a TreeListing keyed by relative POSIX
paths, collecting per-entry errors instead of aborting.
"""

from __future__ import annotations

import fnmatch
from pathlib import Path, PurePosixPath
from typing import Iterable

from treesync.core.models import ROOT_PATH, EntryKind, TreeEntry, TreeListing
from treesync.platform.base import FileSystemBackend


class SyncRootError(Exception):
    """Raised when a root directory cannot be scanned at all."""

    def __init__(self, root: Path, reason: str) -> None:
        super().__init__(f"{root}: {reason}")
        self.root = root
        self.reason = reason


class SourceRootError(SyncRootError):
    """The source root is missing, not a directory, or unreadable."""


class TargetRootError(SyncRootError):
    """The target root exists but cannot be scanned."""


def is_excluded(relative_path: str, patterns: Iterable[str]) -> bool:
    name = PurePosixPath(relative_path).name
    return any(
        fnmatch.fnmatch(relative_path, pattern) or fnmatch.fnmatch(name, pattern)
        for pattern in patterns
    )


def join_relative(root: Path, relative_path: str) -> Path:
    """Map a relative POSIX path onto a root."""
    if relative_path == ROOT_PATH:
        return root
    return root.joinpath(*PurePosixPath(relative_path).parts)


def _child_path(parent: str, name: str) -> str:
    return name if parent == ROOT_PATH else f"{parent}/{name}"


def scan_tree(
    backend: FileSystemBackend,
    root: Path,
    *,
    exclude_patterns: Iterable[str] = (),
    missing_ok: bool = False,
    keep_special: bool = False,
    error_class: type[SyncRootError] = SyncRootError,
) -> TreeListing:
    """
    Scan root depth-first and return its listing.

    The root itself is recorded under ".". Failing to stat or list the
    root raises error_class; a missing root returns an empty listing
    when missing_ok is set. Every other failure is recorded on the
    listing and the walk moves on.

    Entries that are neither files nor directories (directory symlinks,
    dangling links, sockets) are reported as unsupported, unless
    keep_special is set: then they are listed as leaves so a cleanup
    pass can unlink them.
    """
    patterns = list(exclude_patterns)
    listing = TreeListing(root=root)

    try:
        root_stat = backend.stat(root, follow_symlinks=True)
    except FileNotFoundError as exc:
        if missing_ok:
            return listing
        raise error_class(root, "does not exist") from exc
    except OSError as exc:
        raise error_class(root, str(exc)) from exc

    if not root_stat.is_dir:
        raise error_class(root, "not a directory")

    try:
        names = backend.list_dir(root)
    except OSError as exc:
        raise error_class(root, str(exc)) from exc

    listing.entries[ROOT_PATH] = TreeEntry(ROOT_PATH, root_stat)
    stack: list[tuple[str, list[str]]] = [(ROOT_PATH, names)]

    while stack:
        parent, children = stack.pop()
        subdirs: list[tuple[str, list[str]]] = []

        for name in sorted(children):
            relative_path = _child_path(parent, name)
            if patterns and is_excluded(relative_path, patterns):
                continue

            path = join_relative(root, relative_path)
            try:
                entry_stat = backend.stat(path)
            except OSError as exc:
                _record_error(listing, relative_path, exc)
                continue

            if entry_stat.kind is EntryKind.OTHER and not keep_special:
                listing.unreadable.add(relative_path)
                listing.errors.append((relative_path, "unsupported entry type"))
                continue

            listing.entries[relative_path] = TreeEntry(relative_path, entry_stat)
            if entry_stat.is_dir:
                try:
                    subdirs.append((relative_path, backend.list_dir(path)))
                except OSError as exc:
                    _record_error(listing, relative_path, exc)

        stack.extend(reversed(subdirs))

    return listing


def _record_error(listing: TreeListing, relative_path: str, exc: OSError) -> None:
    listing.unreadable.add(relative_path)
    listing.errors.append((relative_path, exc.strerror or str(exc)))
