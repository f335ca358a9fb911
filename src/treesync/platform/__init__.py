"""
TreeSync Filesystem Abstraction Layer.

Provides the filesystem backends used by the synchronizer.
"""

from __future__ import annotations

from treesync.platform.base import FileSystemBackend
from treesync.platform.local import LocalFileSystem


def get_filesystem_backend() -> FileSystemBackend:
    """Get the filesystem backend for the current machine."""
    return LocalFileSystem()


__all__ = [
    "FileSystemBackend",
    "LocalFileSystem",
    "get_filesystem_backend",
]
