"""
TreeSync Filesystem Backend Base.

Defines the abstract interface the synchronizer uses for all
filesystem access, so the sync logic can run against the local
filesystem or against an in-memory tree.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from treesync.core.models import EntryStat


class FileSystemBackend(ABC):
    """Abstract base class for filesystem operations."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Backend name (e.g., 'local', 'memory')."""

    @abstractmethod
    def stat(self, path: Path, follow_symlinks: bool = False) -> EntryStat:
        """
        Get metadata for a path.
        Directory symlinks are only followed when follow_symlinks is set.
        Raises FileNotFoundError if the path does not exist, OSError otherwise.
        """

    @abstractmethod
    def list_dir(self, path: Path) -> list[str]:
        """List the names inside a directory. Raises OSError."""

    @abstractmethod
    def make_dirs(self, path: Path) -> None:
        """Create a directory and any missing ancestors."""

    @abstractmethod
    def copy_file(self, source: Path, destination: Path) -> int:
        """
        Copy a file's contents and modification time.
        Returns the number of bytes written.
        """

    @abstractmethod
    def remove_file(self, path: Path) -> None:
        """Remove a single file."""

    @abstractmethod
    def remove_dir(self, path: Path) -> None:
        """Remove an empty directory. Raises OSError(ENOTEMPTY) otherwise."""
