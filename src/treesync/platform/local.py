"""
Local filesystem backend.
"""

from __future__ import annotations

import os
import shutil
import stat as stat_module
from pathlib import Path

from treesync.core.models import EntryKind, EntryStat
from treesync.platform.base import FileSystemBackend

COPY_CHUNK_SIZE = 1024 * 1024


class LocalFileSystem(FileSystemBackend):
    """Backend operating on the OS filesystem."""

    def __init__(self, chunk_size: int = COPY_CHUNK_SIZE) -> None:
        self.chunk_size = chunk_size

    @property
    def name(self) -> str:
        return "local"

    def stat(self, path: Path, follow_symlinks: bool = False) -> EntryStat:
        info = os.stat(path) if follow_symlinks else os.lstat(path)
        if stat_module.S_ISLNK(info.st_mode):
            # Symlinks to regular files are synced by content; anything
            # else behind a link is never traversed.
            try:
                info = os.stat(path)
            except FileNotFoundError:
                return EntryStat(kind=EntryKind.OTHER)
            if not stat_module.S_ISREG(info.st_mode):
                return EntryStat(kind=EntryKind.OTHER)

        if stat_module.S_ISDIR(info.st_mode):
            kind = EntryKind.DIRECTORY
        elif stat_module.S_ISREG(info.st_mode):
            kind = EntryKind.FILE
        else:
            kind = EntryKind.OTHER
        return EntryStat(kind=kind, size=info.st_size, mtime_ns=info.st_mtime_ns)

    def list_dir(self, path: Path) -> list[str]:
        with os.scandir(path) as entries:
            return [entry.name for entry in entries]

    def make_dirs(self, path: Path) -> None:
        path.mkdir(parents=True, exist_ok=True)

    def copy_file(self, source: Path, destination: Path) -> int:
        destination.parent.mkdir(parents=True, exist_ok=True)

        with open(source, "rb") as src_handle, open(destination, "wb") as dst_handle:
            shutil.copyfileobj(src_handle, dst_handle, self.chunk_size)
            written = dst_handle.tell()

        # Re-read so a source modified during the copy stamps its latest mtime
        mtime_ns = os.stat(source).st_mtime_ns
        os.utime(destination, ns=(mtime_ns, mtime_ns))
        return written

    def remove_file(self, path: Path) -> None:
        path.unlink()

    def remove_dir(self, path: Path) -> None:
        path.rmdir()
