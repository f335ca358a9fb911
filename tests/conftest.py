"""
Pytest configuration and fixtures for TreeSync tests.
"""

import errno
import os
import sys
import tempfile
from pathlib import Path, PurePosixPath
from typing import Generator

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from treesync.core.models import EntryKind, EntryStat  # noqa: E402
from treesync.platform.base import FileSystemBackend  # noqa: E402


class MemoryFileSystem(FileSystemBackend):
    """
    In-memory backend: directories are a set, files map to (bytes, mtime_ns).
    Special entries stand in for symlinks and sockets the local backend
    reports as EntryKind.OTHER.
    """

    def __init__(self) -> None:
        self.dirs: set[PurePosixPath] = {PurePosixPath("/")}
        self.files: dict[PurePosixPath, tuple[bytes, int]] = {}
        self.special: set[PurePosixPath] = set()
        self.failing: dict[PurePosixPath, OSError] = {}
        self.unlistable: set[PurePosixPath] = set()
        self.clock = 1_700_000_000 * 1_000_000_000
        self.calls: list[tuple[str, str]] = []

    @property
    def name(self) -> str:
        return "memory"

    @staticmethod
    def _key(path: Path | str) -> PurePosixPath:
        return PurePosixPath(str(path))

    # ---- helpers used by tests ----

    def mkdir(self, path: str) -> None:
        key = self._key(path)
        self.dirs.add(key)
        self.dirs.update(key.parents)

    def write(self, path: str, data: bytes | str, mtime_ns: int | None = None) -> None:
        key = self._key(path)
        if isinstance(data, str):
            data = data.encode()
        self.mkdir(str(key.parent))
        if mtime_ns is None:
            self.clock += 1_000_000_000
            mtime_ns = self.clock
        self.files[key] = (data, mtime_ns)

    def read(self, path: str) -> bytes:
        return self.files[self._key(path)][0]

    def mtime(self, path: str) -> int:
        return self.files[self._key(path)][1]

    def has(self, path: str) -> bool:
        key = self._key(path)
        return key in self.files or key in self.dirs or key in self.special

    def special_entry(self, path: str) -> None:
        key = self._key(path)
        self.mkdir(str(key.parent))
        self.special.add(key)

    def _all(self) -> set[PurePosixPath]:
        return self.dirs | set(self.files) | self.special

    def fail_on(self, path: str, error: OSError) -> None:
        self.failing[self._key(path)] = error

    def _check(self, op: str, path: Path | str) -> PurePosixPath:
        key = self._key(path)
        self.calls.append((op, str(key)))
        if key in self.failing:
            raise self.failing[key]
        return key

    # ---- backend interface ----

    def stat(self, path: Path, follow_symlinks: bool = False) -> EntryStat:
        key = self._check("stat", path)
        if key in self.dirs:
            return EntryStat(kind=EntryKind.DIRECTORY)
        if key in self.files:
            data, mtime_ns = self.files[key]
            return EntryStat(kind=EntryKind.FILE, size=len(data), mtime_ns=mtime_ns)
        if key in self.special:
            return EntryStat(kind=EntryKind.OTHER)
        raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(key))

    def list_dir(self, path: Path) -> list[str]:
        key = self._key(path)
        if key in self.unlistable:
            raise PermissionError(errno.EACCES, os.strerror(errno.EACCES), str(key))
        if key not in self.dirs:
            raise NotADirectoryError(errno.ENOTDIR, os.strerror(errno.ENOTDIR), str(key))
        children = [p for p in self._all() if p.parent == key and p != key]
        return [child.name for child in children]

    def make_dirs(self, path: Path) -> None:
        key = self._check("make_dirs", path)
        for candidate in [key, *key.parents]:
            if candidate in self.files:
                raise FileExistsError(errno.EEXIST, os.strerror(errno.EEXIST), str(candidate))
        self.mkdir(str(key))

    def copy_file(self, source: Path, destination: Path) -> int:
        src = self._key(source)
        dst = self._check("copy_file", destination)
        if dst.parent in self.files:
            raise NotADirectoryError(errno.ENOTDIR, os.strerror(errno.ENOTDIR), str(dst))
        data, _ = self.files[src]
        self.mkdir(str(dst.parent))
        self.files[dst] = (data, self.files[src][1])
        return len(data)

    def remove_file(self, path: Path) -> None:
        key = self._check("remove_file", path)
        if key in self.special:
            self.special.discard(key)
            return
        del self.files[key]

    def remove_dir(self, path: Path) -> None:
        key = self._check("remove_dir", path)
        if any(p.parent == key for p in self._all() if p != key):
            raise OSError(errno.ENOTEMPTY, os.strerror(errno.ENOTEMPTY), str(key))
        self.dirs.discard(key)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def memory_fs() -> MemoryFileSystem:
    """An in-memory backend with empty /src and /dst roots."""
    fs = MemoryFileSystem()
    fs.mkdir("/src")
    fs.mkdir("/dst")
    return fs


@pytest.fixture
def write_file():
    """Write a file on disk, creating parents, with an optional mtime in seconds."""

    def _write(path: Path, content: str, mtime: float | None = None) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        if mtime is not None:
            os.utime(path, (mtime, mtime))
        return path

    return _write


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
