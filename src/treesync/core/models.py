"""
TreeSync data models.

Defines the structures shared by the scanner, the planner and the
synchronizer: tree entries, planned actions, per-entry outcomes and
the result of a run.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from pathlib import Path, PurePosixPath
from typing import Any

ROOT_PATH = "."


class EntryKind(Enum):
    """Kind of a filesystem entry as seen by the scanner."""

    DIRECTORY = "directory"
    FILE = "file"
    OTHER = "other"


class SyncAction(Enum):
    """Action applied (or attempted) on a single relative path."""

    CREATE_DIR = "create_dir"
    COPY_FILE = "copy_file"
    REMOVE_FILE = "remove_file"
    REMOVE_DIR = "remove_dir"
    KEEP_DIR = "keep_dir"
    ACCESS = "access"
    CONFLICT = "conflict"


class EventCategory(Enum):
    """Categories of log events emitted during a run."""

    CREATED_DIR = "created_dir"
    COPIED_FILE = "copied_file"
    REMOVED_ENTRY = "removed_entry"
    ACCESS_ERROR = "access_error"


class SyncStage(Enum):
    """Stage of a synchronization run."""

    PENDING = auto()
    FORWARD_SYNC = auto()
    CLEANUP = auto()
    DONE = auto()
    FAILED = auto()


def path_sort_key(relative_path: str) -> tuple[str, ...]:
    """Sort key giving depth-first pre-order over relative paths."""
    return PurePosixPath(relative_path).parts


def is_within(relative_path: str, ancestor: str) -> bool:
    """Whether relative_path equals ancestor or lies below it."""
    if ancestor == ROOT_PATH:
        return True
    return relative_path == ancestor or relative_path.startswith(ancestor + "/")


@dataclass(frozen=True)
class EntryStat:
    """Metadata of one entry, independent of where it lives."""

    kind: EntryKind
    size: int = 0
    mtime_ns: int = 0

    @property
    def is_dir(self) -> bool:
        return self.kind is EntryKind.DIRECTORY

    @property
    def is_file(self) -> bool:
        return self.kind is EntryKind.FILE


@dataclass(frozen=True)
class TreeEntry:
    """An entry of a scanned tree, keyed by its path relative to the root."""

    relative_path: str
    stat: EntryStat

    @property
    def kind(self) -> EntryKind:
        return self.stat.kind


@dataclass
class TreeListing:
    """Result of scanning one root."""

    root: Path
    entries: dict[str, TreeEntry] = field(default_factory=dict)
    unreadable: set[str] = field(default_factory=set)
    errors: list[tuple[str, str]] = field(default_factory=list)

    def __contains__(self, relative_path: object) -> bool:
        return relative_path in self.entries

    def get(self, relative_path: str) -> TreeEntry | None:
        return self.entries.get(relative_path)

    def sorted_paths(self) -> list[str]:
        return sorted(self.entries, key=path_sort_key)

    def is_protected(self, relative_path: str) -> bool:
        """Whether relative_path is, or lies under, an entry that could not be read."""
        return any(is_within(relative_path, bad) for bad in self.unreadable)


@dataclass(frozen=True)
class PlannedAction:
    """A single decision taken by the planner."""

    action: SyncAction
    relative_path: str
    reason: str = ""


@dataclass(frozen=True)
class EntryOutcome:
    """What happened to one relative path during a run."""

    relative_path: str
    action: SyncAction
    error: str | None = None
    bytes_copied: int = 0

    @property
    def succeeded(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict[str, Any]:
        return {
            "relative_path": self.relative_path,
            "action": self.action.value,
            "error": self.error,
            "bytes_copied": self.bytes_copied,
        }


@dataclass
class SyncSummary:
    created_dirs: int = 0
    copied: int = 0
    bytes_copied: int = 0
    unchanged: int = 0
    removed: int = 0
    errors: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "created_dirs": self.created_dirs,
            "copied": self.copied,
            "bytes_copied": self.bytes_copied,
            "unchanged": self.unchanged,
            "removed": self.removed,
            "errors": self.errors,
        }


@dataclass
class SyncResult:
    """Outcome of a complete synchronization run."""

    source: str
    target: str
    delete_missing: bool
    started_at: datetime
    ended_at: datetime | None = None
    stage: SyncStage = SyncStage.PENDING
    summary: SyncSummary = field(default_factory=SyncSummary)
    outcomes: list[EntryOutcome] = field(default_factory=list)

    @property
    def errors(self) -> list[EntryOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.succeeded]

    @property
    def success(self) -> bool:
        return self.stage is SyncStage.DONE and not self.errors

    @property
    def duration_seconds(self) -> float | None:
        if self.ended_at:
            return (self.ended_at - self.started_at).total_seconds()
        return None

    def record(self, outcome: EntryOutcome) -> None:
        """Append an outcome and update the summary counters."""
        self.outcomes.append(outcome)
        if not outcome.succeeded:
            self.summary.errors += 1
        elif outcome.action is SyncAction.CREATE_DIR:
            self.summary.created_dirs += 1
        elif outcome.action is SyncAction.COPY_FILE:
            self.summary.copied += 1
            self.summary.bytes_copied += outcome.bytes_copied
        elif outcome.action in (SyncAction.REMOVE_FILE, SyncAction.REMOVE_DIR):
            self.summary.removed += 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "source": self.source,
            "target": self.target,
            "delete_missing": self.delete_missing,
            "started_at": self.started_at.isoformat(),
            "ended_at": self.ended_at.isoformat() if self.ended_at else None,
            "duration_seconds": self.duration_seconds,
            "stage": self.stage.name,
            "summary": self.summary.to_dict(),
            "outcomes": [outcome.to_dict() for outcome in self.outcomes],
        }

    def save_report(self, path: Path) -> None:
        """Persist the result as JSON."""
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as handle:
            json.dump(self.to_dict(), handle, indent=2)
