"""
Sync planning.

Compares a source listing against a target listing and decides which
directories to create, which files to copy and, optionally, which
target entries to remove. Planning performs no I/O.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import Any

from treesync.core.models import (
    EntryStat,
    PlannedAction,
    SyncAction,
    TreeListing,
    path_sort_key,
)

NANOSECONDS = 1_000_000_000


def same_file(source: EntryStat, target: EntryStat, tolerance_ns: int = 0) -> bool:
    """Size and modification time match (within tolerance_ns)."""
    return source.size == target.size and abs(source.mtime_ns - target.mtime_ns) <= tolerance_ns


def seconds_to_ns(seconds: float) -> int:
    return int(round(seconds * NANOSECONDS))


@dataclass
class SyncPlan:
    """Ordered actions for one run."""

    forward: list[PlannedAction] = field(default_factory=list)
    cleanup: list[PlannedAction] = field(default_factory=list)
    conflicts: list[PlannedAction] = field(default_factory=list)
    blocked: list[str] = field(default_factory=list)
    unchanged: int = 0

    @property
    def is_empty(self) -> bool:
        return not (self.forward or self.cleanup)

    def count(self, action: SyncAction) -> int:
        return sum(1 for item in self.forward + self.cleanup if item.action is action)

    def to_dict(self) -> dict[str, Any]:
        def _dump(items: list[PlannedAction]) -> list[dict[str, str]]:
            return [
                {"action": item.action.value, "relative_path": item.relative_path, "reason": item.reason}
                for item in items
            ]

        return {
            "forward": _dump(self.forward),
            "cleanup": _dump(self.cleanup),
            "conflicts": _dump(self.conflicts),
            "blocked": list(self.blocked),
            "unchanged": self.unchanged,
        }


def build_plan(
    source: TreeListing,
    target: TreeListing,
    *,
    delete_missing: bool = False,
    tolerance_ns: int = 0,
) -> SyncPlan:
    """
    Walk both listings in merged pre-order and decide every action.

    Forward actions keep pre-order so parents are created before their
    children. Cleanup actions are reversed so children are removed before
    the directories holding them.
    """
    plan = SyncPlan()
    all_paths = sorted(set(source.entries) | set(target.entries), key=path_sort_key)

    for rel_path in all_paths:
        src_entry = source.get(rel_path)
        tgt_entry = target.get(rel_path)

        if src_entry is None:
            if tgt_entry is None or not delete_missing:
                continue
            if source.is_protected(rel_path) or _under_non_directory(source, rel_path):
                continue
            # Files, and special entries such as symlinks, are unlinked
            action = SyncAction.REMOVE_DIR if tgt_entry.stat.is_dir else SyncAction.REMOVE_FILE
            plan.cleanup.append(PlannedAction(action, rel_path, "not in source"))
            continue

        if target.is_protected(rel_path):
            plan.blocked.append(rel_path)
            continue

        if tgt_entry is None:
            if _under_non_directory(target, rel_path):
                # Already reported as a conflict on the ancestor
                continue
            if src_entry.stat.is_dir:
                plan.forward.append(PlannedAction(SyncAction.CREATE_DIR, rel_path, "missing"))
            else:
                plan.forward.append(PlannedAction(SyncAction.COPY_FILE, rel_path, "missing"))
            continue

        if src_entry.kind is not tgt_entry.kind:
            plan.conflicts.append(
                PlannedAction(
                    SyncAction.CONFLICT,
                    rel_path,
                    f"source is {src_entry.kind.value}, target is {tgt_entry.kind.value}",
                )
            )
            continue

        if src_entry.stat.is_dir:
            continue

        if same_file(src_entry.stat, tgt_entry.stat, tolerance_ns):
            plan.unchanged += 1
        else:
            plan.forward.append(PlannedAction(SyncAction.COPY_FILE, rel_path, "changed"))

    plan.cleanup.reverse()
    return plan


def _under_non_directory(listing: TreeListing, rel_path: str) -> bool:
    """Whether an ancestor of rel_path in listing is something other than a directory."""
    for parent in PurePosixPath(rel_path).parents:
        entry = listing.get(str(parent))
        if entry is not None and not entry.stat.is_dir:
            return True
    return False
