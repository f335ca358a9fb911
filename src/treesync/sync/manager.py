"""
TreeSync synchronizer.

Implements one-way synchronization of a source tree into a target tree:
a forward pass that creates directories and copies new or changed files,
followed by an optional cleanup pass that removes target-only entries.
"""

from __future__ import annotations

import errno
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Iterable

import structlog

from treesync.core.logging import OperationLogger, get_logger
from treesync.core.models import (
    EntryOutcome,
    EventCategory,
    PlannedAction,
    SyncAction,
    SyncResult,
    SyncStage,
    TreeListing,
)
from treesync.platform import get_filesystem_backend
from treesync.platform.base import FileSystemBackend
from treesync.sync.planner import SyncPlan, build_plan, seconds_to_ns
from treesync.sync.tree import (
    SourceRootError,
    SyncRootError,
    TargetRootError,
    join_relative,
    scan_tree,
)

if TYPE_CHECKING:
    from treesync.core.config import SyncConfig

_NOT_EMPTY = {errno.ENOTEMPTY, errno.EEXIST}


@dataclass(frozen=True)
class SyncJob:
    """A one-way synchronization request. Performs no I/O."""

    source: Path
    target: Path
    delete_missing: bool = False


class Synchronizer:
    """Runs a SyncJob against a filesystem backend."""

    def __init__(
        self,
        source: Path | str,
        target: Path | str,
        delete_missing: bool = False,
        *,
        backend: FileSystemBackend | None = None,
        logger: structlog.stdlib.BoundLogger | None = None,
        mtime_tolerance_seconds: float = 0.0,
        exclude_patterns: Iterable[str] = (),
    ) -> None:
        self.job = SyncJob(Path(source), Path(target), delete_missing)
        self.backend = backend or get_filesystem_backend()
        self.logger = logger or get_logger(__name__)
        self.tolerance_ns = seconds_to_ns(mtime_tolerance_seconds)
        self.exclude_patterns = list(exclude_patterns)

    @classmethod
    def from_config(
        cls,
        source: Path | str,
        target: Path | str,
        config: SyncConfig,
        **kwargs: object,
    ) -> Synchronizer:
        """Build a synchronizer using the defaults from a SyncConfig."""
        return cls(
            source,
            target,
            config.delete_missing,
            mtime_tolerance_seconds=config.mtime_tolerance_seconds,
            exclude_patterns=config.exclude_patterns,
            **kwargs,  # type: ignore[arg-type]
        )

    @property
    def source(self) -> Path:
        return self.job.source

    @property
    def target(self) -> Path:
        return self.job.target

    def plan(self) -> SyncPlan:
        """Scan both trees and decide what a run would do, without changing anything."""
        source_listing, target_listing = self._scan()
        return self._build_plan(source_listing, target_listing)

    def run(self) -> SyncResult:
        """
        Perform the full synchronization.

        Per-entry failures are recorded in the returned result. Only a root
        that cannot be scanned raises (SourceRootError / TargetRootError).
        """
        result = SyncResult(
            source=str(self.source),
            target=str(self.target),
            delete_missing=self.job.delete_missing,
            started_at=datetime.now(),
        )

        try:
            with OperationLogger(
                "sync",
                self.logger,
                source=str(self.source),
                target=str(self.target),
                delete_missing=self.job.delete_missing,
            ) as op:
                source_listing, target_listing = self._scan()
                self._record_scan_errors(source_listing, self.source, result)
                self._record_scan_errors(target_listing, self.target, result)
                plan = self._build_plan(source_listing, target_listing)
                result.summary.unchanged = plan.unchanged

                for conflict in plan.conflicts:
                    self._fail(
                        result,
                        conflict,
                        join_relative(self.target, conflict.relative_path),
                        conflict.reason,
                    )

                result.stage = SyncStage.FORWARD_SYNC
                for action in plan.forward:
                    self._apply_forward(action, result)

                if self.job.delete_missing:
                    result.stage = SyncStage.CLEANUP
                    for action in plan.cleanup:
                        self._apply_cleanup(action, result)

                result.stage = SyncStage.DONE
                op.update(**result.summary.to_dict())
        except SyncRootError:
            result.stage = SyncStage.FAILED
            raise
        finally:
            result.ended_at = datetime.now()

        return result

    def _scan(self) -> tuple[TreeListing, TreeListing]:
        source_listing = scan_tree(
            self.backend,
            self.source,
            exclude_patterns=self.exclude_patterns,
            error_class=SourceRootError,
        )
        target_listing = scan_tree(
            self.backend,
            self.target,
            exclude_patterns=self.exclude_patterns,
            missing_ok=True,
            keep_special=True,
            error_class=TargetRootError,
        )
        return source_listing, target_listing

    def _build_plan(self, source_listing: TreeListing, target_listing: TreeListing) -> SyncPlan:
        return build_plan(
            source_listing,
            target_listing,
            delete_missing=self.job.delete_missing,
            tolerance_ns=self.tolerance_ns,
        )

    def _record_scan_errors(self, listing: TreeListing, root: Path, result: SyncResult) -> None:
        for rel_path, reason in listing.errors:
            path = join_relative(root, rel_path)
            self._fail(result, PlannedAction(SyncAction.ACCESS, rel_path), path, reason)

    def _apply_forward(self, action: PlannedAction, result: SyncResult) -> None:
        src_path = join_relative(self.source, action.relative_path)
        dst_path = join_relative(self.target, action.relative_path)

        if action.action is SyncAction.CREATE_DIR:
            try:
                self.backend.make_dirs(dst_path)
            except OSError as exc:
                self._fail(result, action, dst_path, exc)
                return
            result.record(EntryOutcome(action.relative_path, action.action))
            self.logger.info(
                "Created directory",
                category=EventCategory.CREATED_DIR.value,
                path=str(dst_path),
            )
            return

        try:
            written = self.backend.copy_file(src_path, dst_path)
        except OSError as exc:
            self._fail(result, action, dst_path, exc)
            return
        result.record(EntryOutcome(action.relative_path, action.action, bytes_copied=written))
        self.logger.info(
            "Copied file",
            category=EventCategory.COPIED_FILE.value,
            source=str(src_path),
            target=str(dst_path),
            reason=action.reason,
            bytes=written,
        )

    def _apply_cleanup(self, action: PlannedAction, result: SyncResult) -> None:
        path = join_relative(self.target, action.relative_path)

        try:
            if action.action is SyncAction.REMOVE_DIR:
                self.backend.remove_dir(path)
            else:
                self.backend.remove_file(path)
        except OSError as exc:
            if action.action is SyncAction.REMOVE_DIR and exc.errno in _NOT_EMPTY:
                self.logger.debug("Kept non-empty directory", path=str(path))
                result.outcomes.append(EntryOutcome(action.relative_path, SyncAction.KEEP_DIR))
                return
            self._fail(result, action, path, exc)
            return

        result.record(EntryOutcome(action.relative_path, action.action))
        self.logger.info(
            "Removed directory" if action.action is SyncAction.REMOVE_DIR else "Removed file",
            category=EventCategory.REMOVED_ENTRY.value,
            path=str(path),
        )

    def _fail(
        self,
        result: SyncResult,
        action: PlannedAction,
        path: Path,
        error: OSError | str,
    ) -> None:
        if isinstance(error, OSError):
            message = error.strerror or str(error)
        else:
            message = error
        result.record(EntryOutcome(action.relative_path, action.action, error=message))
        self.logger.warning(
            "Cannot access entry",
            category=EventCategory.ACCESS_ERROR.value,
            action=action.action.value,
            path=str(path),
            error=message,
        )
