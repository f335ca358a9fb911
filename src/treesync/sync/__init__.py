"""
TreeSync sync module.

Provides one-way synchronization of a source tree into a target tree.
"""

from treesync.sync.manager import SyncJob, Synchronizer
from treesync.sync.planner import SyncPlan, build_plan, same_file
from treesync.sync.tree import (
    SourceRootError,
    SyncRootError,
    TargetRootError,
    scan_tree,
)

__all__ = [
    "SyncJob",
    "Synchronizer",
    "SyncPlan",
    "build_plan",
    "same_file",
    "scan_tree",
    "SyncRootError",
    "SourceRootError",
    "TargetRootError",
]
