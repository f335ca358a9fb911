"""
TreeSync Core.

Contains configuration, logging and the data models shared by the
scanner, planner and synchronizer.
"""

from treesync.core.config import SyncConfig, TreeSyncConfig, load_config
from treesync.core.logging import get_logger, setup_logging
from treesync.core.models import EntryOutcome, SyncAction, SyncResult, SyncStage

__all__ = [
    "SyncConfig",
    "TreeSyncConfig",
    "load_config",
    "get_logger",
    "setup_logging",
    "EntryOutcome",
    "SyncAction",
    "SyncResult",
    "SyncStage",
]
