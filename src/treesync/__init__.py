"""
TreeSync - One-way directory synchronization.

Mirrors a source directory tree into a target tree, copying new or
changed files, preserving modification times and optionally removing
target entries that no longer exist in the source.
"""

__version__ = "1.0.0"
__author__ = "TreeSync Team"

from treesync.core.config import TreeSyncConfig
from treesync.sync.manager import SyncJob, Synchronizer

__all__ = ["TreeSyncConfig", "SyncJob", "Synchronizer", "__version__"]
