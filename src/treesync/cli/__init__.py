"""
TreeSync CLI Module.

Provides the command-line interface for running a synchronization.
"""

from treesync.cli.main import main, cli

__all__ = ["main", "cli"]
