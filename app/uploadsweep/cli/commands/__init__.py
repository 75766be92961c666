"""CLI commands for uploadsweep.

This package contains all subcommand implementations.
"""

from uploadsweep.cli.commands import clean, config, scan

__all__ = ["clean", "config", "scan"]
