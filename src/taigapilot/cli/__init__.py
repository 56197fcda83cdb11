"""Command-line interface for taigapilot."""

from taigapilot.cli.app import main

__all__ = ["main"]
