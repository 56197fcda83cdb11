"""Standalone console scripts, one module per script."""
