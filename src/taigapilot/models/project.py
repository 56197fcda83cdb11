"""Codebase fingerprint produced by project discovery."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field


class ProjectProfile(BaseModel):
    """What kind of codebase lives at a path, derived once per run.

    Attributes:
        type: Short project type key (``"laravel"``, ``"react"``, ``"unknown"``...).
        framework: Human-readable framework name, or *None* when undetected.
        has_version_control: Whether a ``.git`` entry exists at the root.
        has_roadmap: Whether any roadmap-like document was found.
        roadmap_files: Absolute paths to roadmap/todo/features documents.
        documentation_files: Top-level documentation file names.
        package_files: Top-level package manifest names.
        config_files: Top-level build/config file names.
    """

    type: str = "unknown"
    framework: str | None = None
    has_version_control: bool = False
    has_roadmap: bool = False
    roadmap_files: list[Path] = Field(default_factory=list)
    documentation_files: list[str] = Field(default_factory=list)
    package_files: list[str] = Field(default_factory=list)
    config_files: list[str] = Field(default_factory=list)

    model_config = {"frozen": True}
