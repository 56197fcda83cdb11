"""Application-level configuration.

:class:`TrackerSettings` is read from the environment; :class:`RunConfig` is
the single immutable product of the interactive wizard (or of a
non-interactive script's arguments) and carries everything the pipeline
needs. Nothing downstream of these models ever prompts.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, model_validator

DEFAULT_API_URL = "https://api.taiga.io/api/v1"


class TrackerSettings(BaseModel):
    """Connection settings for the tracker API.

    Attributes:
        api_url: Base URL of the REST API (no trailing slash).
        username: Login name; may be empty until an authenticated call is made.
        password: Login password; may be empty until an authenticated call is made.
    """

    api_url: str = DEFAULT_API_URL
    username: str | None = None
    password: str | None = None

    model_config = {"frozen": True}

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> TrackerSettings:
        env = os.environ if environ is None else environ
        return cls(
            api_url=(env.get("TAIGA_API_URL") or DEFAULT_API_URL).rstrip("/"),
            username=env.get("TAIGA_USERNAME") or None,
            password=env.get("TAIGA_PASSWORD") or None,
        )

    def with_credentials(self, username: str, password: str) -> TrackerSettings:
        return self.model_copy(update={"username": username, "password": password})

    @property
    def web_url(self) -> str:
        """Browser base URL derived from the API URL (``.../api/v1`` stripped)."""
        url = self.api_url.rstrip("/")
        for suffix in ("/api/v1", "/api"):
            if url.endswith(suffix):
                url = url[: -len(suffix)]
                break
        return url.replace("://api.", "://tree.", 1)

    def project_url(self, slug: str) -> str:
        return f"{self.web_url}/project/{slug}/"


class NewProjectSpec(BaseModel):
    """A tracker project to create instead of reusing an existing one."""

    name: str
    description: str = ""
    is_private: bool = False

    model_config = {"frozen": True}


class RunConfig(BaseModel):
    """Everything one generation run needs.

    Attributes:
        project_path: Directory of the codebase being analyzed, if any.
        settings: Tracker connection settings (credentials included).
        use_history: Generate tasks from version-control history.
        use_roadmap: Generate tasks from a roadmap document.
        code_review: Generate tasks from a source-tree scan.
        roadmap_path: Explicit roadmap file; defaults to the first discovered one.
        project_id: Existing tracker project to populate.
        project_slug: Existing tracker project to populate, by slug.
        new_project: Project to create; mutually exclusive with the above.
    """

    project_path: Path | None = None
    settings: TrackerSettings = TrackerSettings()
    use_history: bool = True
    use_roadmap: bool = True
    code_review: bool = False
    roadmap_path: Path | None = None
    project_id: int | None = None
    project_slug: str | None = None
    new_project: NewProjectSpec | None = None

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _single_target(self) -> RunConfig:
        chosen = [t for t in (self.project_id, self.project_slug, self.new_project) if t is not None]
        if len(chosen) > 1:
            raise ValueError("choose exactly one of project_id, project_slug or new_project")
        return self

    @property
    def has_target(self) -> bool:
        return any(t is not None for t in (self.project_id, self.project_slug, self.new_project))
