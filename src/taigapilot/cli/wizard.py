"""Interactive configuration wizard.

A fixed sequence of questionary prompts. Each step returns plain values;
:func:`build_run_config` folds them into one immutable
:class:`~taigapilot.config.RunConfig`, which is all the pipeline ever sees.
A cancelled prompt (Ctrl-C / Esc) raises ``KeyboardInterrupt``.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import questionary

from taigapilot.config import NewProjectSpec, RunConfig, TrackerSettings
from taigapilot.exceptions import SetupError
from taigapilot.models.project import ProjectProfile
from taigapilot.models.tracker import TrackerProject

_NEW_PROJECT = "__new__"


async def _answer(question: questionary.Question) -> Any:
    value = await question.ask_async()
    if value is None:
        raise KeyboardInterrupt
    return value


def _validate_directory(value: str) -> bool | str:
    candidate = value.strip()
    if not candidate or Path(candidate).expanduser().is_dir():
        return True
    return "Directory not found (leave empty to skip)"


def _validate_file(value: str) -> bool | str:
    candidate = value.strip()
    if not candidate or Path(candidate).expanduser().is_file():
        return True
    return "File not found (leave empty to skip)"


@dataclass(frozen=True)
class SourceChoices:
    use_history: bool = False
    use_roadmap: bool = False
    code_review: bool = False
    roadmap_path: Path | None = None


async def ask_project_path() -> Path | None:
    raw = await _answer(
        questionary.text(
            "Project directory (leave empty to skip):",
            default=str(Path.cwd()),
            validate=_validate_directory,
        )
    )
    raw = raw.strip()
    return Path(raw).expanduser().resolve() if raw else None


async def ask_credentials(settings: TrackerSettings) -> TrackerSettings:
    """Reuse the environment's credentials or collect new ones."""
    if settings.username and settings.password:
        reuse = await _answer(questionary.confirm("Use the configured Taiga credentials?", default=True))
        if reuse:
            return settings

    api_url = await _answer(questionary.text("Taiga API URL:", default=settings.api_url))
    username = await _answer(
        questionary.text(
            "Taiga username:",
            default=settings.username or "",
            validate=lambda v: bool(v.strip()) or "Username is required",
        )
    )
    password = await _answer(
        questionary.password("Taiga password:", validate=lambda v: bool(v) or "Password is required")
    )
    return TrackerSettings(api_url=api_url.strip().rstrip("/"), username=username.strip(), password=password)


async def ask_sources(profile: ProjectProfile, *, has_project: bool) -> SourceChoices:
    use_history = False
    use_roadmap = False
    code_review = False
    if has_project and profile.has_version_control:
        use_history = await _answer(questionary.confirm("Analyze git history for completed tasks?", default=True))
    if profile.has_roadmap:
        name = profile.roadmap_files[0].name
        use_roadmap = await _answer(questionary.confirm(f"Found {name}. Use it for future tasks?", default=True))
    if has_project:
        code_review = await _answer(questionary.confirm("Generate code review tasks?", default=False))

    custom = await _answer(
        questionary.text("Custom roadmap file (optional):", default="", validate=_validate_file)
    )
    roadmap_path = Path(custom.strip()).expanduser().resolve() if custom.strip() else None
    return SourceChoices(
        use_history=use_history,
        use_roadmap=use_roadmap or roadmap_path is not None,
        code_review=code_review,
        roadmap_path=roadmap_path,
    )


async def ask_target(projects: list[TrackerProject]) -> TrackerProject | NewProjectSpec:
    """Pick an existing project or describe a new one.

    Raises:
        SetupError: If there are no accessible projects and none is created.
    """
    if not projects:
        create = await _answer(questionary.confirm("No accessible Taiga projects found. Create one?", default=True))
        if not create:
            raise SetupError("No accessible Taiga projects found")
        return await ask_new_project()

    choices = [questionary.Choice(f"{p.name} ({p.slug})", value=p.id) for p in projects]
    choices.append(questionary.Choice("Create a new project", value=_NEW_PROJECT))
    selected = await _answer(questionary.select("Select project:", choices=choices))
    if selected == _NEW_PROJECT:
        return await ask_new_project()
    for project in projects:
        if project.id == selected:
            return project
    raise SetupError("Invalid project selection")


async def ask_new_project() -> NewProjectSpec:
    name = await _answer(
        questionary.text("Project name:", validate=lambda v: bool(v.strip()) or "Name is required")
    )
    description = await _answer(questionary.text("Project description:", default=""))
    private = await _answer(questionary.confirm("Private project?", default=False))
    return NewProjectSpec(name=name.strip(), description=description.strip(), is_private=private)


async def confirm(message: str, *, default: bool = False) -> bool:
    return bool(await _answer(questionary.confirm(message, default=default)))


def build_run_config(
    *,
    project_path: Path | None,
    settings: TrackerSettings,
    sources: SourceChoices,
    target: TrackerProject | NewProjectSpec,
) -> RunConfig:
    common: dict[str, Any] = {
        "project_path": project_path,
        "settings": settings,
        "use_history": sources.use_history,
        "use_roadmap": sources.use_roadmap,
        "code_review": sources.code_review,
        "roadmap_path": sources.roadmap_path,
    }
    if isinstance(target, NewProjectSpec):
        return RunConfig(new_project=target, **common)
    return RunConfig(project_id=target.id, **common)
