"""Generation pipeline: sources -> generators -> bundles -> tracker.

The pipeline takes a finished :class:`~taigapilot.config.RunConfig`; it never
prompts. Generators run strictly one after another with a fixed pause
between them.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path

from taigapilot.analyzers.history import HistoryAnalyzer
from taigapilot.config import RunConfig
from taigapilot.exceptions import SetupError, SourceReadError
from taigapilot.generators.base import Sleep, TaskGenerator
from taigapilot.generators.code_review import CodeReviewGenerator
from taigapilot.generators.history import GitHistoryGenerator
from taigapilot.generators.roadmap import RoadmapGenerator
from taigapilot.models.project import ProjectProfile
from taigapilot.models.task import ExecutionResult, TaskBundle
from taigapilot.models.tracker import CreateProjectInput, TrackerProject
from taigapilot.progress import SubmitProgress
from taigapilot.tracker.base import Tracker

logger = logging.getLogger(__name__)

GENERATOR_DELAY_SECONDS = 1.0


@dataclass(frozen=True)
class PlannedSource:
    """A generator together with the bundle it produced."""

    generator: TaskGenerator
    bundle: TaskBundle


def select_roadmap(config: RunConfig, profile: ProjectProfile) -> Path | None:
    """The explicit roadmap path wins; otherwise the first discovered one, if roadmaps are enabled."""
    if config.roadmap_path is not None:
        return config.roadmap_path
    if config.use_roadmap and profile.roadmap_files:
        return profile.roadmap_files[0]
    return None


def build_generators(config: RunConfig, profile: ProjectProfile, *, sleep: Sleep = asyncio.sleep) -> list[TaskGenerator]:
    """Instantiate one generator per enabled source, in a fixed order.

    Raises:
        SetupError: If code review is requested for a missing project path.
    """
    generators: list[TaskGenerator] = []
    if config.use_history and config.project_path is not None:
        generators.append(GitHistoryGenerator(HistoryAnalyzer(config.project_path), profile, sleep=sleep))
    roadmap = select_roadmap(config, profile)
    if roadmap is not None:
        generators.append(RoadmapGenerator(roadmap, profile, sleep=sleep))
    if config.code_review:
        if config.project_path is None:
            raise SetupError("Code review requires a project directory")
        generators.append(CodeReviewGenerator(config.project_path, profile, sleep=sleep))
    logger.info("%d generators ready", len(generators))
    return generators


def plan_sources(generators: list[TaskGenerator]) -> list[PlannedSource]:
    """Run every generator's ``generate_tasks``; an unreadable source is skipped, not fatal."""
    planned: list[PlannedSource] = []
    for generator in generators:
        try:
            bundle = generator.generate_tasks()
        except SourceReadError as exc:
            logger.warning("Skipping %s source: %s", generator.name, exc)
            continue
        planned.append(PlannedSource(generator=generator, bundle=bundle))
    return planned


async def resolve_project(tracker: Tracker, config: RunConfig) -> TrackerProject:
    """Create or fetch the target project named by *config*."""
    if config.new_project is not None:
        spec = config.new_project
        return await tracker.create_project(
            CreateProjectInput(name=spec.name, description=spec.description, is_private=spec.is_private)
        )
    if config.project_id is not None:
        return await tracker.get_project(config.project_id)
    if config.project_slug is not None:
        return await tracker.get_project_by_slug(config.project_slug)
    raise SetupError("No target project selected")


async def run_pipeline(
    tracker: Tracker,
    project: TrackerProject,
    planned: list[PlannedSource],
    *,
    progress: SubmitProgress | None = None,
    sleep: Sleep = asyncio.sleep,
    delay: float = GENERATOR_DELAY_SECONDS,
) -> dict[str, ExecutionResult]:
    """Submit each planned bundle in turn and collect per-generator results."""
    results: dict[str, ExecutionResult] = {}
    for index, source in enumerate(planned):
        if index:
            await sleep(delay)
        logger.info("Executing %s generator", source.generator.name)
        results[source.generator.name] = await source.generator.execute(
            tracker, project, bundle=source.bundle, progress=progress
        )
    return results
