"""``taigapilot-state``: list a project's user stories."""

from __future__ import annotations

import argparse

from taigapilot.cli.common import add_common_arguments, configure_logging, open_tracker, run_command
from taigapilot.config import TrackerSettings
from taigapilot.models.tracker import TrackerMember, TrackerStatus, TrackerUserStory
from taigapilot.tracker.base import Tracker


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="taigapilot-state", description="Show the user stories of a Taiga project")
    parser.add_argument("--project", required=True, help="Slug of the Taiga project")
    add_common_arguments(parser)
    return parser


def format_stories(
    stories: list[TrackerUserStory], statuses: list[TrackerStatus], members: list[TrackerMember]
) -> str:
    status_names = {status.id: status.name for status in statuses}
    member_names = {member.id: member.display_name for member in members}
    lines = []
    for story in stories:
        status = status_names.get(story.status, "?") if story.status is not None else "-"
        assignee = member_names.get(story.assigned_to, f"#{story.assigned_to}") if story.assigned_to else "unassigned"
        lines.append(f"  #{story.id:<6} [{status}] {story.subject} ({assignee})")
    lines.append(f"\n  {len(stories)} user stor{'ies' if len(stories) != 1 else 'y'}")
    return "\n".join(lines)


async def run_state(
    args: argparse.Namespace, *, tracker: Tracker | None = None, settings: TrackerSettings | None = None
) -> int:
    settings = settings or TrackerSettings.from_env()
    async with open_tracker(settings, tracker) as client:
        project = await client.get_project_by_slug(args.project)
        stories = await client.list_user_stories(project.id)
        statuses = await client.list_user_story_statuses(project.id)
        members = await client.get_project_members(project.id)

    print(f"Project: {project.name} ({settings.project_url(project.slug)})\n")
    print(format_stories(stories, statuses, members))
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)
    return run_command(lambda: run_state(args))


__all__ = ["build_parser", "format_stories", "main", "run_state"]
