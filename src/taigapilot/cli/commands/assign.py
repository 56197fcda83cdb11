"""``taigapilot-assign``: give every unassigned user story of a project to one member."""

from __future__ import annotations

import argparse
import asyncio

import questionary
from rich.console import Console
from rich.markup import escape

from taigapilot.assign import AssignmentPlan, AssignmentReport, apply_assignment, plan_assignment
from taigapilot.cli import wizard
from taigapilot.cli.common import add_common_arguments, configure_logging, open_tracker, run_command
from taigapilot.config import TrackerSettings
from taigapilot.exceptions import SetupError, TrackerError
from taigapilot.generators.base import Sleep
from taigapilot.models.tracker import TrackerProject, TrackerUserStory
from taigapilot.tracker.base import Tracker


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="taigapilot-assign", description="Assign every unassigned user story to one project member"
    )
    parser.add_argument("--project", default=None, help="Project slug (prompted when omitted)")
    parser.add_argument("--yes", "-y", action="store_true", help="Do not ask for confirmation")
    add_common_arguments(parser)
    return parser


async def select_project(projects: list[TrackerProject]) -> TrackerProject:
    if not projects:
        raise SetupError("No accessible Taiga projects found")
    choices = [questionary.Choice(f"{p.name} ({p.slug})", value=p.id) for p in projects]
    selected = await questionary.select("Select project:", choices=choices).ask_async()
    if selected is None:
        raise KeyboardInterrupt
    return next(p for p in projects if p.id == selected)


def format_plan(plan: AssignmentPlan) -> str:
    lines = [f"Project: {plan.project.name}", "", "Team members:"]
    lines.extend(f"  {index}. {member.display_name}" for index, member in enumerate(plan.members, start=1))
    lines.extend(
        [
            "",
            f"User stories: {len(plan.stories)} total, "
            f"{plan.already_assigned} assigned, {len(plan.unassigned)} unassigned",
        ]
    )
    return "\n".join(lines)


def format_report(report: AssignmentReport, *, assignee: str, project_url: str) -> str:
    lines = [
        "",
        "taigapilot - assignment complete",
        "",
        f"  Assignee:  {assignee}",
        f"  Assigned:  {len(report.succeeded)}",
    ]
    if report.failed:
        lines.append(f"  Failed:    {len(report.failed)}")
        lines.extend(f"    - {subject}" for subject in report.failed)
    lines.extend([f"  Coverage:  {report.assignment_rate}% of user stories assigned", f"  URL:       {project_url}", ""])
    return "\n".join(lines)


async def run_assign(
    args: argparse.Namespace,
    *,
    tracker: Tracker | None = None,
    settings: TrackerSettings | None = None,
    sleep: Sleep = asyncio.sleep,
    console: Console | None = None,
) -> int:
    settings = settings or TrackerSettings.from_env()
    console = console or Console()

    async with open_tracker(settings, tracker) as client:
        user = await client.get_current_user()
        console.print(f"[green]Connected[/] as {user.full_name or user.username}")

        if args.project:
            project = await client.get_project_by_slug(args.project)
        else:
            project = await select_project(await client.list_projects())

        plan = await plan_assignment(client, project)
        print(format_plan(plan))
        target = plan.target

        if not plan.unassigned:
            console.print("[green]All user stories are already assigned. Nothing to do.[/]")
            return 0

        if plan.needs_confirmation and not args.yes:
            if not await wizard.confirm(f"Assign everything to {target.display_name} (first member)?"):
                console.print("Cancelled.")
                return 0

        print("\nUnassigned user stories:")
        print("\n".join(f"  #{story.id} {story.subject}" for story in plan.unassigned))
        if not args.yes and not await wizard.confirm(
            f"Assign {len(plan.unassigned)} user stories to {target.display_name}?", default=True
        ):
            console.print("Cancelled.")
            return 0

        def report_story(story: TrackerUserStory, error: TrackerError | None) -> None:
            if error is None:
                console.print(f"  [green]✓[/] {escape(story.subject)}", highlight=False)
            else:
                console.print(f"  [red]✗[/] {escape(story.subject)}: {escape(str(error))}", highlight=False)

        report = await apply_assignment(client, plan, sleep=sleep, on_story=report_story)

    print(format_report(report, assignee=target.display_name, project_url=settings.project_url(project.slug)))
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)
    return run_command(lambda: run_assign(args))


__all__ = ["build_parser", "format_plan", "format_report", "main", "run_assign"]
