"""``taigapilot-preview``: dry run that prints generated bundles without touching Taiga."""

from __future__ import annotations

import argparse
from pathlib import Path

from taigapilot.analyzers.discovery import ProjectDiscovery
from taigapilot.cli.common import add_common_arguments, configure_logging, format_bundle, format_profile, run_command
from taigapilot.config import RunConfig
from taigapilot.exceptions import SetupError
from taigapilot.pipeline import build_generators, plan_sources


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="taigapilot-preview", description="Preview generated Taiga items")
    parser.add_argument("project_dir", nargs="?", default=".", help="Project directory (default: .)")
    parser.add_argument("--roadmap", default=None, help="Explicit roadmap file")
    parser.add_argument("--no-history", action="store_true", help="Skip git history")
    parser.add_argument("--code-review", action="store_true", help="Include code review tasks")
    parser.add_argument("--titles", type=int, default=5, help="Titles shown per kind (default: 5)")
    add_common_arguments(parser)
    return parser


async def run_preview(args: argparse.Namespace) -> int:
    project_path = Path(args.project_dir).resolve()
    if not project_path.is_dir():
        raise SetupError(f"Project directory not found: {project_path}")

    discovery = ProjectDiscovery(project_path)
    profile = discovery.analyze()
    print(f"Project: {project_path}")
    print(format_profile(profile, discovery.suggested_tasks()))

    config = RunConfig(
        project_path=project_path,
        use_history=not args.no_history,
        code_review=args.code_review,
        roadmap_path=Path(args.roadmap).resolve() if args.roadmap else None,
    )
    planned = plan_sources(build_generators(config, profile))

    print("")
    if not planned:
        print("No sources selected.")
        return 0
    for source in planned:
        print(format_bundle(source.generator.name, source.bundle, show_titles=args.titles))
    total = sum(source.bundle.total for source in planned)
    print(f"\nTotal: {total} items (dry run, nothing submitted)")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)
    return run_command(lambda: run_preview(args))


__all__ = ["build_parser", "main", "run_preview"]
