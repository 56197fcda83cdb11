"""Tests for shared CLI helpers."""

from __future__ import annotations

from pathlib import Path

import pytest

from taigapilot.cli.common import (
    format_bundle,
    format_execution_summary,
    format_profile,
    format_type_breakdown,
    open_tracker,
    run_command,
)
from taigapilot.exceptions import SetupError
from taigapilot.models.enums import TaskKind
from taigapilot.models.project import ProjectProfile
from taigapilot.models.task import ExecutionResult
from taigapilot.tracker.client import TaigaClient


class TestRunCommand:
    def test_success(self) -> None:
        async def ok() -> int:
            return 0

        assert run_command(ok) == 0

    def test_library_error_maps_to_exit_one(self, capsys: pytest.CaptureFixture[str]) -> None:
        async def fail() -> int:
            raise SetupError("No accessible Taiga projects found")

        assert run_command(fail) == 1
        assert "error: No accessible Taiga projects found" in capsys.readouterr().err

    def test_cancelled_prompt(self, capsys: pytest.CaptureFixture[str]) -> None:
        async def cancel() -> int:
            raise KeyboardInterrupt

        assert run_command(cancel) == 1
        assert "Aborted." in capsys.readouterr().err


class TestOpenTracker:
    @pytest.mark.asyncio
    async def test_injected_tracker_is_used(self, tracker, settings) -> None:  # type: ignore[no-untyped-def]
        async with open_tracker(settings, tracker) as client:
            assert client is tracker

    @pytest.mark.asyncio
    async def test_live_client_by_default(self, settings) -> None:  # type: ignore[no-untyped-def]
        async with open_tracker(settings) as client:
            assert isinstance(client, TaigaClient)
            assert client.settings is settings


class TestFormatting:
    @pytest.mark.parametrize(
        ("counts", "expected"),
        [
            ((1, 2, 0), "1 epic, 2 stories"),
            ((0, 1, 3), "1 story, 3 tasks"),
            ((0, 0, 0), "none"),
        ],
    )
    def test_type_breakdown(self, counts: tuple[int, int, int], expected: str) -> None:
        epics, stories, tasks = counts
        assert format_type_breakdown(epics=epics, stories=stories, tasks=tasks) == expected

    def test_bundle_with_titles(self, sample_bundle) -> None:  # type: ignore[no-untyped-def]
        assert format_bundle("roadmap", sample_bundle, show_titles=1).splitlines() == [
            "  roadmap: 4 items (1 epic, 2 stories, 1 task)",
            "    [epic] Epic: Core Features (completed)",
            "    [story] Feature: User Login (new)",
            "    ... 1 more story item(s)",
            "    [task] Add tests for api.js (new)",
        ]

    def test_bundle_counts_only(self, sample_bundle) -> None:  # type: ignore[no-untyped-def]
        assert format_bundle("roadmap", sample_bundle) == "  roadmap: 4 items (1 epic, 2 stories, 1 task)"

    def test_execution_summary(self) -> None:
        results = {
            "git-history": ExecutionResult(created={TaskKind.EPIC: 1, TaskKind.STORY: 0, TaskKind.TASK: 2}),
            "roadmap": ExecutionResult(
                created={TaskKind.EPIC: 0, TaskKind.STORY: 1, TaskKind.TASK: 0},
                failed=["Phase 2: Growth"],
                skipped=["🚀"],
            ),
        }
        text = format_execution_summary(results, project_name="Demo", project_url="https://tree.taiga.io/project/demo/")

        assert "  Project:   Demo" in text
        assert "  URL:       https://tree.taiga.io/project/demo/" in text
        assert "  Created:   4 (1 epic, 1 story, 2 tasks)" in text
        assert "  Failed:    1\n    - Phase 2: Growth" in text
        assert "  Skipped:   1 (no usable title)" in text

    def test_summary_without_failures(self) -> None:
        text = format_execution_summary({}, project_name="Demo", project_url="u")
        assert "Created:   0 (none)" in text
        assert "Failed" not in text

    def test_profile(self, tmp_path: Path) -> None:
        profile = ProjectProfile(
            type="laravel",
            framework="Laravel",
            has_version_control=True,
            has_roadmap=True,
            roadmap_files=[tmp_path / "ROADMAP.md"],
            documentation_files=["README.md", "ROADMAP.md"],
        )
        text = format_profile(profile, ["Set up queues"])

        assert "  Framework:   Laravel" in text
        assert "  Git:         yes" in text
        assert "  Roadmaps:    ROADMAP.md" in text
        assert "  Docs:        README.md, ROADMAP.md" in text
        assert text.endswith("  Suggested focus areas:\n    - Set up queues")

    def test_unknown_profile(self) -> None:
        text = format_profile(ProjectProfile())
        assert "  Framework:   not detected" in text
        assert "  Roadmaps:    none" in text
        assert "Docs" not in text
