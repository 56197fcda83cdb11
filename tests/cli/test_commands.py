"""Tests for the non-interactive scripts and the wizard runner."""

from __future__ import annotations

import argparse
import io
from pathlib import Path

import pytest
import questionary
from rich.console import Console

from taigapilot.cli import app, wizard
from taigapilot.cli.commands import assign, preview, roadmap, state
from taigapilot.cli.wizard import SourceChoices
from taigapilot.exceptions import SetupError, TrackerError
from taigapilot.models.tracker import TrackerMember, TrackerProject, TrackerUserStory
from tests.fakes.tracker import FakeTracker

ROADMAP_TEXT = "## Phase 1: Launch\n- Ship the beta\n\n- [ ] Implement search filters\n- [x] Write release notes\n"


def _console() -> Console:
    return Console(file=io.StringIO(), width=120)


def _output(console: Console) -> str:
    return console.file.getvalue()  # type: ignore[attr-defined]


class ScriptedAnswer:
    def __init__(self, value: object) -> None:
        self.value = value

    async def ask_async(self) -> object:
        return self.value


class TestParsers:
    def test_roadmap_defaults(self) -> None:
        args = roadmap.build_parser().parse_args(["--roadmap", "ROADMAP.md", "--project", "demo"])
        assert (args.roadmap, args.project, args.wait, args.verbose) == ("ROADMAP.md", "demo", 5, False)

    def test_roadmap_requires_project(self) -> None:
        with pytest.raises(SystemExit):
            roadmap.build_parser().parse_args(["--roadmap", "ROADMAP.md"])

    def test_preview_defaults(self) -> None:
        args = preview.build_parser().parse_args([])
        assert (args.project_dir, args.roadmap, args.no_history, args.code_review, args.titles) == (
            ".",
            None,
            False,
            False,
            5,
        )

    def test_assign_flags(self) -> None:
        args = assign.build_parser().parse_args(["-y", "--project", "demo", "-v"])
        assert (args.yes, args.project, args.verbose) == (True, "demo", True)

    def test_wizard_titles(self) -> None:
        assert app.build_parser().parse_args(["--titles", "7"]).titles == 7


class TestRoadmapCommand:
    @pytest.mark.asyncio
    async def test_populates_project(self, tmp_path, tracker, settings, sleep, capsys) -> None:  # type: ignore[no-untyped-def]
        path = tmp_path / "ROADMAP.md"
        path.write_text(ROADMAP_TEXT, encoding="utf-8")
        args = argparse.Namespace(roadmap=str(path), project="demo", wait=2, verbose=True)

        assert await roadmap.run_roadmap(args, tracker=tracker, settings=settings, sleep=sleep) == 0

        out = capsys.readouterr().out
        assert "Project: Demo (0 user stories)" in out
        assert "Starting in 2s...\nStarting in 1s..." in out
        assert "User stories: 0 -> 3" in out
        assert "https://tree.taiga.io/project/demo/" in out
        assert [s.subject for s in tracker.created_stories] == [
            "Phase 1: Launch",
            "Implement search filters",
            "Write release notes",
        ]
        assert sleep.calls == [1, 1, 0.5, 0.3, 0.3]

    @pytest.mark.asyncio
    async def test_empty_roadmap(self, tmp_path, tracker, settings, sleep, capsys) -> None:  # type: ignore[no-untyped-def]
        path = tmp_path / "ROADMAP.md"
        path.write_text("Nothing planned yet.\n", encoding="utf-8")
        args = argparse.Namespace(roadmap=str(path), project="demo", wait=5, verbose=True)

        assert await roadmap.run_roadmap(args, tracker=tracker, settings=settings, sleep=sleep) == 0
        assert "No epics, stories or tasks found" in capsys.readouterr().out
        assert tracker.created_stories == []
        assert sleep.calls == []

    @pytest.mark.asyncio
    async def test_unknown_project(self, tmp_path, tracker, settings, sleep) -> None:  # type: ignore[no-untyped-def]
        path = tmp_path / "ROADMAP.md"
        path.write_text(ROADMAP_TEXT, encoding="utf-8")
        args = argparse.Namespace(roadmap=str(path), project="ghost", wait=0, verbose=True)

        with pytest.raises(TrackerError):
            await roadmap.run_roadmap(args, tracker=tracker, settings=settings, sleep=sleep)
        assert tracker.created_stories == []


class TestPreviewCommand:
    @pytest.mark.asyncio
    async def test_prints_bundles_without_tracker(self, tmp_path: Path, capsys) -> None:  # type: ignore[no-untyped-def]
        (tmp_path / "ROADMAP.md").write_text(ROADMAP_TEXT, encoding="utf-8")
        args = argparse.Namespace(project_dir=str(tmp_path), roadmap=None, no_history=True, code_review=False, titles=5)

        assert await preview.run_preview(args) == 0

        out = capsys.readouterr().out
        assert "  Roadmaps:    ROADMAP.md" in out
        assert "  roadmap: 3 items (1 epic, 2 tasks)" in out
        assert "    [task] Implement search filters (new)" in out
        assert "Total: 3 items (dry run, nothing submitted)" in out

    @pytest.mark.asyncio
    async def test_no_sources(self, tmp_path: Path, capsys) -> None:  # type: ignore[no-untyped-def]
        args = argparse.Namespace(project_dir=str(tmp_path), roadmap=None, no_history=True, code_review=False, titles=5)
        assert await preview.run_preview(args) == 0
        assert "No sources selected." in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_missing_directory(self, tmp_path: Path) -> None:
        args = argparse.Namespace(
            project_dir=str(tmp_path / "nope"), roadmap=None, no_history=True, code_review=False, titles=5
        )
        with pytest.raises(SetupError):
            await preview.run_preview(args)


class TestStateCommand:
    def test_format_stories(self) -> None:
        stories = [
            TrackerUserStory(id=1, subject="Login", status=1, assigned_to=7),
            TrackerUserStory(id=2, subject="Billing", status=99),
            TrackerUserStory(id=3, subject="Search", assigned_to=42),
        ]
        statuses = FakeTracker().statuses
        text = state.format_stories(stories, statuses, [TrackerMember(id=7, full_name="Ada Lovelace")])

        assert text.splitlines()[:3] == [
            "  #1      [New] Login (Ada Lovelace)",
            "  #2      [?] Billing (unassigned)",
            "  #3      [-] Search (#42)",
        ]
        assert text.endswith("3 user stories")

    @pytest.mark.asyncio
    async def test_run_state(self, project, settings, capsys) -> None:  # type: ignore[no-untyped-def]
        tracker = FakeTracker(projects=[project], stories=[TrackerUserStory(id=5, subject="Only one", status=3)])
        args = argparse.Namespace(project="demo")

        assert await state.run_state(args, tracker=tracker, settings=settings) == 0

        out = capsys.readouterr().out
        assert "Project: Demo (https://tree.taiga.io/project/demo/)" in out
        assert "[Done] Only one (unassigned)" in out
        assert "1 user story" in out


@pytest.fixture
def assign_tracker(project) -> FakeTracker:  # type: ignore[no-untyped-def]
    return FakeTracker(
        projects=[project, TrackerProject(id=11, name="Other", slug="other")],
        members=[TrackerMember(id=7, full_name="Ada Lovelace"), TrackerMember(id=8, full_name="Grace Hopper")],
        stories=[
            TrackerUserStory(id=1, subject="Login", assigned_to=8),
            TrackerUserStory(id=2, subject="[bold]Billing[/]"),
            TrackerUserStory(id=3, subject="Search"),
        ],
    )


class TestAssignCommand:
    @pytest.mark.asyncio
    async def test_assigns_without_prompts(self, assign_tracker, settings, sleep, capsys) -> None:  # type: ignore[no-untyped-def]
        console = _console()
        args = argparse.Namespace(project="demo", yes=True)

        assert await assign.run_assign(args, tracker=assign_tracker, settings=settings, sleep=sleep, console=console) == 0

        assert assign_tracker.update_calls == [(2, {"assigned_to": 7}), (3, {"assigned_to": 7})]
        out = capsys.readouterr().out
        assert "User stories: 3 total, 1 assigned, 2 unassigned" in out
        assert "  Assignee:  Ada Lovelace" in out
        assert "  Coverage:  100% of user stories assigned" in out
        assert "✓ [bold]Billing[/]" in _output(console)

    @pytest.mark.asyncio
    async def test_prompts_for_project_and_confirmation(  # type: ignore[no-untyped-def]
        self, assign_tracker, settings, sleep, monkeypatch
    ) -> None:
        prompts: list[str] = []

        async def confirm(message: str, *, default: bool = False) -> bool:
            prompts.append(message)
            return True

        monkeypatch.setattr(questionary, "select", lambda *a, **kw: ScriptedAnswer(10))
        monkeypatch.setattr(wizard, "confirm", confirm)
        args = argparse.Namespace(project=None, yes=False)

        await assign.run_assign(args, tracker=assign_tracker, settings=settings, sleep=sleep, console=_console())

        assert prompts == [
            "Assign everything to Ada Lovelace (first member)?",
            "Assign 2 user stories to Ada Lovelace?",
        ]
        assert len(assign_tracker.update_calls) == 2

    @pytest.mark.asyncio
    async def test_declined_confirmation_changes_nothing(  # type: ignore[no-untyped-def]
        self, assign_tracker, settings, sleep, monkeypatch
    ) -> None:
        async def decline(message: str, *, default: bool = False) -> bool:
            return False

        monkeypatch.setattr(wizard, "confirm", decline)
        console = _console()
        args = argparse.Namespace(project="demo", yes=False)

        assert await assign.run_assign(args, tracker=assign_tracker, settings=settings, sleep=sleep, console=console) == 0
        assert assign_tracker.update_calls == []
        assert "Cancelled." in _output(console)

    @pytest.mark.asyncio
    async def test_failures_are_reported(self, assign_tracker, settings, sleep, capsys) -> None:  # type: ignore[no-untyped-def]
        assign_tracker.fail_updates = {3}
        console = _console()
        args = argparse.Namespace(project="demo", yes=True)

        await assign.run_assign(args, tracker=assign_tracker, settings=settings, sleep=sleep, console=console)

        assert "✗ Search: Version conflict on 3" in _output(console)
        out = capsys.readouterr().out
        assert "  Failed:    1\n    - Search" in out
        assert "  Coverage:  67% of user stories assigned" in out

    @pytest.mark.asyncio
    async def test_nothing_to_do(self, project, settings, sleep) -> None:  # type: ignore[no-untyped-def]
        tracker = FakeTracker(projects=[project], stories=[TrackerUserStory(id=1, subject="Login", assigned_to=7)])
        console = _console()
        args = argparse.Namespace(project="demo", yes=True)

        assert await assign.run_assign(args, tracker=tracker, settings=settings, sleep=sleep, console=console) == 0
        assert "Nothing to do" in _output(console)
        assert tracker.update_calls == []

    @pytest.mark.asyncio
    async def test_select_project_without_projects(self) -> None:
        with pytest.raises(SetupError):
            await assign.select_project([])


class TestWizardRunner:
    @pytest.fixture
    def scripted(self, tmp_path, settings, project, monkeypatch):  # type: ignore[no-untyped-def]
        """Replace every wizard step with a fixed answer; returns the mutable answer sheet."""
        (tmp_path / "ROADMAP.md").write_text(ROADMAP_TEXT, encoding="utf-8")
        sheet = {"sources": SourceChoices(use_roadmap=True), "target": project, "confirm": True}

        async def ask_project_path():  # type: ignore[no-untyped-def]
            return tmp_path

        async def ask_credentials(_settings):  # type: ignore[no-untyped-def]
            return settings

        async def ask_sources(profile, *, has_project):  # type: ignore[no-untyped-def]
            return sheet["sources"]

        async def ask_target(projects):  # type: ignore[no-untyped-def]
            return sheet["target"]

        async def confirm(message, *, default=False):  # type: ignore[no-untyped-def]
            return sheet["confirm"]

        for name, fake in {
            "ask_project_path": ask_project_path,
            "ask_credentials": ask_credentials,
            "ask_sources": ask_sources,
            "ask_target": ask_target,
            "confirm": confirm,
        }.items():
            monkeypatch.setattr(wizard, name, fake)
        return sheet

    @pytest.mark.asyncio
    async def test_full_run(self, scripted, tracker, sleep, capsys) -> None:  # type: ignore[no-untyped-def]
        console = _console()
        args = argparse.Namespace(titles=3, verbose=True)

        assert await app.run_wizard(args, console=console, tracker=tracker, sleep=sleep) == 0

        assert [s.subject for s in tracker.created_stories] == [
            "Phase 1: Launch",
            "Implement search filters",
            "Write release notes",
        ]
        out = capsys.readouterr().out
        assert "  roadmap: 3 items (1 epic, 2 tasks)" in out
        assert "  Created:   3 (1 epic, 2 tasks)" in out
        assert "https://tree.taiga.io/project/demo/" in out
        assert "Connected" in _output(console)

    @pytest.mark.asyncio
    async def test_new_project_is_created(self, scripted, tracker, sleep) -> None:  # type: ignore[no-untyped-def]
        scripted["target"] = wizard.NewProjectSpec(name="Fresh Start")
        args = argparse.Namespace(titles=3, verbose=True)

        await app.run_wizard(args, console=_console(), tracker=tracker, sleep=sleep)

        assert [p.name for p in tracker.created_projects] == ["Fresh Start"]
        assert {s.project for s in tracker.created_stories} == {101}

    @pytest.mark.asyncio
    async def test_nothing_to_generate(self, scripted, tracker) -> None:  # type: ignore[no-untyped-def]
        scripted["sources"] = SourceChoices()
        console = _console()

        assert await app.run_wizard(argparse.Namespace(titles=3, verbose=True), console=console, tracker=tracker) == 0
        assert "Nothing to generate." in _output(console)
        assert tracker.created_stories == []

    @pytest.mark.asyncio
    async def test_declined_preview(self, scripted, tracker) -> None:  # type: ignore[no-untyped-def]
        scripted["confirm"] = False
        console = _console()

        assert await app.run_wizard(argparse.Namespace(titles=3, verbose=True), console=console, tracker=tracker) == 0
        assert "Cancelled." in _output(console)
        assert tracker.created_stories == []
        assert tracker.created_projects == []
