"""Tests for project discovery."""

from __future__ import annotations

from pathlib import Path

import pytest

from taigapilot.analyzers.discovery import ProjectDiscovery


def _touch(root: Path, *names: str) -> None:
    for name in names:
        path = root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("", encoding="utf-8")


class TestDetectType:
    def test_first_signature_wins_tie(self, tmp_path: Path) -> None:
        # React (package.json + public/index.html) and Vue (package.json + vue.config.js) both match twice.
        _touch(tmp_path, "package.json", "public/index.html", "vue.config.js")
        profile = ProjectDiscovery(tmp_path).analyze()
        assert (profile.type, profile.framework) == ("react", "React")

    def test_laravel_uses_nested_indicator(self, tmp_path: Path) -> None:
        _touch(tmp_path, "composer.json", "routes/web.php")
        profile = ProjectDiscovery(tmp_path).analyze()
        assert profile.type == "laravel"

    def test_single_indicator_is_not_enough(self, tmp_path: Path) -> None:
        _touch(tmp_path, "requirements.txt")
        assert ProjectDiscovery(tmp_path).analyze().type == "unknown"

    def test_manifest_fallback(self, tmp_path: Path) -> None:
        _touch(tmp_path, "package.json")
        profile = ProjectDiscovery(tmp_path).analyze()
        assert (profile.type, profile.framework) == ("javascript", "JavaScript")

    @pytest.mark.parametrize(
        ("files", "expected"),
        [
            (["requirements.txt", "main.py"], "python"),
            (["Dockerfile", "docker-compose.yml"], "docker"),
            (["package.json", "server.js"], "node"),
        ],
    )
    def test_signatures(self, tmp_path: Path, files: list[str], expected: str) -> None:
        _touch(tmp_path, *files)
        assert ProjectDiscovery(tmp_path).analyze().type == expected


class TestAnalyze:
    def test_profile_fields(self, tmp_path: Path) -> None:
        _touch(tmp_path, "README.md", "ROADMAP.md", "todo.md", "package.json", ".env", "notes.txt")
        (tmp_path / ".git").mkdir()
        profile = ProjectDiscovery(tmp_path).analyze()

        assert profile.has_version_control
        assert profile.has_roadmap
        assert sorted(p.name for p in profile.roadmap_files) == ["ROADMAP.md", "todo.md"]
        assert "README.md" in profile.documentation_files
        assert "notes.txt" not in profile.documentation_files
        assert profile.package_files == ["package.json"]
        assert profile.config_files == [".env"]

    def test_missing_directory_gives_unknown_profile(self, tmp_path: Path) -> None:
        profile = ProjectDiscovery(tmp_path / "missing").analyze()
        assert profile.type == "unknown"
        assert not profile.has_roadmap

    def test_suggested_tasks_by_type(self, tmp_path: Path) -> None:
        _touch(tmp_path, "artisan", "composer.json")
        suggestions = ProjectDiscovery(tmp_path).suggested_tasks()
        assert "Review and implement missing Policies" in suggestions

    def test_no_suggestions_for_unknown(self, tmp_path: Path) -> None:
        assert ProjectDiscovery(tmp_path).suggested_tasks() == []
