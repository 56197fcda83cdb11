"""Tests for title cleaning."""

from __future__ import annotations

import pytest

from taigapilot.generators.sanitize import (
    MAX_TITLE_LENGTH,
    clean_submission_title,
    contains_pictograph,
    sanitize_commit_message,
    sanitize_title,
    truncate,
)

TITLES = [
    "✅ Phase 1: Foundation",
    "🚧 **Feature** `builder` in progress",
    "[x] Implement authentication middleware",
    "- [ ] write_docs_for_api",
    "Setup:",
    "ab",
    "🎯",
    "  Leading and trailing --  ",
    "A" * 150,
    "x" * 99 + ": tail",
    "Rocket 🚀 launch ✨ with sparkles ⚡️",
    "Family 👨‍👩‍👧 emoji",
    "Implement search ⭐ ranking",
    "⏳ Waiting on vendor API",
    "Upgrade ⬆️ dependencies ⌛",
    "Release™ notes © 2024 ®",
    "Ship ▶️ onboarding ↗ flow 〰",
    "Flag 🏴󠁧󠁢󠁳󠁣󠁴󠁿 rollout 1️⃣",
]


class TestSanitizeTitle:
    @pytest.mark.parametrize("title", TITLES)
    def test_idempotent(self, title: str) -> None:
        once = sanitize_title(title)
        if once is not None:
            assert sanitize_title(once) == once

    @pytest.mark.parametrize("title", TITLES)
    def test_length_and_pictographs(self, title: str) -> None:
        cleaned = sanitize_title(title)
        if cleaned is not None:
            assert len(cleaned) <= MAX_TITLE_LENGTH
            assert not contains_pictograph(cleaned)

    def test_strips_glyphs_and_emphasis(self) -> None:
        assert sanitize_title("✅ **Phase 1**: Foundation") == "Phase 1: Foundation"

    @pytest.mark.parametrize(
        ("title", "expected"),
        [
            ("Implement search ⭐ ranking", "Implement search ranking"),
            ("⏳ Waiting on vendor API", "Waiting on vendor API"),
            ("Upgrade ⬆️ dependencies ⌛", "Upgrade dependencies"),
            ("Release™ notes © 2024 ®", "Release notes 2024"),
            ("Flag 🏴󠁧󠁢󠁳󠁣󠁴󠁿 rollout 1️⃣", "Flag rollout 1"),
        ],
    )
    def test_strips_symbol_block_emoji(self, title: str, expected: str) -> None:
        assert sanitize_title(title) == expected
        assert clean_submission_title(title) == expected

    @pytest.mark.parametrize("code_point", [0x2B50, 0x23F3, 0x231B, 0x2B06, 0x25B6, 0x2197, 0x3030, 0x2122, 0x1FAE0])
    def test_symbol_code_points_are_pictographs(self, code_point: int) -> None:
        assert contains_pictograph(chr(code_point))

    def test_plain_punctuation_is_not_a_pictograph(self) -> None:
        assert not contains_pictograph("Phase 1: API & UI (v2) - #42 @team 50% <done>")

    def test_strips_checkbox(self) -> None:
        assert sanitize_title("[x] Implement authentication middleware") == "Implement authentication middleware"

    def test_underscores_become_spaces(self) -> None:
        assert sanitize_title("write_docs_for_api") == "write docs for api"

    @pytest.mark.parametrize("title", ["Setup:", "ab", "🎯", "**:**"])
    def test_junk_is_discarded(self, title: str) -> None:
        assert sanitize_title(title) is None

    def test_truncates_without_trailing_punctuation(self) -> None:
        cleaned = sanitize_title("x" * 99 + ": tail")
        assert cleaned == "x" * 99


class TestCleanSubmissionTitle:
    @pytest.mark.parametrize("title", TITLES)
    def test_idempotent_and_bounded(self, title: str) -> None:
        once = clean_submission_title(title)
        assert clean_submission_title(once) == once
        assert len(once) <= MAX_TITLE_LENGTH
        assert not contains_pictograph(once)

    def test_pictograph_only_title_becomes_empty(self) -> None:
        assert clean_submission_title("🚀 ✨") == ""


class TestCommitMessages:
    def test_drops_prefix_and_capitalizes(self) -> None:
        assert sanitize_commit_message("feat: add login form") == "Add login form"

    def test_truncates_to_eighty(self) -> None:
        title = sanitize_commit_message("implement " + "x" * 100)
        assert len(title) == 80
        assert title.endswith("...")

    def test_truncate_leaves_short_text(self) -> None:
        assert truncate("short", 10) == "short"
