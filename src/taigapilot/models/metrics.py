"""Aggregated code-review findings."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field

from taigapilot.models.enums import Severity

NO_TEST_DIRECTORY = "NO_TEST_DIRECTORY"
"""Marker entry in ``files_without_tests`` when the project has no test directory."""


class SecurityIssue(BaseModel):
    file: Path
    issue: str
    severity: Severity


class CodeMetrics(BaseModel):
    """Counters and file lists built once per code-review analysis pass.

    ``files_without_tests`` holds absolute paths plus, optionally, the
    :data:`NO_TEST_DIRECTORY` marker string.
    """

    total_files: int = 0
    lines_of_code: int = 0
    files_without_tests: list[Path | str] = Field(default_factory=list)
    files_without_docs: list[Path] = Field(default_factory=list)
    security_issues: list[SecurityIssue] = Field(default_factory=list)
    complexity_issues: list[Path] = Field(default_factory=list)
    dependency_issues: list[str] = Field(default_factory=list)

    @property
    def missing_test_directory(self) -> bool:
        return NO_TEST_DIRECTORY in self.files_without_tests

    def untested_files(self) -> list[Path]:
        return [f for f in self.files_without_tests if isinstance(f, Path)]
