"""Submission progress events.

Several generators submit into the same project during one run, and each
of them walks epics, stories and tasks in turn. Events therefore carry the
generator name (*source*) together with the item kind, so a display can
keep one line per generator and kind.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from taigapilot.models.enums import TaskKind


class SubmitProgress(ABC):
    """Observer for a generator's submission loop."""

    @abstractmethod
    def batch_start(self, source: str, kind: TaskKind, total: int) -> None:
        """*source* is about to submit *total* items of *kind*."""

    @abstractmethod
    def item_done(self, source: str, kind: TaskKind, *, created: bool) -> None:
        """One item was handled; *created* is False when it was rejected or skipped."""

    @abstractmethod
    def batch_done(self, source: str, kind: TaskKind) -> None:
        ...

    @abstractmethod
    def batch_error(self, source: str, kind: TaskKind, error: BaseException) -> None:
        """The batch stopped on an unexpected *error*."""


class NullSubmitProgress(SubmitProgress):
    def batch_start(self, source: str, kind: TaskKind, total: int) -> None:
        pass

    def item_done(self, source: str, kind: TaskKind, *, created: bool) -> None:
        pass

    def batch_done(self, source: str, kind: TaskKind) -> None:
        pass

    def batch_error(self, source: str, kind: TaskKind, error: BaseException) -> None:
        pass
