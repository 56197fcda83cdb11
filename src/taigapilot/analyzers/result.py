"""Soft-failure result type shared by the source analyzers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class SourceResult(Generic[T]):
    """A value read from an external source, plus an optional diagnostic.

    A result with a diagnostic still carries a usable (usually empty) value:
    callers treat it as "no data from this source", never as an error.
    """

    value: T
    diagnostic: str | None = None

    @property
    def ok(self) -> bool:
        return self.diagnostic is None

    @classmethod
    def empty(cls, value: T, diagnostic: str) -> SourceResult[T]:
        return cls(value=value, diagnostic=diagnostic)
