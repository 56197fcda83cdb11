"""Custom exception hierarchy for taigapilot.

All taigapilot exceptions inherit from :class:`TaigaPilotError`, making it easy
to catch any library error with a single ``except`` clause while still allowing
callers to handle specific failure modes.

Soft "no data" conditions (a failed ``git`` call, an unreadable source file)
are not exceptions: analyzers report them through
:class:`~taigapilot.analyzers.result.SourceResult` instead.
"""

from __future__ import annotations


class TaigaPilotError(Exception):
    """Base exception for all taigapilot errors."""


class ConfigError(TaigaPilotError):
    """Raised when required configuration (e.g. tracker credentials) is missing or invalid."""


class AuthenticationError(TaigaPilotError):
    """Raised when the tracker rejects the configured credentials."""


class TrackerError(TaigaPilotError):
    """Raised when a tracker API call fails.

    Attributes:
        status_code: HTTP status of the failed response, if one was received.
    """

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class SourceReadError(TaigaPilotError):
    """Raised when a generator cannot read the source it was built from."""


class SetupError(TaigaPilotError):
    """Raised when a run precondition fails (no projects, bad selection, missing path)."""
