"""Credentials plus the bearer token obtained with them."""

from __future__ import annotations

import time
from collections.abc import Callable

from taigapilot.exceptions import ConfigError

TOKEN_LIFETIME_SECONDS = 24 * 60 * 60


class AuthSession:
    """Holds credentials and the current token with its nominal expiry.

    Owned by one client instance; there is no process-wide token state. The
    clock is injectable so expiry can be tested without waiting a day.
    """

    def __init__(
        self,
        username: str | None,
        password: str | None,
        *,
        clock: Callable[[], float] = time.time,
        lifetime: float = TOKEN_LIFETIME_SECONDS,
    ) -> None:
        self.username = username
        self.password = password
        self._clock = clock
        self._lifetime = lifetime
        self._token: str | None = None
        self._expires_at = 0.0

    @property
    def token(self) -> str | None:
        return None if self.is_expired() else self._token

    def credentials(self) -> tuple[str, str]:
        """Return ``(username, password)`` or raise :class:`ConfigError` if either is missing."""
        if not self.username or not self.password:
            raise ConfigError(
                "Tracker credentials are not configured. Set TAIGA_USERNAME and TAIGA_PASSWORD."
            )
        return self.username, self.password

    def store(self, token: str) -> None:
        self._token = token
        self._expires_at = self._clock() + self._lifetime

    def is_expired(self) -> bool:
        return self._token is None or self._clock() > self._expires_at

    def clear(self) -> None:
        self._token = None
        self._expires_at = 0.0
