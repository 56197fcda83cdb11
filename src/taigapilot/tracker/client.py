"""Async HTTP client for the Taiga REST API.

A thin typed wrapper: one method per endpoint, no retries. Any non-2xx
response becomes a :class:`~taigapilot.exceptions.TrackerError`; rejected
credentials become an :class:`~taigapilot.exceptions.AuthenticationError`.
"""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Any

import httpx

from taigapilot.config import TrackerSettings
from taigapilot.exceptions import AuthenticationError, TrackerError
from taigapilot.models.tracker import (
    CreateProjectInput,
    CreateTaskInput,
    CreateUserStoryInput,
    TrackerMember,
    TrackerProject,
    TrackerStatus,
    TrackerUser,
    TrackerUserStory,
)
from taigapilot.tracker.base import Tracker
from taigapilot.tracker.mapper import parse_auth_token, parse_list, parse_members, parse_one
from taigapilot.tracker.session import AuthSession

logger = logging.getLogger(__name__)

_REJECTED_LOGIN_STATUSES = frozenset({400, 401, 403})
# Taiga paginates list endpoints unless told not to.
_NO_PAGINATION = {"x-disable-pagination": "True"}


def _error_detail(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text[:200]
    if isinstance(payload, dict):
        detail = payload.get("_error_message") or payload.get("detail")
        if detail:
            return str(detail)
    return str(payload)[:200]


class TaigaClient(Tracker):
    """Taiga API client.

    Use as an async context manager::

        async with TaigaClient(TrackerSettings.from_env()) as client:
            projects = await client.list_projects()

    Args:
        settings: API URL and credentials.
        session: Token holder; built from *settings* when omitted.
        transport: Optional httpx transport (tests pass ``httpx.MockTransport``).
        timeout: Per-request timeout in seconds.
    """

    def __init__(
        self,
        settings: TrackerSettings,
        *,
        session: AuthSession | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 30.0,
    ) -> None:
        self.settings = settings
        self.session = session or AuthSession(settings.username, settings.password)
        self._transport = transport
        self._timeout = timeout
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> TaigaClient:
        self._client = httpx.AsyncClient(
            base_url=self.settings.api_url,
            headers={"Content-Type": "application/json"},
            timeout=httpx.Timeout(self._timeout),
            transport=self._transport,
        )
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _require_client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise TrackerError("Client is not initialized. Use 'async with'.")
        return self._client

    async def login(self) -> str:
        """Exchange the configured credentials for a bearer token."""
        username, password = self.session.credentials()
        client = self._require_client()
        try:
            response = await client.post("/auth", json={"type": "normal", "username": username, "password": password})
        except httpx.HTTPError as exc:
            raise TrackerError(f"Login request failed: {exc}") from exc

        if response.status_code in _REJECTED_LOGIN_STATUSES:
            raise AuthenticationError(f"Tracker rejected the credentials for {username!r}: {_error_detail(response)}")
        if not response.is_success:
            raise TrackerError(
                f"Login failed with HTTP {response.status_code}: {_error_detail(response)}",
                status_code=response.status_code,
            )
        token = parse_auth_token(response.json())
        self.session.store(token)
        logger.debug("Authenticated as %s", username)
        return token

    async def _token(self) -> str:
        token = self.session.token
        if token is None:
            token = await self.login()
        return token

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        client = self._require_client()
        token = await self._token()
        request_headers = {"Authorization": f"Bearer {token}", **(headers or {})}
        try:
            response = await client.request(method, path, params=params, json=json, headers=request_headers)
        except httpx.HTTPError as exc:
            raise TrackerError(f"{method} {path} failed: {exc}") from exc

        if not response.is_success:
            raise TrackerError(
                f"{method} {path} failed with HTTP {response.status_code}: {_error_detail(response)}",
                status_code=response.status_code,
            )
        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    # ------------------------------------------------------------------
    # Users and projects
    # ------------------------------------------------------------------

    async def get_current_user(self) -> TrackerUser:
        return parse_one(await self._request("GET", "/users/me"), TrackerUser)

    async def list_projects(self) -> list[TrackerProject]:
        user = await self.get_current_user()
        payload = await self._request("GET", "/projects", params={"member": user.id}, headers=_NO_PAGINATION)
        return parse_list(payload, TrackerProject)

    async def create_project(self, project_input: CreateProjectInput) -> TrackerProject:
        payload = await self._request("POST", "/projects", json=project_input.model_dump())
        project = parse_one(payload, TrackerProject)
        logger.info("Created project %s (id=%d)", project.name, project.id)
        return project

    async def get_project(self, project_id: int) -> TrackerProject:
        return parse_one(await self._request("GET", f"/projects/{project_id}"), TrackerProject)

    async def get_project_by_slug(self, slug: str) -> TrackerProject:
        return parse_one(await self._request("GET", "/projects/by_slug", params={"slug": slug}), TrackerProject)

    async def get_project_members(self, project_id: int) -> list[TrackerMember]:
        try:
            payload = await self._request("GET", f"/projects/{project_id}")
            return parse_members(payload)
        except TrackerError as exc:
            logger.warning("Could not load members of project %d: %s", project_id, exc)
            return []

    # ------------------------------------------------------------------
    # User stories
    # ------------------------------------------------------------------

    async def list_user_story_statuses(self, project_id: int) -> list[TrackerStatus]:
        payload = await self._request("GET", "/userstory-statuses", params={"project": project_id})
        return parse_list(payload, TrackerStatus)

    async def list_user_stories(self, project_id: int) -> list[TrackerUserStory]:
        payload = await self._request(
            "GET", "/userstories", params={"project": project_id}, headers=_NO_PAGINATION
        )
        return parse_list(payload, TrackerUserStory)

    async def get_user_story(self, story_id: int) -> TrackerUserStory:
        return parse_one(await self._request("GET", f"/userstories/{story_id}"), TrackerUserStory)

    async def create_user_story(self, story_input: CreateUserStoryInput) -> TrackerUserStory:
        payload = await self._request("POST", "/userstories", json=story_input.model_dump(exclude_none=True))
        return parse_one(payload, TrackerUserStory)

    async def update_user_story(self, story_id: int, changes: dict[str, object]) -> TrackerUserStory:
        current = await self.get_user_story(story_id)
        body = {**changes, "version": current.version}
        payload = await self._request("PATCH", f"/userstories/{story_id}", json=body)
        return parse_one(payload, TrackerUserStory)

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------

    async def list_task_statuses(self, project_id: int) -> list[TrackerStatus]:
        payload = await self._request("GET", "/task-statuses", params={"project": project_id})
        return parse_list(payload, TrackerStatus)

    async def create_task(self, task_input: CreateTaskInput) -> dict[str, object]:
        payload = await self._request("POST", "/tasks", json=task_input.model_dump(exclude_none=True))
        if not isinstance(payload, dict):
            raise TrackerError("Task creation returned no task object")
        return payload
