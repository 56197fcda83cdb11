"""Mapping functions between tracker API payloads and domain models."""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from taigapilot.exceptions import TrackerError
from taigapilot.models.tracker import TrackerMember

ModelT = TypeVar("ModelT", bound=BaseModel)


def parse_one(payload: Any, model: type[ModelT]) -> ModelT:
    """Validate a single JSON object into *model*.

    Raises:
        TrackerError: If the payload does not have the expected shape.
    """
    if not isinstance(payload, dict):
        raise TrackerError(f"Expected a {model.__name__} object, got {type(payload).__name__}")
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise TrackerError(f"Invalid {model.__name__} payload: {exc}") from exc


def parse_list(payload: Any, model: type[ModelT]) -> list[ModelT]:
    """Validate a JSON array of objects into a list of *model*."""
    if not isinstance(payload, list):
        raise TrackerError(f"Expected a list of {model.__name__}, got {type(payload).__name__}")
    return [parse_one(entry, model) for entry in payload]


def parse_members(project_payload: Any) -> list[TrackerMember]:
    """Members are embedded in the project-detail payload under ``members``."""
    if not isinstance(project_payload, dict):
        raise TrackerError("Expected a project object")
    return parse_list(project_payload.get("members") or [], TrackerMember)


def parse_auth_token(payload: Any) -> str:
    token = payload.get("auth_token") if isinstance(payload, dict) else None
    if not isinstance(token, str) or not token:
        raise TrackerError("Login response did not include an auth token")
    return token
