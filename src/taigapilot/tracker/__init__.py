"""Tracker access: the abstract contract and the Taiga HTTP client."""

from taigapilot.tracker.base import Tracker
from taigapilot.tracker.client import TaigaClient
from taigapilot.tracker.session import AuthSession

__all__ = ["AuthSession", "TaigaClient", "Tracker"]
