"""Map generated items onto tracker status and member identifiers."""

from __future__ import annotations

from dataclasses import dataclass

from taigapilot.models.enums import TaskStatus
from taigapilot.models.tracker import TrackerMember, TrackerStatus


@dataclass(frozen=True)
class StatusMap:
    """Resolved ``done`` / ``new`` status ids for one project.

    Either id may be *None* when the project has no matching status; the
    tracker then applies its own default.
    """

    done_id: int | None
    new_id: int | None

    @classmethod
    def from_statuses(cls, statuses: list[TrackerStatus]) -> StatusMap:
        done = next((s for s in statuses if "done" in s.name.lower() or s.is_closed), None)
        new = next((s for s in statuses if "new" in s.name.lower() or s.order == 0), None)
        return cls(done_id=done.id if done else None, new_id=new.id if new else None)

    def for_status(self, status: TaskStatus) -> int | None:
        if status is TaskStatus.COMPLETED:
            return self.done_id
        return self.new_id


def _matches(author: str, value: str | None) -> bool:
    if not value:
        return False
    candidate = value.strip().lower()
    if not candidate:
        return False
    return author == candidate or author in candidate or candidate in author


def resolve_assignee(author: str | None, members: list[TrackerMember]) -> int | None:
    """Pick the member an item should be assigned to.

    A single-member project gets every item. Otherwise the item's author is
    compared case-insensitively (equality or substring) with each member's
    full name, username and email; no match leaves the item unassigned.
    """
    if len(members) == 1:
        return members[0].id
    if not author or not author.strip():
        return None
    needle = author.strip().lower()
    for member in members:
        if any(_matches(needle, value) for value in (member.full_name, member.username, member.email)):
            return member.id
    return None
