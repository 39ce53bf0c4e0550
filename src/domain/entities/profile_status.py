"""Profile status domain entity and well-known statuses."""

from dataclasses import dataclass


@dataclass
class ProfileStatus:
    """Domain entity for a workflow stage a profile can be in."""

    name: str
    id: str | None = None
    description: str | None = None


class StatusIds:
    """Ids of the statuses seeded into every store."""

    NEW = "new"
    CONTACTED = "contacted"
    MEETING_SCHEDULED = "meeting-scheduled"
    REJECTED = "rejected"
    ACCEPTED = "accepted"
    ON_HOLD = "on-hold"
    SHARED = "shared"


@dataclass(frozen=True, slots=True)
class StatusDisplay:
    """Presentation defaults for a well-known status."""

    sort_priority: int
    badge_color: str


DEFAULT_STATUSES: tuple[ProfileStatus, ...] = (
    ProfileStatus(id=StatusIds.NEW, name="New", description="Newly added profile."),
    ProfileStatus(
        id=StatusIds.CONTACTED, name="Contacted", description="Initial contact made."
    ),
    ProfileStatus(
        id=StatusIds.MEETING_SCHEDULED,
        name="Meeting Scheduled",
        description="A meeting has been set up.",
    ),
    ProfileStatus(
        id=StatusIds.REJECTED, name="Rejected", description="Profile was rejected."
    ),
    ProfileStatus(
        id=StatusIds.ACCEPTED, name="Accepted", description="Profile was accepted."
    ),
    ProfileStatus(
        id=StatusIds.ON_HOLD,
        name="On Hold",
        description="Decision pending or temporarily paused.",
    ),
    ProfileStatus(
        id=StatusIds.SHARED,
        name="Profile Shared",
        description="Profile was shared with the family.",
    ),
)

STATUS_DISPLAY: dict[str, StatusDisplay] = {
    StatusIds.NEW: StatusDisplay(sort_priority=10, badge_color="#3B82F6"),
    StatusIds.CONTACTED: StatusDisplay(sort_priority=20, badge_color="#8B5CF6"),
    StatusIds.MEETING_SCHEDULED: StatusDisplay(sort_priority=30, badge_color="#F59E0B"),
    StatusIds.SHARED: StatusDisplay(sort_priority=40, badge_color="#06B6D4"),
    StatusIds.ON_HOLD: StatusDisplay(sort_priority=50, badge_color="#6B7280"),
    StatusIds.ACCEPTED: StatusDisplay(sort_priority=60, badge_color="#10B981"),
    StatusIds.REJECTED: StatusDisplay(sort_priority=70, badge_color="#EF4444"),
}

# Custom statuses sort after the well-known ones and use a neutral badge.
CUSTOM_STATUS_DISPLAY = StatusDisplay(sort_priority=100, badge_color="#64748B")


def status_display(status_id: str | None) -> StatusDisplay:
    """Return the presentation defaults for a status id."""
    if status_id is None:
        return CUSTOM_STATUS_DISPLAY
    return STATUS_DISPLAY.get(status_id, CUSTOM_STATUS_DISPLAY)


def status_name(status_id: str, statuses: list[ProfileStatus]) -> str:
    """Resolve a status id against a loaded status list."""
    for status in statuses:
        if status.id == status_id:
            return status.name
    return "Unknown"
