"""Profile domain entity."""

from dataclasses import dataclass, field
from datetime import datetime

from core.timeutils import utcnow

# Fields a caller supplies; everything else is assigned by the store.
USER_FIELDS: tuple[str, ...] = (
    "name",
    "caste_or_community",
    "age",
    "star",
    "star_match_score",
    "city",
    "state",
    "mobile_number",
    "status_id",
    "matrimony_id",
    "comments",
)


@dataclass
class Profile:
    """Domain entity for a candidate profile."""

    name: str
    caste_or_community: str
    age: int
    star: str
    star_match_score: float
    city: str
    state: str
    mobile_number: str
    status_id: str
    matrimony_id: str
    comments: list[str] = field(default_factory=list)
    id: str | None = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def __post_init__(self) -> None:
        """Ensure updated_at is always at least as recent as created_at."""
        if self.updated_at < self.created_at:
            self.updated_at = self.created_at

    def user_data(self) -> dict[str, object]:
        """Return the caller-supplied fields as a plain dict."""
        return {name: getattr(self, name) for name in USER_FIELDS}
