"""Profile repository protocol."""

from typing import Protocol

from domain.entities.profile import Profile
from domain.entities.query import ProfileScan, QueryPlan


class IProfileRepository(Protocol):
    """Repository interface for Profile entities."""

    async def get(self, id: str) -> Profile | None:
        """Get a profile by ID."""
        ...

    async def list_after(
        self, plan: QueryPlan, limit: int, start_after: str | None = None
    ) -> ProfileScan:
        """Scan up to ``limit`` stored matches ordered by the plan, after a cursor.

        Corrupt rows are dropped from ``items`` but still count as scanned.
        Raises CursorExpiredError if ``start_after`` names a missing profile.
        """
        ...

    async def position_of(self, plan: QueryPlan, id: str) -> int | None:
        """Count the matches ordered at or before a profile.

        Returns None when the profile no longer exists.
        """
        ...

    async def cursor_at(self, plan: QueryPlan, position: int) -> str | None:
        """Fetch and discard the first ``position`` matches, returning the last id.

        Returns None when fewer than ``position`` profiles match.
        """
        ...

    async def count(self, plan: QueryPlan) -> int:
        """Count profiles matching the plan's filters."""
        ...

    async def find_id_by_status(self, status_id: str) -> str | None:
        """Get the id of any one profile referencing a status."""
        ...

    async def create(self, profile: Profile) -> Profile:
        """Create a new profile."""
        ...

    async def update(self, profile: Profile) -> Profile:
        """Update an existing profile."""
        ...

    async def delete(self, id: str) -> bool:
        """Delete a profile and return success status."""
        ...
