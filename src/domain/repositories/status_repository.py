"""Profile status repository protocol."""

from typing import Protocol

from domain.entities.profile_status import ProfileStatus


class IStatusRepository(Protocol):
    """Repository interface for ProfileStatus entities."""

    async def get(self, id: str) -> ProfileStatus | None:
        """Get a status by ID."""
        ...

    async def get_all(self) -> list[ProfileStatus]:
        """Get all statuses ordered by name."""
        ...

    async def any_exists(self) -> bool:
        """Check whether at least one status is stored."""
        ...

    async def create(self, status: ProfileStatus) -> ProfileStatus:
        """Create a new status."""
        ...

    async def create_many(self, statuses: list[ProfileStatus]) -> list[ProfileStatus]:
        """Create several statuses in one batch."""
        ...

    async def update(self, status: ProfileStatus) -> ProfileStatus:
        """Update an existing status."""
        ...

    async def delete_if_unreferenced(self, id: str) -> bool:
        """Delete a status only while no profile references it."""
        ...
