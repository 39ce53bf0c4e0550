"""Shared fixtures for unit tests."""

from datetime import datetime
from typing import Any
from unittest.mock import AsyncMock

import pytest

from domain.entities.filter_state import DEFAULT_FILTER_STATE, FilterState
from domain.entities.profile import Profile
from domain.entities.profile_status import ProfileStatus


class FakeUnitOfWork:
    """Fake Unit of Work with both repository mocks for unit testing."""

    def __init__(self) -> None:
        self.profiles = AsyncMock()
        self.statuses = AsyncMock()
        self.committed = False
        self.rolled_back = False

    async def commit(self) -> None:
        self.committed = True

    async def rollback(self) -> None:
        self.rolled_back = True

    async def __aenter__(self) -> "FakeUnitOfWork":
        return self

    async def __aexit__(self, *args: Any) -> None:
        pass


class FakeFilterStore:
    """In-memory filter persistence port."""

    def __init__(self, state: FilterState | None = None) -> None:
        self.state = state or DEFAULT_FILTER_STATE
        self.saves = 0
        self.cleared = False

    def load(self) -> FilterState:
        return self.state

    def save(self, state: FilterState) -> None:
        self.state = state
        self.saves += 1

    def clear(self) -> None:
        self.cleared = True


def make_profile(id: str = "p1", **overrides: Any) -> Profile:
    """A stored profile entity."""
    data: dict[str, Any] = {
        "name": "Aisha Sharma",
        "caste_or_community": "Iyer",
        "age": 27,
        "star": "Rohini",
        "star_match_score": 7.5,
        "city": "Chennai",
        "state": "Tamil Nadu",
        "mobile_number": "+919876543210",
        "status_id": "new",
        "matrimony_id": "TM-100234",
        "comments": [],
        "created_at": datetime(2026, 1, 1, 9, 0),
        "updated_at": datetime(2026, 1, 2, 9, 0),
    }
    data.update(overrides)
    return Profile(id=id, **data)


@pytest.fixture
def uow() -> FakeUnitOfWork:
    """Create a fresh FakeUnitOfWork."""
    return FakeUnitOfWork()


@pytest.fixture
def new_status() -> ProfileStatus:
    return ProfileStatus(id="new", name="New", description="Newly added profile.")
