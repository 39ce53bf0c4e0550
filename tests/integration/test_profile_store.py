"""Integration tests for profile and status persistence on SQLite."""

from collections.abc import Callable

import pytest
from sqlalchemy import select
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.exceptions import StoreUnavailableError
from core.timeutils import utcnow
from domain.entities.filter_state import INCLUDE_ALL_STATUSES
from domain.entities.profile_status import ProfileStatus
from domain.entities.query import ProfileQuery
from domain.services.profile_service import ProfileService
from domain.services.status_service import StatusService
from infrastructure.database.models import ProfileModel, ProfileStatusModel
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork
from tests.conftest import profile_payload

UowFactory = Callable[[], SQLAlchemyUnitOfWork]


@pytest.fixture
async def statuses(uow_factory: UowFactory) -> StatusService:
    service = StatusService(uow_factory)
    await service.seed_default_statuses()
    return service


@pytest.fixture
def profiles(uow_factory: UowFactory, statuses: StatusService) -> ProfileService:
    return ProfileService(uow_factory)


async def create_many(profiles: ProfileService, count: int, **overrides: object) -> None:
    for i in range(count):
        await profiles.create_profile(
            profile_payload(name=f"Candidate {i:02d}", matrimony_id=f"TM-{i:05d}", **overrides)
        )


async def add_corrupt_row(
    session_factory: async_sessionmaker[AsyncSession], id: str, name: str
) -> None:
    """Store a row that fails read validation (malformed mobile number)."""
    async with session_factory() as session:
        now = utcnow()
        session.add(
            ProfileModel(
                id=id,
                **{**profile_payload(name=name), "mobile_number": "123"},
                created_at=now,
                updated_at=now,
            )
        )
        await session.commit()


class TestListing:
    @pytest.mark.asyncio
    async def test_paginates_fifteen_matches(self, profiles: ProfileService):
        await create_many(profiles, 15)

        pages = [
            await profiles.list_profiles(ProfileQuery(page_number=n, page_size=10))
            for n in (1, 2, 3)
        ]

        assert [len(p.items) for p in pages] == [10, 5, 0]
        assert [p.total_count for p in pages] == [15, 15, 15]
        seen = [p.id for page in pages for p in page.items]
        assert len(set(seen)) == 15

    @pytest.mark.asyncio
    async def test_pages_follow_sort_order(self, profiles: ProfileService):
        await create_many(profiles, 12)

        names = []
        for n in (1, 2, 3):
            page = await profiles.list_profiles(
                ProfileQuery(sort_field="name", page_number=n, page_size=5)
            )
            names.extend(p.name for p in page.items)

        assert names == [f"Candidate {i:02d}" for i in range(12)]

    @pytest.mark.asyncio
    async def test_prefix_search_is_case_sensitive(self, profiles: ProfileService):
        await profiles.create_profile(profile_payload(name="Aisha Sharma"))
        await profiles.create_profile(profile_payload(name="rohan"))

        found = await profiles.list_profiles(ProfileQuery(search_term="Ai"))
        assert [p.name for p in found.items] == ["Aisha Sharma"]
        assert found.total_count == 1

        none = await profiles.list_profiles(ProfileQuery(search_term="isha"))
        assert none.items == []
        assert none.total_count == 0

    @pytest.mark.asyncio
    async def test_rejected_hidden_unless_all_requested(self, profiles: ProfileService):
        await create_many(profiles, 2)
        await profiles.create_profile(profile_payload(name="Meera", status_id="rejected"))

        default = await profiles.list_profiles(ProfileQuery())
        everything = await profiles.list_profiles(ProfileQuery(status_filter=INCLUDE_ALL_STATUSES))
        only_rejected = await profiles.list_profiles(ProfileQuery(status_filter="rejected"))

        assert default.total_count == 2
        assert "Meera" not in [p.name for p in default.items]
        assert everything.total_count == 3
        assert [p.name for p in only_rejected.items] == ["Meera"]

    @pytest.mark.asyncio
    async def test_total_independent_of_page(self, profiles: ProfileService):
        await create_many(profiles, 7)

        totals = {
            (await profiles.list_profiles(ProfileQuery(page_number=n, page_size=s))).total_count
            for n, s in [(1, 3), (2, 3), (3, 3), (1, 100), (9, 2)]
        }

        assert totals == {7}

    @pytest.mark.asyncio
    async def test_identical_reads_are_identical(self, profiles: ProfileService):
        await create_many(profiles, 4)
        query = ProfileQuery(page_number=2, page_size=3)

        assert await profiles.list_profiles(query) == await profiles.list_profiles(query)

    @pytest.mark.asyncio
    async def test_cursor_api_walks_all_pages(self, profiles: ProfileService):
        await create_many(profiles, 5)
        query = ProfileQuery(sort_field="name", page_size=2)

        ids: list[str] = []
        cursor = None
        while True:
            page = await profiles.list_page(query, cursor)
            ids.extend(p.id for p in page.items)
            if page.next_cursor is None:
                break
            cursor = page.next_cursor

        assert len(ids) == len(set(ids)) == 5

    @pytest.mark.asyncio
    async def test_corrupt_record_is_dropped(
        self,
        profiles: ProfileService,
        session_factory: async_sessionmaker[AsyncSession],
    ):
        await profiles.create_profile(profile_payload(name="Valid"))
        await add_corrupt_row(session_factory, "corrupt", "Broken")

        result = await profiles.list_profiles(ProfileQuery())

        assert [p.name for p in result.items] == ["Valid"]
        assert await profiles.get_profile("corrupt") is None

    @pytest.mark.asyncio
    async def test_corrupt_row_does_not_end_cursor_walk(
        self,
        profiles: ProfileService,
        session_factory: async_sessionmaker[AsyncSession],
    ):
        await create_many(profiles, 5)
        await add_corrupt_row(session_factory, "corrupt", "Candidate 00a")
        query = ProfileQuery(sort_field="name", page_size=2)

        names: list[str] = []
        cursor = None
        while True:
            page = await profiles.list_page(query, cursor)
            names.extend(p.name for p in page.items)
            if page.next_cursor is None:
                break
            cursor = page.next_cursor

        assert names == [f"Candidate {i:02d}" for i in range(5)]
        assert page.total_count == 6

    @pytest.mark.asyncio
    async def test_corrupt_row_keeps_numbered_pages_aligned(
        self,
        profiles: ProfileService,
        session_factory: async_sessionmaker[AsyncSession],
    ):
        await create_many(profiles, 5)
        await add_corrupt_row(session_factory, "corrupt", "Candidate 00a")

        pages = [
            await profiles.list_profiles(
                ProfileQuery(sort_field="name", page_number=n, page_size=2)
            )
            for n in (1, 2, 3)
        ]

        assert [[p.name for p in page.items] for page in pages] == [
            ["Candidate 00"],
            ["Candidate 01", "Candidate 02"],
            ["Candidate 03", "Candidate 04"],
        ]
        assert {page.total_count for page in pages} == {6}

    @pytest.mark.asyncio
    async def test_cached_cursor_follows_other_writers(
        self, profiles: ProfileService, uow_factory: UowFactory
    ):
        reader = ProfileService(uow_factory)
        await create_many(profiles, 12)
        for n in (1, 2, 3):
            await reader.list_profiles(
                ProfileQuery(sort_field="name", page_number=n, page_size=5)
            )

        await profiles.create_profile(profile_payload(name="Aaron"))
        page = await reader.list_profiles(
            ProfileQuery(sort_field="name", page_number=3, page_size=5)
        )

        assert [p.name for p in page.items] == ["Candidate 09", "Candidate 10", "Candidate 11"]
        assert page.total_count == 13


class TestProfileWrites:
    @pytest.mark.asyncio
    async def test_create_then_get_round_trips(self, profiles: ProfileService):
        payload = profile_payload()
        created = await profiles.create_profile(payload)

        fetched = await profiles.get_profile(created.id)

        assert fetched is not None
        for field, value in payload.items():
            assert getattr(fetched, field) == value
        assert fetched.created_at <= fetched.updated_at

    @pytest.mark.asyncio
    async def test_update_keeps_created_at(self, profiles: ProfileService):
        created = await profiles.create_profile(profile_payload())

        updated = await profiles.update_profile(created.id, {"status_id": "contacted"})

        assert updated is not None
        assert updated.status_id == "contacted"
        assert updated.created_at == created.created_at
        assert updated.updated_at >= created.updated_at

    @pytest.mark.asyncio
    async def test_delete_is_hard(self, profiles: ProfileService):
        created = await profiles.create_profile(profile_payload())

        assert await profiles.delete_profile(created.id) is True
        assert await profiles.get_profile(created.id) is None
        assert await profiles.delete_profile(created.id) is False


class TestStatusDelete:
    @pytest.mark.asyncio
    async def test_referenced_status_is_kept(
        self,
        profiles: ProfileService,
        statuses: StatusService,
        session_factory: async_sessionmaker[AsyncSession],
    ):
        await profiles.create_profile(profile_payload(status_id="contacted"))

        assert await statuses.delete_status("contacted") is False

        async with session_factory() as session:
            stored = await session.scalar(
                select(ProfileStatusModel).where(ProfileStatusModel.id == "contacted")
            )
        assert stored is not None

    @pytest.mark.asyncio
    async def test_unreferenced_status_is_removed(self, statuses: StatusService):
        assert await statuses.delete_status("on-hold") is True
        assert await statuses.get_status("on-hold") is None

    @pytest.mark.asyncio
    async def test_seeding_is_idempotent(self, statuses: StatusService):
        assert await statuses.seed_default_statuses() == 0
        names = [s.name for s in await statuses.list_statuses()]
        assert names == sorted(names)
        assert len(names) == 7


class TestUnitOfWork:
    @pytest.mark.asyncio
    async def test_driver_errors_become_store_unavailable(self, uow_factory: UowFactory):
        with pytest.raises(StoreUnavailableError) as exc_info:
            async with uow_factory():
                raise OperationalError("SELECT 1", {}, Exception("disk I/O error"))

        assert isinstance(exc_info.value.__cause__, OperationalError)

    @pytest.mark.asyncio
    async def test_uncommitted_work_is_rolled_back(self, uow_factory: UowFactory):
        with pytest.raises(RuntimeError):
            async with uow_factory() as uow:
                await uow.statuses.create(ProfileStatus(id="draft", name="Draft"))
                raise RuntimeError("abort")

        async with uow_factory() as uow:
            assert await uow.statuses.get("draft") is None
