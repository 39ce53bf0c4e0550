"""Profile service: listing, pagination and CRUD over the profile store."""

from collections import OrderedDict
from collections.abc import Callable, Mapping
from dataclasses import replace
from typing import Any

import structlog
from pydantic import ValidationError

from core.exceptions import (
    CursorExpiredError,
    InvalidDataError,
    ProfileNotFoundError,
    StoreUnavailableError,
)
from core.timeutils import utcnow
from domain.entities.filter_state import INCLUDE_ALL_STATUSES
from domain.entities.profile import Profile
from domain.entities.query import (
    ProfileListResult,
    ProfilePage,
    ProfileQuery,
    QueryPlan,
    build_query_plan,
)
from domain.repositories.unit_of_work import IUnitOfWork
from domain.schemas.errors import invalid_data
from domain.schemas.profile import ProfileCreate, ProfileUpdate

logger = structlog.get_logger()

# (filters, order_by, page_size, page_number) -> id of that page's last profile
CursorKey = tuple[Any, ...]


class ProfileService:
    """Service layer for Profile reads and writes."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        rejected_status_id: str = "rejected",
        inequality_leads_order: bool = False,
        max_page_size: int = 100,
        max_cached_cursors: int = 256,
    ) -> None:
        self._uow_factory = uow_factory
        self._rejected_status_id = rejected_status_id
        self._inequality_leads_order = inequality_leads_order
        self._max_page_size = max_page_size
        self._max_cached_cursors = max_cached_cursors
        self._page_cursors: OrderedDict[CursorKey, str] = OrderedDict()

    # --- Listing ---

    def plan(self, query: ProfileQuery) -> QueryPlan:
        """Build the store query plan for listing parameters."""
        return build_query_plan(
            query,
            rejected_status_id=self._rejected_status_id,
            include_all_token=INCLUDE_ALL_STATUSES,
            inequality_leads_order=self._inequality_leads_order,
        )

    async def list_profiles(self, query: ProfileQuery) -> ProfileListResult:
        """Get one numbered page of profiles and the total match count.

        Page N > 1 resumes from the cursor cached for page N - 1 when that
        profile still sits at position (N - 1) * page_size; otherwise the
        first (N - 1) * page_size matches are fetched and discarded to find
        it. Pages past the end come back empty.
        """
        page_number, page_size = self._check_paging(query)
        plan = self.plan(query)

        async with self._uow_factory() as uow:
            total = await uow.profiles.count(plan)

            cursor: str | None = None
            if page_number > 1:
                cursor = await self._cursor_for_page(uow, plan, page_size, page_number - 1)
                if cursor is None:
                    return ProfileListResult([], total, page_number, page_size)

            try:
                scan = await uow.profiles.list_after(plan, page_size, cursor)
            except CursorExpiredError:
                logger.info("page_cursor_expired", page_number=page_number)
                self._page_cursors.clear()
                cursor = await self._cursor_for_page(uow, plan, page_size, page_number - 1)
                if cursor is None:
                    return ProfileListResult([], total, page_number, page_size)
                scan = await uow.profiles.list_after(plan, page_size, cursor)

        if scan.last_id:
            self._remember_cursor(self._cursor_key(plan, page_size, page_number), scan.last_id)
        return ProfileListResult(scan.items, total, page_number, page_size)

    async def list_page(self, query: ProfileQuery, cursor: str | None = None) -> ProfilePage:
        """Get the page that follows an opaque cursor (None for the first page)."""
        _, page_size = self._check_paging(query)
        plan = self.plan(query)
        async with self._uow_factory() as uow:
            total = await uow.profiles.count(plan)
            scan = await uow.profiles.list_after(plan, page_size, cursor)

        next_cursor = scan.last_id if scan.scanned == page_size else None
        return ProfilePage(items=scan.items, total_count=total, next_cursor=next_cursor)

    async def _cursor_for_page(
        self, uow: IUnitOfWork, plan: QueryPlan, page_size: int, page_number: int
    ) -> str | None:
        key = self._cursor_key(plan, page_size, page_number)
        position = page_number * page_size
        cached = self._page_cursors.get(key)
        if cached is not None:
            # Other writers may have shifted rows since the cursor was cached.
            if await uow.profiles.position_of(plan, cached) == position:
                self._page_cursors.move_to_end(key)
                return cached
            logger.info("page_cursor_moved", page_number=page_number)
            del self._page_cursors[key]
        cursor = await uow.profiles.cursor_at(plan, position)
        if cursor is not None:
            self._remember_cursor(key, cursor)
        return cursor

    def _remember_cursor(self, key: CursorKey, cursor: str) -> None:
        self._page_cursors[key] = cursor
        self._page_cursors.move_to_end(key)
        while len(self._page_cursors) > self._max_cached_cursors:
            self._page_cursors.popitem(last=False)

    def _check_paging(self, query: ProfileQuery) -> tuple[int, int]:
        errors: dict[str, list[str]] = {}
        if query.page_number < 1:
            errors["page_number"] = ["Page number must be at least 1"]
        if not 1 <= query.page_size <= self._max_page_size:
            errors["page_size"] = [f"Page size must be between 1 and {self._max_page_size}"]
        if errors:
            raise InvalidDataError(errors, message="Invalid listing parameters")
        return query.page_number, query.page_size

    @staticmethod
    def _cursor_key(plan: QueryPlan, page_size: int, page_number: int) -> CursorKey:
        return (plan.filters, plan.order_by, page_size, page_number)

    # --- Single records ---

    async def get_profile(self, profile_id: str) -> Profile | None:
        """Get a profile by ID; None when it does not exist."""
        async with self._uow_factory() as uow:
            return await uow.profiles.get(profile_id)

    async def create_profile(self, data: Mapping[str, Any] | ProfileCreate) -> Profile:
        """Validate and store a new profile. The store assigns id and timestamps."""
        payload = self._validate_create(data)

        async with self._uow_factory() as uow:
            await self._require_status(uow, payload.status_id)
            now = utcnow()
            profile = Profile(**payload.model_dump(), created_at=now, updated_at=now)
            created = await uow.profiles.create(profile)
            await uow.commit()

        self._page_cursors.clear()
        logger.info("profile_created", profile_id=created.id, status_id=created.status_id)
        return created

    async def update_profile(
        self, profile_id: str, data: Mapping[str, Any] | ProfileUpdate
    ) -> Profile | None:
        """Apply a partial update. Returns None when the profile does not exist."""
        changes = self._validate_update(data)

        async with self._uow_factory() as uow:
            profile = await uow.profiles.get(profile_id)
            if not profile:
                logger.warning("profile_update_missing", profile_id=profile_id)
                return None

            if "status_id" in changes and changes["status_id"] != profile.status_id:
                await self._require_status(uow, changes["status_id"])

            updated = replace(profile, **changes, updated_at=utcnow())
            saved = await uow.profiles.update(updated)
            await uow.commit()

        self._page_cursors.clear()
        logger.info("profile_updated", profile_id=profile_id, fields=sorted(changes))
        return saved

    async def delete_profile(self, profile_id: str, *, strict: bool = False) -> bool:
        """Hard-delete a profile.

        Returns False on any failure, including a missing profile. With
        ``strict`` the failure is raised instead (ProfileNotFoundError or
        StoreUnavailableError).
        """
        try:
            async with self._uow_factory() as uow:
                deleted = await uow.profiles.delete(profile_id)
                await uow.commit()
        except StoreUnavailableError:
            logger.error("profile_delete_failed", profile_id=profile_id, exc_info=True)
            if strict:
                raise
            return False

        if not deleted:
            logger.warning("profile_delete_missing", profile_id=profile_id)
            if strict:
                raise ProfileNotFoundError(profile_id)
            return False

        self._page_cursors.clear()
        logger.info("profile_deleted", profile_id=profile_id)
        return True

    # --- Helpers ---

    @staticmethod
    def _validate_create(data: Mapping[str, Any] | ProfileCreate) -> ProfileCreate:
        if isinstance(data, ProfileCreate):
            return data
        try:
            return ProfileCreate.model_validate(dict(data))
        except ValidationError as exc:
            raise invalid_data(exc) from exc

    @staticmethod
    def _validate_update(data: Mapping[str, Any] | ProfileUpdate) -> dict[str, Any]:
        if isinstance(data, ProfileUpdate):
            return data.changes()
        try:
            return ProfileUpdate.model_validate(dict(data)).changes()
        except ValidationError as exc:
            raise invalid_data(exc) from exc

    @staticmethod
    async def _require_status(uow: IUnitOfWork, status_id: str) -> None:
        """Best-effort reference check on the profile's status."""
        if not await uow.statuses.get(status_id):
            raise InvalidDataError({"status_id": [f"Unknown profile status: {status_id}"]})
