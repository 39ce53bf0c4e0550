"""Profile and status writes, with cache invalidation and user notices."""

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

import structlog

from client import query_keys
from client.query_cache import QueryCache
from core.exceptions import (
    AppException,
    ErrorCode,
    InvalidDataError,
    ProfileNotFoundError,
    StatusNotFoundError,
)
from domain.entities.query import ProfileListResult
from domain.services.filter_state_service import FilterStateManager
from domain.services.profile_service import ProfileService
from domain.services.status_service import StatusService

logger = structlog.get_logger()


class MutationStatus(StrEnum):
    IDLE = "idle"
    PENDING = "pending"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class Notice:
    """A message for the user about a finished mutation."""

    title: str
    description: str
    variant: str = "default"

    @classmethod
    def destructive(cls, title: str, description: str) -> "Notice":
        return cls(title=title, description=description, variant="destructive")


@dataclass(frozen=True, slots=True)
class MutationResult:
    """Outcome of a mutation.

    ``field_errors`` is filled for validation failures, ``navigate_to`` only
    after a successful profile create.
    """

    ok: bool
    notice: Notice
    data: Any = None
    field_errors: dict[str, list[str]] = field(default_factory=dict)
    navigate_to: str | None = None
    error_code: ErrorCode | None = None


@dataclass
class MutationTracker:
    """idle -> pending -> success | error; back to idle on reset or next run."""

    status: MutationStatus = MutationStatus.IDLE
    last_result: MutationResult | None = None

    @property
    def is_pending(self) -> bool:
        return self.status is MutationStatus.PENDING

    def start(self) -> None:
        self.status = MutationStatus.PENDING
        self.last_result = None

    def settle(self, result: MutationResult) -> None:
        self.status = MutationStatus.SUCCESS if result.ok else MutationStatus.ERROR
        self.last_result = result

    def reset(self) -> None:
        self.status = MutationStatus.IDLE
        self.last_result = None


MUTATIONS = (
    "create_profile",
    "update_profile",
    "delete_profile",
    "create_status",
    "update_status",
    "delete_status",
)


def _failure(
    title: str, exc: AppException, fallback: str, *, show_error: bool = True
) -> MutationResult:
    description = (exc.message or fallback) if show_error else fallback
    field_errors = exc.field_errors if isinstance(exc, InvalidDataError) else {}
    return MutationResult(
        ok=False,
        notice=Notice.destructive(title, description),
        field_errors=field_errors,
        error_code=exc.error_code,
    )


class MutationOrchestrator:
    """Runs writes through the services and keeps the query cache consistent.

    Nothing is retried. Two writes to the same record race and the last one
    to commit wins.
    """

    def __init__(
        self,
        profiles: ProfileService,
        statuses: StatusService,
        cache: QueryCache,
        filters: FilterStateManager,
        page_size: int,
    ) -> None:
        self._profiles = profiles
        self._statuses = statuses
        self._cache = cache
        self._filters = filters
        self._page_size = page_size
        self.trackers: dict[str, MutationTracker] = {name: MutationTracker() for name in MUTATIONS}

    async def _run(
        self, name: str, mutation: Callable[[], Awaitable[MutationResult]]
    ) -> MutationResult:
        tracker = self.trackers[name]
        tracker.start()
        try:
            result = await mutation()
        except Exception:
            tracker.settle(
                MutationResult(
                    ok=False,
                    notice=Notice.destructive("Unexpected Error", "Something went wrong."),
                    error_code=ErrorCode.INTERNAL_ERROR,
                )
            )
            raise
        tracker.settle(result)
        logger.debug("mutation_settled", mutation=name, status=tracker.status)
        return result

    # --- Profiles ---

    async def create_profile(self, data: Mapping[str, Any]) -> MutationResult:
        async def mutation() -> MutationResult:
            try:
                profile = await self._profiles.create_profile(data)
            except AppException as exc:
                return _failure("Error Adding Profile", exc, "Could not add the profile.")
            self._cache.invalidate(query_keys.PROFILE_LISTS)
            return MutationResult(
                ok=True,
                data=profile,
                notice=Notice(
                    "Profile Added", f"Profile for {profile.name} has been successfully created."
                ),
                navigate_to=f"/profiles/{profile.id}",
            )

        return await self._run("create_profile", mutation)

    async def update_profile(self, profile_id: str, data: Mapping[str, Any]) -> MutationResult:
        async def mutation() -> MutationResult:
            try:
                profile = await self._profiles.update_profile(profile_id, data)
            except AppException as exc:
                return _failure("Error Updating Profile", exc, "Could not update the profile.")
            if profile is None:
                return _failure(
                    "Update Failed",
                    ProfileNotFoundError(profile_id),
                    "Could not find the profile to update.",
                    show_error=False,
                )
            self._invalidate_profile(profile_id)
            return MutationResult(
                ok=True,
                data=profile,
                notice=Notice(
                    "Profile Updated", f"Profile for {profile.name} has been successfully updated."
                ),
            )

        return await self._run("update_profile", mutation)

    async def delete_profile(self, profile_id: str) -> MutationResult:
        """Delete a profile; step back a page if it was the last one on it."""

        async def mutation() -> MutationResult:
            was_sole_item = self._is_sole_item_on_page()
            try:
                await self._profiles.delete_profile(profile_id, strict=True)
            except ProfileNotFoundError as exc:
                return _failure(
                    "Deletion Failed",
                    exc,
                    "Could not delete the profile. It might be in use or an error occurred.",
                    show_error=False,
                )
            except AppException as exc:
                return MutationResult(
                    ok=False,
                    notice=Notice.destructive(
                        "Deletion Error", f"Failed to delete profile: {exc.message}"
                    ),
                    error_code=exc.error_code,
                )

            self._invalidate_profile(profile_id)
            if was_sole_item and self._filters.state.current_page > 1:
                self._filters.rebalance_after_delete()
            return MutationResult(
                ok=True,
                data=profile_id,
                notice=Notice("Profile Deleted", "The profile has been successfully deleted."),
            )

        return await self._run("delete_profile", mutation)

    def _is_sole_item_on_page(self) -> bool:
        entry = self._cache.get(query_keys.profile_list(self._filters.state, self._page_size))
        if entry is None or not isinstance(entry.value, ProfileListResult):
            return False
        return len(entry.value.items) == 1

    def _invalidate_profile(self, profile_id: str) -> None:
        self._cache.invalidate(query_keys.profile_detail(profile_id))
        self._cache.invalidate(query_keys.PROFILE_LISTS)

    # --- Statuses ---

    async def create_status(self, data: Mapping[str, Any]) -> MutationResult:
        async def mutation() -> MutationResult:
            try:
                status = await self._statuses.create_status(data)
            except AppException as exc:
                return _failure("Error Adding Status", exc, "Could not add the status.")
            self._cache.invalidate((query_keys.STATUSES,))
            return MutationResult(
                ok=True,
                data=status,
                notice=Notice(
                    "Status Added", f'Status "{status.name}" has been successfully added.'
                ),
            )

        return await self._run("create_status", mutation)

    async def update_status(self, status_id: str, data: Mapping[str, Any]) -> MutationResult:
        async def mutation() -> MutationResult:
            try:
                status = await self._statuses.update_status(status_id, data)
            except AppException as exc:
                return _failure("Error Updating Status", exc, "Could not update the status.")
            if status is None:
                return _failure(
                    "Update Failed",
                    StatusNotFoundError(status_id),
                    "Could not find the status to update.",
                    show_error=False,
                )
            self._cache.invalidate((query_keys.STATUSES,))
            return MutationResult(
                ok=True,
                data=status,
                notice=Notice(
                    "Status Updated", f'Status "{status.name}" has been successfully updated.'
                ),
            )

        return await self._run("update_status", mutation)

    async def delete_status(self, status_id: str) -> MutationResult:
        async def mutation() -> MutationResult:
            try:
                await self._statuses.delete_status(status_id, strict=True)
            except AppException as exc:
                if exc.error_code is ErrorCode.STATUS_IN_USE:
                    notice = Notice.destructive(
                        "Status in use",
                        "Could not delete the status. It is in use by one or more profiles.",
                    )
                elif exc.error_code is ErrorCode.STATUS_NOT_FOUND:
                    notice = Notice.destructive(
                        "Deletion Failed", "Could not find the status to delete."
                    )
                else:
                    notice = Notice.destructive(
                        "Error Deleting Status", exc.message or "Could not delete the status."
                    )
                return MutationResult(ok=False, notice=notice, error_code=exc.error_code)

            self._cache.invalidate((query_keys.STATUSES,))
            return MutationResult(
                ok=True,
                data=status_id,
                notice=Notice("Status Deleted", "The status has been successfully deleted."),
            )

        return await self._run("delete_status", mutation)
