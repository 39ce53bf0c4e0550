"""In-process facade used by the presentation layer."""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from client.mutations import MutationOrchestrator, MutationResult
from client.observers import (
    ProfileDetailObserver,
    ProfileListObserver,
    QueryObserver,
    QueryState,
    StatusListObserver,
)
from client.query_cache import QueryCache
from domain.entities.filter_state import INCLUDE_ALL_STATUSES, FilterState
from domain.entities.profile import Profile
from domain.entities.profile_status import ProfileStatus, status_display
from domain.entities.query import ProfileListResult
from domain.services.filter_state_service import FilterStateManager
from domain.services.profile_service import ProfileService
from domain.services.status_service import StatusService


@dataclass(frozen=True, slots=True)
class StatusOption:
    """One entry of the status filter dropdown."""

    value: str
    label: str
    badge_color: str | None = None


ALL_STATUSES_OPTION = StatusOption(value=INCLUDE_ALL_STATUSES, label="All Statuses")


class ProfileAdmin:
    """Profile and status administration.

    Reads go through observers backed by the query cache. Writes go through
    the mutation orchestrator; afterwards every view still showing
    invalidated data is refetched.
    """

    def __init__(
        self,
        profiles: ProfileService,
        statuses: StatusService,
        filters: FilterStateManager,
        cache: QueryCache,
        page_size: int = 10,
    ) -> None:
        self._filters = filters
        self.cache = cache
        self.profile_list = ProfileListObserver(cache, profiles, filters, page_size)
        self.profile_detail = ProfileDetailObserver(cache, profiles)
        self.status_list = StatusListObserver(cache, statuses)
        self.mutations = MutationOrchestrator(profiles, statuses, cache, filters, page_size)

    # --- Reads ---

    async def list_profiles(self) -> QueryState[ProfileListResult]:
        """The listing for the current filter state."""
        return await self.profile_list.refresh()

    async def get_profile(self, profile_id: str) -> QueryState[Profile | None]:
        return await self.profile_detail.load(profile_id)

    async def list_statuses(self) -> QueryState[list[ProfileStatus]]:
        return await self.status_list.refresh()

    async def status_options(self) -> list[StatusOption]:
        """The "All Statuses" option followed by every status in display order."""
        state = await self.status_list.refresh()
        statuses = sorted(
            state.data or [],
            key=lambda s: (status_display(s.id).sort_priority, s.name),
        )
        options = [ALL_STATUSES_OPTION]
        for status in statuses:
            if status.id:
                options.append(
                    StatusOption(
                        value=status.id,
                        label=status.name,
                        badge_color=status_display(status.id).badge_color,
                    )
                )
        return options

    # --- Filters ---

    @property
    def filters(self) -> FilterState:
        return self._filters.state

    def set_search_term(self, search_term: str) -> FilterState:
        return self._filters.set_search_term(search_term)

    def set_status_filter(self, status_filter: str | None) -> FilterState:
        return self._filters.set_status_filter(status_filter)

    def set_sort_by(self, sort_by: str) -> FilterState:
        return self._filters.set_sort_by(sort_by)

    def go_to_page(self, page: int) -> FilterState:
        return self._filters.go_to_page(page)

    def clear_filters(self) -> FilterState:
        return self._filters.clear()

    # --- Writes ---

    async def create_profile(self, data: Mapping[str, Any]) -> MutationResult:
        return await self._after(await self.mutations.create_profile(data))

    async def update_profile(self, profile_id: str, data: Mapping[str, Any]) -> MutationResult:
        return await self._after(await self.mutations.update_profile(profile_id, data))

    async def delete_profile(self, profile_id: str) -> MutationResult:
        result = await self.mutations.delete_profile(profile_id)
        if result.ok and self.profile_list.active_key is not None:
            # The page may have moved; follow the filter state, not the old key.
            await self.profile_list.refresh(wait=True)
        return await self._after(result)

    async def create_status(self, data: Mapping[str, Any]) -> MutationResult:
        return await self._after(await self.mutations.create_status(data))

    async def update_status(self, status_id: str, data: Mapping[str, Any]) -> MutationResult:
        return await self._after(await self.mutations.update_status(status_id, data))

    async def delete_status(self, status_id: str) -> MutationResult:
        return await self._after(await self.mutations.delete_status(status_id))

    async def _after(self, result: MutationResult) -> MutationResult:
        if result.ok:
            await self._refetch_active()
        return result

    async def _refetch_active(self) -> None:
        observers: list[QueryObserver[Any]] = [
            self.profile_list,
            self.profile_detail,
            self.status_list,
        ]
        for observer in observers:
            key = observer.active_key
            if key is None:
                continue
            entry = self.cache.get(key)
            if entry is None or entry.invalidated:
                await observer.refetch()
