"""Views over the query cache: what a screen would currently display."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

import structlog

from client import query_keys
from client.query_cache import QueryCache, QueryKey
from core.exceptions import AppException
from domain.entities.profile import Profile
from domain.entities.profile_status import ProfileStatus
from domain.entities.query import ProfileListResult, ProfileQuery
from domain.services.filter_state_service import FilterStateManager
from domain.services.profile_service import ProfileService
from domain.services.status_service import StatusService

logger = structlog.get_logger()

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class QueryState(Generic[T]):
    """Snapshot of one observed query.

    ``is_loading`` means there is nothing to show yet. ``is_placeholder``
    means ``data`` belongs to the previous key and is kept on screen while
    the current key loads.
    """

    data: T | None = None
    error: AppException | None = None
    is_loading: bool = False
    is_fetching: bool = False
    is_placeholder: bool = False
    key: QueryKey | None = None


class QueryObserver(Generic[T]):
    """Tracks the query a view is currently showing."""

    def __init__(self, cache: QueryCache) -> None:
        self._cache = cache
        self._state: QueryState[T] = QueryState()
        self._active_key: QueryKey | None = None
        self._fetcher: Callable[[], Awaitable[T]] | None = None

    @property
    def state(self) -> QueryState[T]:
        return self._state

    @property
    def active_key(self) -> QueryKey | None:
        return self._active_key

    async def refetch(self) -> QueryState[T]:
        """Re-read the active key, waiting for fresh data if it went stale."""
        if self._active_key is None or self._fetcher is None:
            return self._state
        return await self._observe(self._active_key, self._fetcher, wait=True)

    async def _observe(
        self,
        key: QueryKey,
        fetcher: Callable[[], Awaitable[T]],
        *,
        wait: bool = False,
    ) -> QueryState[T]:
        previous = self._state
        self._active_key = key
        self._fetcher = fetcher

        if self._cache.get(key) is None:
            if previous.data is not None:
                self._state = QueryState(
                    data=previous.data, is_fetching=True, is_placeholder=True, key=key
                )
            else:
                self._state = QueryState(is_loading=True, is_fetching=True, key=key)

        try:
            result = await self._cache.query(key, fetcher, wait=wait)
        except AppException as exc:
            if key != self._active_key:
                return self._state
            logger.warning("query_failed", key=list(key), error_code=exc.error_code)
            self._state = QueryState(
                data=self._state.data,
                error=exc,
                is_placeholder=self._state.is_placeholder,
                key=key,
            )
            return self._state

        if key != self._active_key:
            logger.debug("observer_result_ignored", key=list(key))
            return self._state

        self._state = QueryState(data=result.data, is_fetching=result.is_fetching, key=key)
        return self._state


class ProfileListObserver(QueryObserver[ProfileListResult]):
    """The profile listing for the current filter state."""

    def __init__(
        self,
        cache: QueryCache,
        profiles: ProfileService,
        filters: FilterStateManager,
        page_size: int,
    ) -> None:
        super().__init__(cache)
        self._profiles = profiles
        self._filters = filters
        self._page_size = page_size

    @property
    def page_size(self) -> int:
        return self._page_size

    def current_key(self) -> QueryKey:
        return query_keys.profile_list(self._filters.state, self._page_size)

    async def refresh(self, *, wait: bool = False) -> QueryState[ProfileListResult]:
        state = self._filters.state
        query = ProfileQuery(
            search_term=state.search_term,
            status_filter=state.status_filter,
            sort_field=state.sort_by,
            page_number=state.current_page,
            page_size=self._page_size,
        )
        return await self._observe(
            self.current_key(), lambda: self._profiles.list_profiles(query), wait=wait
        )


class ProfileDetailObserver(QueryObserver[Profile | None]):
    """A single profile by id."""

    def __init__(self, cache: QueryCache, profiles: ProfileService) -> None:
        super().__init__(cache)
        self._profiles = profiles

    async def load(self, profile_id: str, *, wait: bool = False) -> QueryState[Profile | None]:
        return await self._observe(
            query_keys.profile_detail(profile_id),
            lambda: self._profiles.get_profile(profile_id),
            wait=wait,
        )


class StatusListObserver(QueryObserver[list[ProfileStatus]]):
    """All statuses, ordered by name."""

    def __init__(self, cache: QueryCache, statuses: StatusService) -> None:
        super().__init__(cache)
        self._statuses = statuses

    async def refresh(self, *, wait: bool = False) -> QueryState[list[ProfileStatus]]:
        return await self._observe(
            query_keys.status_list(), self._statuses.list_statuses, wait=wait
        )
