"""Key-addressed query cache with in-flight de-duplication.

Keys are tuples; ``invalidate`` and ``remove`` take a tuple prefix, so
``("profiles", "list")`` addresses every profile listing. Everything runs on
one event loop: the in-flight map is read and written without an ``await``
in between, which keeps a single writer per key.
"""

import asyncio
import time
from collections.abc import Awaitable, Callable, Hashable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

import structlog

logger = structlog.get_logger()

QueryKey = tuple[Hashable, ...]
T = TypeVar("T")


@dataclass
class CacheEntry:
    """A cached result and when it was stored."""

    value: Any
    updated_at: float
    invalidated: bool = False


@dataclass(frozen=True, slots=True)
class QueryResult(Generic[T]):
    """What a cached read returned."""

    data: T
    is_stale: bool = False
    is_fetching: bool = False


def matches(key: QueryKey, prefix: QueryKey) -> bool:
    return key[: len(prefix)] == prefix


class QueryCache:
    """Plain key-to-entry map plus a map of fetches still running."""

    def __init__(
        self,
        stale_time: float = 0.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._stale_time = stale_time
        self._clock = clock
        self._entries: dict[QueryKey, CacheEntry] = {}
        self._in_flight: dict[QueryKey, asyncio.Task[Any]] = {}
        self._tokens: dict[QueryKey, int] = {}

    # --- Primitive interface ---

    def get(self, key: QueryKey) -> CacheEntry | None:
        return self._entries.get(key)

    def put(self, key: QueryKey, value: Any) -> CacheEntry:
        """Store a value as fresh; results of fetches already running are discarded."""
        self._next_token(key)
        self._in_flight.pop(key, None)
        return self._store(key, value)

    def invalidate(self, prefix: QueryKey) -> list[QueryKey]:
        """Mark every entry under ``prefix`` stale without dropping its value.

        Fetches already running for those keys are detached: their results
        are not stored and the next read starts a new fetch.
        """
        keys = [k for k in self._entries if matches(k, prefix)]
        for key in keys:
            self._entries[key].invalidated = True
        for key in [k for k in self._in_flight if matches(k, prefix)]:
            self._next_token(key)
            self._in_flight.pop(key, None)
        if keys:
            logger.debug("queries_invalidated", prefix=list(prefix), count=len(keys))
        return keys

    def remove(self, prefix: QueryKey) -> int:
        """Drop every entry under ``prefix``."""
        keys = [k for k in self._entries if matches(k, prefix)]
        for key in keys:
            del self._entries[key]
            self._next_token(key)
            self._in_flight.pop(key, None)
        return len(keys)

    def in_flight(self, key: QueryKey) -> asyncio.Task[Any] | None:
        return self._in_flight.get(key)

    def is_stale(self, entry: CacheEntry) -> bool:
        if entry.invalidated:
            return True
        return self._clock() - entry.updated_at >= self._stale_time

    # --- Fetching ---

    async def fetch(
        self,
        key: QueryKey,
        fetcher: Callable[[], Awaitable[T]],
        *,
        force: bool = False,
    ) -> T:
        """Return fresh cached data, or join or start a fetch for ``key``."""
        entry = self._entries.get(key)
        if entry is not None and not force and not self.is_stale(entry):
            return entry.value  # type: ignore[no-any-return]

        task = self._in_flight.get(key)
        if task is None:
            task = self._start(key, fetcher)
        else:
            logger.debug("query_joined_in_flight", key=list(key))
        # A cancelled caller must not cancel the fetch other callers share.
        return await asyncio.shield(task)  # type: ignore[no-any-return]

    async def query(
        self,
        key: QueryKey,
        fetcher: Callable[[], Awaitable[T]],
        *,
        wait: bool = False,
    ) -> QueryResult[T]:
        """Stale-while-revalidate read.

        A stale entry is returned at once while a background refresh runs,
        unless ``wait`` is set. A missing entry is always fetched.
        """
        entry = self._entries.get(key)
        if entry is None:
            return QueryResult(await self.fetch(key, fetcher))

        if not self.is_stale(entry):
            return QueryResult(entry.value, is_fetching=key in self._in_flight)

        if wait:
            return QueryResult(await self.fetch(key, fetcher))

        if key not in self._in_flight:
            self._start(key, fetcher)
        return QueryResult(entry.value, is_stale=True, is_fetching=True)

    def _start(self, key: QueryKey, fetcher: Callable[[], Awaitable[T]]) -> asyncio.Task[T]:
        token = self._next_token(key)
        task = asyncio.ensure_future(self._run(key, token, fetcher))
        task.add_done_callback(_log_failure)
        self._in_flight[key] = task
        return task

    async def _run(self, key: QueryKey, token: int, fetcher: Callable[[], Awaitable[T]]) -> T:
        try:
            value = await fetcher()
        finally:
            if self._tokens.get(key) == token:
                self._in_flight.pop(key, None)

        if self._tokens.get(key) == token:
            self._store(key, value)
        else:
            logger.debug("stale_response_discarded", key=list(key))
        return value

    def _store(self, key: QueryKey, value: Any) -> CacheEntry:
        entry = CacheEntry(value=value, updated_at=self._clock())
        self._entries[key] = entry
        return entry

    def _next_token(self, key: QueryKey) -> int:
        token = self._tokens.get(key, 0) + 1
        self._tokens[key] = token
        return token


def _log_failure(task: asyncio.Task[Any]) -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.warning("query_fetch_failed", error=str(exc), error_type=type(exc).__name__)
