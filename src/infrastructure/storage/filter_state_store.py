"""Key-value persistence for the listing filters."""

import os
import tempfile
from collections.abc import Iterator, Mapping, MutableMapping
from pathlib import Path

import orjson
import structlog

from domain.entities.filter_state import DEFAULT_FILTER_STATE, FilterState
from domain.entities.query import SortField

logger = structlog.get_logger()

SEARCH_TERM = "search_term"
STATUS_FILTER = "status_filter"
CURRENT_PAGE = "current_page"
SORT_BY = "sort_by"
FIELDS = (SEARCH_TERM, STATUS_FILTER, CURRENT_PAGE, SORT_BY)


class JsonFileKeyValue(MutableMapping[str, str]):
    """String-to-string mapping persisted as a JSON object in one file.

    Every write rewrites the file through a temporary file and rename;
    ``apply`` changes several keys with a single rewrite.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._data = self._read()

    def _read(self) -> dict[str, str]:
        try:
            raw = orjson.loads(self._path.read_bytes())
        except FileNotFoundError:
            return {}
        except (OSError, orjson.JSONDecodeError):
            logger.warning("filter_file_unreadable", path=str(self._path), exc_info=True)
            return {}
        if not isinstance(raw, dict):
            return {}
        return {str(k): str(v) for k, v in raw.items() if isinstance(v, str)}

    def _write(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self._path.parent, prefix=self._path.name, suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(orjson.dumps(self._data, option=orjson.OPT_SORT_KEYS))
            os.replace(tmp, self._path)
        except OSError:
            Path(tmp).unlink(missing_ok=True)
            raise

    def __getitem__(self, key: str) -> str:
        return self._data[key]

    def __setitem__(self, key: str, value: str) -> None:
        self._data[key] = value
        self._write()

    def __delitem__(self, key: str) -> None:
        del self._data[key]
        self._write()

    def apply(self, changes: Mapping[str, str | None]) -> None:
        """Set or (for None) remove several keys, then write the file once."""
        for key, value in changes.items():
            if value is None:
                self._data.pop(key, None)
            else:
                self._data[key] = value
        self._write()

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)


class KeyValueFilterStateStore:
    """Stores the four filter fields as namespaced string keys.

    Absent or malformed values fall back to the defaults. A missing status
    key means "no status filter".
    """

    def __init__(self, backend: MutableMapping[str, str], prefix: str = "studio_profile_") -> None:
        self._backend = backend
        self._prefix = prefix

    def key(self, name: str) -> str:
        return f"{self._prefix}{name}"

    def load(self) -> FilterState:
        search_term = self._backend.get(self.key(SEARCH_TERM), "")
        status_filter = self._backend.get(self.key(STATUS_FILTER)) or None

        try:
            current_page = int(self._backend.get(self.key(CURRENT_PAGE), "1"))
        except ValueError:
            current_page = DEFAULT_FILTER_STATE.current_page
        if current_page < 1:
            current_page = DEFAULT_FILTER_STATE.current_page

        sort_by = self._backend.get(self.key(SORT_BY), DEFAULT_FILTER_STATE.sort_by)
        if sort_by not in {field.value for field in SortField}:
            sort_by = DEFAULT_FILTER_STATE.sort_by

        return FilterState(
            search_term=search_term,
            status_filter=status_filter,
            current_page=current_page,
            sort_by=sort_by,
        )

    def save(self, state: FilterState) -> None:
        try:
            self._apply(
                {
                    self.key(SEARCH_TERM): state.search_term,
                    self.key(STATUS_FILTER): state.status_filter,
                    self.key(CURRENT_PAGE): str(state.current_page),
                    self.key(SORT_BY): state.sort_by,
                }
            )
        except OSError:
            # The in-memory state stays authoritative for this session.
            logger.error("filter_state_save_failed", exc_info=True)

    def clear(self) -> None:
        try:
            self._apply({self.key(name): None for name in FIELDS})
        except OSError:
            logger.error("filter_state_clear_failed", exc_info=True)

    def _apply(self, changes: dict[str, str | None]) -> None:
        if isinstance(self._backend, JsonFileKeyValue):
            self._backend.apply(changes)
            return
        for key, value in changes.items():
            if value is None:
                self._backend.pop(key, None)
            else:
                self._backend[key] = value
