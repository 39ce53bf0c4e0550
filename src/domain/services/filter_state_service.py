"""Holds the listing filter state and keeps it persisted."""

import structlog

from core.exceptions import InvalidDataError
from domain.entities.filter_state import DEFAULT_FILTER_STATE, FilterState
from domain.repositories.filter_state_store import IFilterStateStore

logger = structlog.get_logger()


class FilterStateManager:
    """Current search term, status filter, sort field and page.

    Changing the search, status or sort sends the listing back to page 1.
    Page navigation and the post-delete rebalance keep the other fields.
    Every change is saved through the injected store.
    """

    def __init__(self, store: IFilterStateStore) -> None:
        self._store = store
        self._state = store.load()

    @property
    def state(self) -> FilterState:
        return self._state

    def set_search_term(self, search_term: str) -> FilterState:
        return self._apply(self._state.with_search_term(search_term))

    def set_status_filter(self, status_filter: str | None) -> FilterState:
        return self._apply(self._state.with_status_filter(status_filter))

    def set_sort_by(self, sort_by: str) -> FilterState:
        try:
            new_state = self._state.with_sort_by(sort_by)
        except ValueError as exc:
            raise InvalidDataError({"sort_by": [f"Cannot sort by {sort_by!r}"]}) from exc
        return self._apply(new_state)

    def go_to_page(self, page: int) -> FilterState:
        return self._apply(self._state.with_page(page))

    def rebalance_after_delete(self) -> FilterState:
        """Step back one page after the last row of the current page was deleted."""
        if self._state.current_page <= 1:
            return self._state
        return self._apply(self._state.with_page(self._state.current_page - 1))

    def clear(self) -> FilterState:
        """Reset every field to its default in a single update."""
        self._store.clear()
        self._state = DEFAULT_FILTER_STATE
        logger.debug("filters_cleared")
        return self._state

    def _apply(self, new_state: FilterState) -> FilterState:
        if new_state == self._state:
            return self._state
        self._state = new_state
        self._store.save(new_state)
        return new_state
