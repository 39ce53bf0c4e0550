"""Listing filter state value object."""

from dataclasses import dataclass, replace

from domain.entities.query import SortField

# Status filter value that disables the default rejected-status exclusion.
INCLUDE_ALL_STATUSES = "include-all"


@dataclass(frozen=True, slots=True)
class FilterState:
    """What the profile listing currently shows.

    ``status_filter`` is ``None`` (hide rejected), a status id, or
    ``INCLUDE_ALL_STATUSES``.
    """

    search_term: str = ""
    status_filter: str | None = None
    current_page: int = 1
    sort_by: str = SortField.UPDATED_AT.value

    def __post_init__(self) -> None:
        if self.current_page < 1:
            raise ValueError("current_page must be >= 1")

    def with_search_term(self, search_term: str) -> "FilterState":
        return replace(self, search_term=search_term, current_page=1)

    def with_status_filter(self, status_filter: str | None) -> "FilterState":
        return replace(self, status_filter=status_filter or None, current_page=1)

    def with_sort_by(self, sort_by: str) -> "FilterState":
        return replace(self, sort_by=SortField(sort_by).value, current_page=1)

    def with_page(self, page: int) -> "FilterState":
        """Page navigation keeps the other fields and does not reset."""
        return replace(self, current_page=max(1, page))


DEFAULT_FILTER_STATE = FilterState()
