"""Cache keys for every query the admin issues."""

from client.query_cache import QueryKey
from domain.entities.filter_state import FilterState

PROFILES = "profiles"
STATUSES = "statuses"

PROFILE_LISTS: QueryKey = (PROFILES, "list")
PROFILE_DETAILS: QueryKey = (PROFILES, "detail")
STATUS_LISTS: QueryKey = (STATUSES, "list")


def profile_list(state: FilterState, page_size: int) -> QueryKey:
    return (
        *PROFILE_LISTS,
        state.search_term,
        state.status_filter,
        state.sort_by,
        state.current_page,
        page_size,
    )


def profile_detail(profile_id: str) -> QueryKey:
    return (*PROFILE_DETAILS, profile_id)


def status_list() -> QueryKey:
    return STATUS_LISTS
