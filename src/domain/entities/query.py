"""Profile listing query, plan and result value objects."""

import math
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from domain.entities.profile import Profile

# Appended to a search term to build the upper bound of a prefix range scan.
PREFIX_HIGH_SENTINEL = "\uf8ff"


class SortField(StrEnum):
    """Profile fields a listing can be ordered by."""

    NAME = "name"
    AGE = "age"
    STAR_MATCH_SCORE = "star_match_score"
    CITY = "city"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"


class FilterOp(StrEnum):
    """Comparison operators the store understands."""

    EQ = "=="
    NE = "!="
    GTE = ">="
    LT = "<"

    @property
    def is_inequality(self) -> bool:
        return self is not FilterOp.EQ


@dataclass(frozen=True, slots=True)
class FieldFilter:
    """One predicate of a listing query."""

    field: str
    op: FilterOp
    value: Any


@dataclass(frozen=True, slots=True)
class QueryPlan:
    """Store-neutral description of a profile listing.

    ``order_by`` always ends with ``id`` so that every ordering is total and
    a cursor identifies a unique position.
    """

    filters: tuple[FieldFilter, ...]
    order_by: tuple[str, ...]

    @property
    def inequality_fields(self) -> tuple[str, ...]:
        seen: list[str] = []
        for f in self.filters:
            if f.op.is_inequality and f.field not in seen:
                seen.append(f.field)
        return tuple(seen)


@dataclass(frozen=True, slots=True)
class ProfileQuery:
    """Listing parameters supplied by the caller."""

    search_term: str = ""
    status_filter: str | None = None
    sort_field: str = SortField.UPDATED_AT.value
    page_number: int = 1
    page_size: int = 10


@dataclass(frozen=True, slots=True)
class ProfileScan:
    """Profiles read from one window of the ordered result set.

    ``scanned`` counts the stored rows in the window, including rows dropped as
    corrupt, and ``last_id`` is the id of the last of them. Continuation uses
    ``last_id`` so a dropped row never ends a walk early.
    """

    items: list[Profile]
    scanned: int = 0
    last_id: str | None = None


@dataclass(frozen=True, slots=True)
class ProfilePage:
    """A page fetched through the cursor API."""

    items: list[Profile]
    total_count: int
    next_cursor: str | None = None


@dataclass(frozen=True, slots=True)
class ProfileListResult:
    """A numbered page of profiles plus the size of the whole result set."""

    items: list[Profile]
    total_count: int
    page_number: int
    page_size: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_count / self.page_size) if self.page_size else 0


def build_query_plan(
    query: ProfileQuery,
    *,
    rejected_status_id: str,
    include_all_token: str,
    inequality_leads_order: bool = False,
) -> QueryPlan:
    """Translate listing parameters into filters and an ordering.

    Search is a case-sensitive prefix match on ``name`` expressed as a range
    scan. With no status filter the rejected status is excluded; a specific
    id filters to that id; ``include_all_token`` applies no status predicate.
    """
    sort_field = SortField(query.sort_field).value
    filters: list[FieldFilter] = []

    if query.search_term:
        filters.append(FieldFilter("name", FilterOp.GTE, query.search_term))
        filters.append(
            FieldFilter("name", FilterOp.LT, query.search_term + PREFIX_HIGH_SENTINEL)
        )

    if query.status_filter is None:
        filters.append(FieldFilter("status_id", FilterOp.NE, rejected_status_id))
    elif query.status_filter != include_all_token:
        filters.append(FieldFilter("status_id", FilterOp.EQ, query.status_filter))

    plan = QueryPlan(filters=tuple(filters), order_by=())
    order: list[str] = []
    if inequality_leads_order:
        order.extend(f for f in plan.inequality_fields if f != sort_field)
    order.append(sort_field)
    order.append("id")
    return QueryPlan(filters=plan.filters, order_by=tuple(order))
