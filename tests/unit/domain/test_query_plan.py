"""Unit tests for listing query plans."""

import pytest

from domain.entities.filter_state import INCLUDE_ALL_STATUSES
from domain.entities.query import (
    PREFIX_HIGH_SENTINEL,
    FieldFilter,
    FilterOp,
    ProfileListResult,
    ProfileQuery,
    build_query_plan,
)


def plan_for(query: ProfileQuery, *, leads: bool = False):
    return build_query_plan(
        query,
        rejected_status_id="rejected",
        include_all_token=INCLUDE_ALL_STATUSES,
        inequality_leads_order=leads,
    )


class TestBuildQueryPlan:
    def test_default_excludes_rejected_and_orders_by_updated_at(self):
        plan = plan_for(ProfileQuery())

        assert plan.filters == (FieldFilter("status_id", FilterOp.NE, "rejected"),)
        assert plan.order_by == ("updated_at", "id")

    def test_search_is_prefix_range(self):
        plan = plan_for(ProfileQuery(search_term="Ai", status_filter=INCLUDE_ALL_STATUSES))

        assert plan.filters == (
            FieldFilter("name", FilterOp.GTE, "Ai"),
            FieldFilter("name", FilterOp.LT, "Ai" + PREFIX_HIGH_SENTINEL),
        )

    def test_specific_status_is_equality(self):
        plan = plan_for(ProfileQuery(status_filter="accepted"))

        assert plan.filters == (FieldFilter("status_id", FilterOp.EQ, "accepted"),)
        assert plan.inequality_fields == ()

    def test_include_all_has_no_status_predicate(self):
        plan = plan_for(ProfileQuery(status_filter=INCLUDE_ALL_STATUSES))

        assert plan.filters == ()

    def test_inequality_fields_lead_when_required(self):
        plan = plan_for(ProfileQuery(search_term="Ai", sort_field="age"), leads=True)

        assert plan.order_by == ("name", "status_id", "age", "id")

    def test_inequality_field_equal_to_sort_field_is_not_repeated(self):
        plan = plan_for(ProfileQuery(search_term="Ai", sort_field="name"), leads=True)

        assert plan.order_by == ("status_id", "name", "id")

    def test_rejects_unknown_sort_field(self):
        with pytest.raises(ValueError):
            plan_for(ProfileQuery(sort_field="mobile_number"))


class TestProfileListResult:
    @pytest.mark.parametrize(
        ("total", "size", "pages"),
        [(0, 10, 0), (10, 10, 1), (15, 10, 2), (21, 10, 3)],
    )
    def test_total_pages(self, total: int, size: int, pages: int):
        assert ProfileListResult([], total, 1, size).total_pages == pages
