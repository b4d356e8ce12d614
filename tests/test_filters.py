import pytest

from maeson_realty.schemas.property import PropertyFilters
from maeson_realty.services.backend import AnyOf, Eq, Gte, ILike, Lte
from maeson_realty.services.filters import (
    SEARCH_COLUMNS,
    build_clauses,
    build_query_plan,
    page_count,
    resolve_sort,
)


def test_empty_filters_only_restrict_to_published():
    assert build_clauses(PropertyFilters()) == [Eq(column="is_published", value=True)]


def test_each_facet_contributes_one_clause_in_order():
    filters = PropertyFilters(
        listing_type="rent",
        property_type="apartment",
        status="available",
        city="lag",
        state="Lagos",
        min_price=300_000,
        max_price=1_000_000,
        bedrooms=2,
        bathrooms=1,
        search="lekki",
    )
    clauses = build_clauses(filters)

    assert clauses == [
        Eq(column="is_published", value=True),
        Eq(column="listing_type", value="rent"),
        Eq(column="property_type", value="apartment"),
        Eq(column="status", value="available"),
        ILike(column="city", value="lag"),
        ILike(column="state", value="Lagos"),
        Gte(column="price", value=300_000),
        Lte(column="price", value=1_000_000),
        Gte(column="bedrooms", value=2),
        Gte(column="bathrooms", value=1),
        AnyOf(clauses=[ILike(column=col, value="lekki") for col in SEARCH_COLUMNS]),
    ]


def test_zero_bounds_are_constraints_but_empty_strings_are_not():
    clauses = build_clauses(PropertyFilters(min_price=0, bedrooms=0, city="", search=""))
    assert Gte(column="price", value=0) in clauses
    assert Gte(column="bedrooms", value=0) in clauses
    assert len(clauses) == 3


@pytest.mark.parametrize(
    "sort, column, descending",
    [
        (None, "created_at", True),
        ("", "created_at", True),
        ("newest", "created_at", True),
        ("oldest", "created_at", False),
        ("price:asc", "price", False),
        ("price:desc", "price", True),
        ("price", "price", False),
        ("bedrooms:DESC", "bedrooms", False),
        (":desc", "created_at", True),
        (":", "created_at", True),
    ],
)
def test_resolve_sort(sort, column, descending):
    order = resolve_sort(sort)
    assert (order.column, order.descending) == (column, descending)


def test_query_plan_window():
    plan = build_query_plan(PropertyFilters(page=3, limit=5))
    assert plan.offset == 10
    assert plan.end == 14


def test_query_plan_uses_default_page_size():
    plan = build_query_plan(PropertyFilters())
    assert plan.page == 1
    assert plan.page_size == 12
    assert (plan.offset, plan.end) == (0, 11)


@pytest.mark.parametrize(
    "total, size, expected",
    [(0, 12, 1), (1, 12, 1), (12, 12, 1), (13, 12, 2), (40, 12, 4)],
)
def test_page_count(total, size, expected):
    assert page_count(total, size) == expected


def test_sort_without_column_uses_default_plan():
    plan = build_query_plan(PropertyFilters(sort=":asc"))
    assert (plan.order.column, plan.order.descending) == ("created_at", True)
