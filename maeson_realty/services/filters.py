"""
Translate listing facets into predicate clauses, a sort directive and a row window.

Applying every clause conjunctively, then the sort, then the slice
``[(page - 1) * page_size, page * page_size)`` yields the requested page.
"""
import math
from typing import List, Optional

from pydantic import BaseModel

from maeson_realty.config import settings
from maeson_realty.schemas.property import PropertyFilters
from maeson_realty.services.backend import AnyOf, Clause, Eq, Gte, ILike, Lte

SEARCH_COLUMNS = ("title", "city", "state")


class SortOrder(BaseModel):
    column: str
    descending: bool


class QueryPlan(BaseModel):
    clauses: List[Clause]
    order: SortOrder
    page: int
    page_size: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    @property
    def end(self) -> int:
        """Inclusive index of the last row on this page."""
        return self.offset + self.page_size - 1


def resolve_sort(sort: Optional[str]) -> SortOrder:
    if sort == "oldest":
        return SortOrder(column="created_at", descending=False)
    parts = (sort or "").split(":")
    column = parts[0].strip()
    # without a column the key means newest first
    if not column or column == "newest":
        return SortOrder(column="created_at", descending=True)
    direction = parts[1] if len(parts) > 1 else ""
    return SortOrder(column=column, descending=direction == "desc")


def build_clauses(filters: PropertyFilters) -> List[Clause]:
    clauses: List[Clause] = [Eq(column="is_published", value=True)]

    # exact matches
    if filters.listing_type:
        clauses.append(Eq(column="listing_type", value=filters.listing_type))
    if filters.property_type:
        clauses.append(Eq(column="property_type", value=filters.property_type))
    if filters.status:
        clauses.append(Eq(column="status", value=filters.status))

    # substring matches
    if filters.city:
        clauses.append(ILike(column="city", value=filters.city))
    if filters.state:
        clauses.append(ILike(column="state", value=filters.state))

    # inclusive bounds
    if filters.min_price is not None:
        clauses.append(Gte(column="price", value=filters.min_price))
    if filters.max_price is not None:
        clauses.append(Lte(column="price", value=filters.max_price))
    if filters.bedrooms is not None:
        clauses.append(Gte(column="bedrooms", value=filters.bedrooms))
    if filters.bathrooms is not None:
        clauses.append(Gte(column="bathrooms", value=filters.bathrooms))

    if filters.search:
        clauses.append(
            AnyOf(clauses=[ILike(column=col, value=filters.search) for col in SEARCH_COLUMNS])
        )
    return clauses


def build_query_plan(filters: PropertyFilters) -> QueryPlan:
    return QueryPlan(
        clauses=build_clauses(filters),
        order=resolve_sort(filters.sort),
        page=filters.page or 1,
        page_size=filters.limit or settings.DEFAULT_PAGE_SIZE,
    )


def page_count(total: int, page_size: int) -> int:
    return max(1, math.ceil(total / page_size))
