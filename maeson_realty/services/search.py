"""
Search form facets: budget buckets and the listing page's URL query contract.
"""
from typing import Dict, List, Mapping, Optional
from urllib.parse import urlencode

from maeson_realty.schemas.property import PropertyFilters
from maeson_realty.schemas.search import BudgetOption, PriceRange, SearchForm

# (key, label, min, max) in Naira; rent amounts are per year
_BUCKETS = {
    "buy": [
        ("buy-under-50m", "Under ₦50M", None, 50_000_000),
        ("buy-50m-100m", "₦50M - ₦100M", 50_000_000, 100_000_000),
        ("buy-100m-plus", "₦100M+", 100_000_000, None),
    ],
    "rent": [
        ("rent-300k-1m", "₦300k - ₦1M /yr", 300_000, 1_000_000),
        ("rent-1m-3m", "₦1M - ₦3M /yr", 1_000_000, 3_000_000),
        ("rent-3m-6m", "₦3M - ₦6M /yr", 3_000_000, 6_000_000),
        ("rent-6m-plus", "₦6M+ /yr", 6_000_000, None),
    ],
}

BUDGET_RANGES: Dict[str, PriceRange] = {
    key: PriceRange(min=lo, max=hi)
    for buckets in _BUCKETS.values()
    for key, _, lo, hi in buckets
}

MODE_LISTING_TYPES = {"buy": "sale", "rent": "rent"}


def budget_options(mode: str) -> List[BudgetOption]:
    return [
        BudgetOption(key=key, label=label, min=lo, max=hi)
        for key, label, lo, hi in _BUCKETS.get(mode, [])
    ]


def resolve_budget(key: Optional[str], mode: Optional[str] = None) -> PriceRange:
    """
    Price range for a bucket key. Unknown or empty keys, and keys that belong to
    the other buy/rent mode when ``mode`` is given, place no constraint.
    """
    if not key:
        return PriceRange()
    if mode is not None and not key.startswith(f"{mode}-"):
        return PriceRange()
    return BUDGET_RANGES.get(key, PriceRange()).model_copy()


def to_query_params(form: SearchForm) -> Dict[str, str]:
    params: Dict[str, str] = {}
    if form.location:
        params["location"] = form.location
    params["listingType"] = MODE_LISTING_TYPES[form.mode]
    if form.property_type:
        params["propertyType"] = form.property_type
    if form.bedrooms:
        params["bedrooms"] = form.bedrooms

    price = resolve_budget(form.budget, form.mode)
    if price.min is not None:
        params["minPrice"] = str(price.min)
    if price.max is not None:
        params["maxPrice"] = str(price.max)
    return params


def to_query_string(form: SearchForm) -> str:
    return urlencode(to_query_params(form))


def _parse_int(value: Optional[str]) -> Optional[int]:
    try:
        return int(value) if value not in (None, "") else None
    except ValueError:
        return None


def _parse_float(value: Optional[str]) -> Optional[float]:
    try:
        return float(value) if value not in (None, "") else None
    except ValueError:
        return None


def filters_from_query_params(params: Mapping[str, str]) -> PropertyFilters:
    """Read the listing page's query string back into listing facets."""
    page = _parse_int(params.get("page"))
    limit = _parse_int(params.get("limit"))
    min_price = _parse_float(params.get("minPrice"))
    max_price = _parse_float(params.get("maxPrice"))
    bedrooms = _parse_int(params.get("bedrooms"))
    return PropertyFilters(
        search=params.get("location") or None,
        listing_type=params.get("listingType") or None,
        property_type=params.get("propertyType") or None,
        bedrooms=bedrooms if bedrooms is not None and bedrooms >= 0 else None,
        min_price=min_price if min_price is not None and min_price >= 0 else None,
        max_price=max_price if max_price is not None and max_price >= 0 else None,
        sort=params.get("sort") or None,
        page=page if page and page >= 1 else 1,
        limit=limit if limit and limit >= 1 else None,
    )
