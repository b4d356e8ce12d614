"""
Listing card view-models. Mapping is pure and never fails on missing optional fields.
"""
from typing import Any, Iterable, List, Mapping, Optional, Union

from pydantic import BaseModel

from maeson_realty.schemas.card import FeaturedCards, ListingCard, ListingCardPage
from maeson_realty.schemas.property import PropertyPage

LAND_PLACEHOLDER = (
    "https://images.unsplash.com/photo-1441974231531-c6227db76b6e"
    "?crop=entropy&cs=tinysrgb&fit=max&fm=jpg&q=80&w=1080"
)
CURRENCY_SYMBOL = "₦"

PropertyRecord = Union[BaseModel, Mapping[str, Any]]


def format_location(city: Optional[str], state: Optional[str]) -> str:
    return ", ".join(part for part in (city, state) if part)


def format_price(price: Any, listing_type: Optional[str]) -> str:
    try:
        amount = float(price or 0)
    except (TypeError, ValueError):
        amount = 0.0
    sign = "-" if amount < 0 else ""
    amount = abs(amount)
    if amount.is_integer():
        digits = f"{int(amount):,}"
    else:
        digits = f"{amount:,.2f}".rstrip("0").rstrip(".")
    suffix = "/yr" if listing_type == "rent" else ""
    return f"{sign}{CURRENCY_SYMBOL}{digits}{suffix}"


def type_label(property_type: Optional[str], listing_type: Optional[str]) -> str:
    if property_type == "land":
        return "land"
    if listing_type == "sale":
        return "buy"
    return listing_type or ""


def _number(value: Any) -> Union[int, float]:
    """Whole amounts as ints, fractional ones (2.5 baths) as floats, junk as 0."""
    try:
        number = float(value or 0)
    except (TypeError, ValueError):
        return 0
    return int(number) if number.is_integer() else number


def _as_dict(record: PropertyRecord) -> dict:
    if isinstance(record, BaseModel):
        return record.model_dump(mode="json")
    return dict(record or {})


def to_listing_card(record: PropertyRecord) -> ListingCard:
    prop = _as_dict(record)
    property_type = prop.get("property_type")
    listing_type = prop.get("listing_type")

    images = [img for img in (prop.get("images") or []) if img]
    if not images and property_type == "land":
        images = [LAND_PLACEHOLDER]

    area = _number(prop.get("square_feet"))

    return ListingCard(
        id=str(prop.get("id") or ""),
        title=prop.get("title") or "",
        location=format_location(prop.get("city"), prop.get("state")),
        price=format_price(prop.get("price"), listing_type),
        type=type_label(property_type, listing_type),
        bedrooms=_number(prop.get("bedrooms")),
        bathrooms=_number(prop.get("bathrooms")),
        area=f"{area} sqft" if area else "",
        image=images[0] if images else "",
        images=images,
        is_new=bool(prop.get("is_featured")),
    )


def to_card_page(page: PropertyPage) -> ListingCardPage:
    return ListingCardPage(
        count=page.count,
        total=page.total,
        page=page.page,
        pages=page.pages,
        data=[to_listing_card(prop) for prop in page.data],
    )


def split_featured(properties: Iterable[PropertyRecord]) -> FeaturedCards:
    """Featured listings grouped into the home page's Buy and Rent tabs."""
    sale: List[ListingCard] = []
    rent: List[ListingCard] = []
    for record in properties:
        card = to_listing_card(record)
        listing_type = _as_dict(record).get("listing_type")
        if listing_type == "sale":
            sale.append(card)
        elif listing_type == "rent":
            rent.append(card)
    return FeaturedCards(sale=sale, rent=rent)
