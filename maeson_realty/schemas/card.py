from typing import List, Union

from pydantic import BaseModel


class ListingCard(BaseModel):
    id: str
    title: str
    location: str
    price: str
    type: str
    bedrooms: Union[int, float]
    bathrooms: Union[int, float]
    area: str
    image: str
    images: List[str]
    is_new: bool


class ListingCardPage(BaseModel):
    count: int
    total: int
    page: int
    pages: int
    data: List[ListingCard]


class FeaturedCards(BaseModel):
    sale: List[ListingCard]
    rent: List[ListingCard]
