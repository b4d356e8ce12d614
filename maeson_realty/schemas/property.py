from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class PropertyType(str, Enum):
    HOUSE = "house"
    APARTMENT = "apartment"
    LAND = "land"
    COMMERCIAL = "commercial"


class ListingType(str, Enum):
    SALE = "sale"
    RENT = "rent"
    LEASE = "lease"


class Property(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    price: float = Field(..., ge=0)
    property_type: PropertyType
    listing_type: ListingType
    status: Optional[str] = None
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = None
    bedrooms: Optional[float] = None
    bathrooms: Optional[float] = None
    square_feet: Optional[float] = None
    lot_size: Optional[float] = None
    year_built: Optional[int] = None
    features: List[str] = Field(default_factory=list)
    amenities: List[str] = Field(default_factory=list)
    images: List[str] = Field(default_factory=list)
    virtual_tour: Optional[str] = None
    agent_id: Optional[str] = None
    views: Optional[int] = None
    parking: Optional[str] = None
    heating: Optional[str] = None
    cooling: Optional[str] = None
    is_featured: bool = False
    is_published: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("features", "amenities", "images", mode="before")
    @classmethod
    def _null_list(cls, v):
        return v or []


class PropertyCreateRequest(BaseModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    price: float = Field(..., ge=0)
    property_type: PropertyType
    listing_type: ListingType
    status: Optional[str] = None
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = None
    bedrooms: Optional[float] = Field(None, ge=0)
    bathrooms: Optional[float] = Field(None, ge=0)
    square_feet: Optional[float] = Field(None, ge=0)
    lot_size: Optional[float] = Field(None, ge=0)
    year_built: Optional[int] = None
    features: Optional[List[str]] = None
    amenities: Optional[List[str]] = None
    images: Optional[List[str]] = None
    virtual_tour: Optional[str] = None
    agent_id: Optional[str] = None
    parking: Optional[str] = None
    heating: Optional[str] = None
    cooling: Optional[str] = None
    is_featured: bool = False
    is_published: bool = True


class PropertyUpdateRequest(BaseModel):
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    property_type: Optional[PropertyType] = None
    listing_type: Optional[ListingType] = None
    status: Optional[str] = None
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = None
    bedrooms: Optional[float] = Field(None, ge=0)
    bathrooms: Optional[float] = Field(None, ge=0)
    square_feet: Optional[float] = Field(None, ge=0)
    lot_size: Optional[float] = Field(None, ge=0)
    year_built: Optional[int] = None
    features: Optional[List[str]] = None
    amenities: Optional[List[str]] = None
    virtual_tour: Optional[str] = None
    parking: Optional[str] = None
    heating: Optional[str] = None
    cooling: Optional[str] = None
    is_featured: Optional[bool] = None
    is_published: Optional[bool] = None


class PropertyImagesRequest(BaseModel):
    images: List[str]


class PropertyFilters(BaseModel):
    """Listing facets; an absent field places no constraint."""
    property_type: Optional[str] = None
    listing_type: Optional[str] = None
    status: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    min_price: Optional[float] = Field(None, ge=0)
    max_price: Optional[float] = Field(None, ge=0)
    bedrooms: Optional[int] = Field(None, ge=0)
    bathrooms: Optional[int] = Field(None, ge=0)
    search: Optional[str] = None
    sort: Optional[str] = None
    page: int = Field(1, ge=1)
    limit: Optional[int] = Field(None, ge=1)


class PropertyPage(BaseModel):
    status: str = "success"
    count: int
    total: int
    page: int
    pages: int
    data: List[Property]
