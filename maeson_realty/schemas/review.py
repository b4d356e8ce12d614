from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from maeson_realty.schemas.inquiry import ProfileSummary
from maeson_realty.schemas.property import Property


class Review(BaseModel):
    id: str
    property: Optional[Property] = None
    user: Optional[ProfileSummary] = None
    rating: int = Field(..., ge=1, le=5)
    title: str
    comment: str
    is_approved: bool = False
    created_at: Optional[datetime] = None


class ReviewCreateRequest(BaseModel):
    property_id: str
    rating: int = Field(..., ge=1, le=5)
    title: str = Field(..., min_length=1)
    comment: str = Field(..., min_length=1)


class ReviewUpdateRequest(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    title: str = Field(..., min_length=1)
    comment: str = Field(..., min_length=1)


class PropertyReviews(BaseModel):
    reviews: List[Review]
    average_rating: float
    count: int
