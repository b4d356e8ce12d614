from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from maeson_realty.schemas.property import Property


class Favorite(BaseModel):
    id: str
    user: str
    property: Optional[Property] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None


class FavoriteCreateRequest(BaseModel):
    property_id: str
    notes: Optional[str] = None


class FavoriteUpdateRequest(BaseModel):
    notes: str


class FavoriteStatus(BaseModel):
    property_id: str
    is_favorited: bool
