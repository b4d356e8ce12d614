from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from maeson_realty.schemas.property import Property


class ProfileSummary(BaseModel):
    id: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None


class Inquiry(BaseModel):
    id: str
    property: Optional[Property] = None
    sender: Optional[ProfileSummary] = None
    recipient: Optional[ProfileSummary] = None
    name: str = ""
    email: str = ""
    phone: Optional[str] = None
    message: str
    inquiry_type: str
    preferred_contact_method: str
    status: str
    response: Optional[str] = None
    responded_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


class InquiryCreateRequest(BaseModel):
    property_id: str
    message: str = Field(..., min_length=1)
    inquiry_type: Optional[str] = None
    preferred_contact_method: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None


class InquiryStatusUpdateRequest(BaseModel):
    status: str = Field(..., min_length=1)
    response: Optional[str] = None
