from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field


class PriceRange(BaseModel):
    min: Optional[int] = None
    max: Optional[int] = None


class BudgetOption(BaseModel):
    key: str
    label: str
    min: Optional[int] = None
    max: Optional[int] = None


class SearchForm(BaseModel):
    location: str = ""
    mode: Literal["buy", "rent"] = "buy"
    property_type: str = ""
    budget: str = ""
    bedrooms: str = Field("", description="Minimum bedrooms, e.g. '3' for 3+")


class SearchQuery(BaseModel):
    query: str
    params: Dict[str, str]


class BudgetOptionsResponse(BaseModel):
    mode: str
    options: List[BudgetOption]
