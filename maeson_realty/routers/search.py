from typing import Literal

from fastapi import APIRouter, Depends, Request
from structlog import get_logger

from maeson_realty.dependencies.auth import get_user_client
from maeson_realty.schemas.card import ListingCardPage
from maeson_realty.schemas.search import BudgetOptionsResponse, SearchForm, SearchQuery
from maeson_realty.services.backend import SupabaseClient
from maeson_realty.services.cards import to_card_page
from maeson_realty.services.properties import list_properties
from maeson_realty.services.search import (
    budget_options,
    filters_from_query_params,
    to_query_params,
    to_query_string,
)

logger = get_logger()
router = APIRouter(prefix="/api/v1", tags=["search"])


@router.get("/search/budgets", response_model=BudgetOptionsResponse)
async def list_budget_options(mode: Literal["buy", "rent"] = "buy"):
    """Budget buckets offered for the selected buy/rent mode."""
    return {"mode": mode, "options": budget_options(mode)}


@router.post("/search", response_model=SearchQuery)
async def encode_search(form: SearchForm):
    """Encode the search form into the listing page's query string."""
    params = to_query_params(form)
    logger.info("Encoded search", mode=form.mode, facets=sorted(params))
    return {"query": to_query_string(form), "params": params}


@router.get("/listings", response_model=ListingCardPage)
async def listing_page(request: Request, client: SupabaseClient = Depends(get_user_client)):
    """
    Listing page backed by the search form's URL contract
    (location, listingType, propertyType, bedrooms, minPrice, maxPrice).
    """
    filters = filters_from_query_params(request.query_params)
    page = await list_properties(client, filters)
    return to_card_page(page)
