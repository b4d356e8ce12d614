from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from maeson_realty.dependencies.auth import get_user_client
from maeson_realty.schemas.card import FeaturedCards
from maeson_realty.schemas.property import (
    Property,
    PropertyCreateRequest,
    PropertyFilters,
    PropertyImagesRequest,
    PropertyPage,
    PropertyUpdateRequest,
)
from maeson_realty.services.backend import SupabaseClient
from maeson_realty.services.cards import split_featured
from maeson_realty.services.properties import (
    create_property,
    delete_property,
    get_featured_properties,
    get_property,
    list_properties,
    set_property_images,
    update_property,
)

router = APIRouter(prefix="/api/v1/properties", tags=["properties"])


@router.get("", response_model=PropertyPage)
async def list_properties_endpoint(
    property_type: Optional[str] = None,
    listing_type: Optional[str] = None,
    listing_status: Optional[str] = Query(None, alias="status"),
    city: Optional[str] = None,
    state: Optional[str] = None,
    min_price: Optional[float] = Query(None, ge=0),
    max_price: Optional[float] = Query(None, ge=0),
    bedrooms: Optional[int] = Query(None, ge=0),
    bathrooms: Optional[int] = Query(None, ge=0),
    search: Optional[str] = None,
    sort: Optional[str] = Query(None, description="newest, oldest or <field>:<asc|desc>"),
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1),
    client: SupabaseClient = Depends(get_user_client),
):
    """
    Published listings matching every given facet, one page at a time.
    """
    filters = PropertyFilters(
        property_type=property_type,
        listing_type=listing_type,
        status=listing_status,
        city=city,
        state=state,
        min_price=min_price,
        max_price=max_price,
        bedrooms=bedrooms,
        bathrooms=bathrooms,
        search=search,
        sort=sort,
        page=page,
        limit=limit,
    )
    return await list_properties(client, filters)


@router.get("/featured", response_model=List[Property])
async def featured_properties(client: SupabaseClient = Depends(get_user_client)):
    return await get_featured_properties(client)


@router.get("/featured/cards", response_model=FeaturedCards)
async def featured_property_cards(client: SupabaseClient = Depends(get_user_client)):
    """Featured listings as cards, split into the Buy and Rent tabs."""
    return split_featured(await get_featured_properties(client))


@router.get("/{property_id}", response_model=Property)
async def property_detail(property_id: str, client: SupabaseClient = Depends(get_user_client)):
    return await get_property(client, property_id)


@router.post("", response_model=Property, status_code=status.HTTP_201_CREATED)
async def create_property_endpoint(
    request: PropertyCreateRequest,
    client: SupabaseClient = Depends(get_user_client),
):
    return await create_property(client, request)


@router.patch("/{property_id}", response_model=Property)
async def update_property_endpoint(
    property_id: str,
    request: PropertyUpdateRequest,
    client: SupabaseClient = Depends(get_user_client),
):
    return await update_property(client, property_id, request)


@router.put("/{property_id}/images", response_model=Property)
async def replace_property_images(
    property_id: str,
    request: PropertyImagesRequest,
    client: SupabaseClient = Depends(get_user_client),
):
    return await set_property_images(client, property_id, request.images)


@router.delete("/{property_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_property_endpoint(property_id: str, client: SupabaseClient = Depends(get_user_client)):
    await delete_property(client, property_id)
