from typing import List

from fastapi import APIRouter, Depends, status

from maeson_realty.dependencies.auth import get_user_client
from maeson_realty.schemas.favorite import (
    Favorite,
    FavoriteCreateRequest,
    FavoriteStatus,
    FavoriteUpdateRequest,
)
from maeson_realty.services.backend import SupabaseClient
from maeson_realty.services.favorites import (
    add_favorite,
    is_favorited,
    list_favorites,
    remove_favorite,
    update_favorite,
)

router = APIRouter(prefix="/api/v1/favorites", tags=["favorites"])


@router.get("", response_model=List[Favorite])
async def my_favorites(client: SupabaseClient = Depends(get_user_client)):
    return await list_favorites(client)


@router.post("", response_model=Favorite, status_code=status.HTTP_201_CREATED)
async def add_favorite_endpoint(request: FavoriteCreateRequest, client: SupabaseClient = Depends(get_user_client)):
    return await add_favorite(client, request.property_id, request.notes)


@router.get("/check/{property_id}", response_model=FavoriteStatus)
async def check_favorite(property_id: str, client: SupabaseClient = Depends(get_user_client)):
    return {"property_id": property_id, "is_favorited": await is_favorited(client, property_id)}


@router.patch("/{favorite_id}", response_model=Favorite)
async def update_favorite_endpoint(
    favorite_id: str,
    request: FavoriteUpdateRequest,
    client: SupabaseClient = Depends(get_user_client),
):
    return await update_favorite(client, favorite_id, request.notes)


@router.delete("/{favorite_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_favorite_endpoint(favorite_id: str, client: SupabaseClient = Depends(get_user_client)):
    await remove_favorite(client, favorite_id)
