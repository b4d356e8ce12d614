from typing import List

from fastapi import APIRouter, Depends, status

from maeson_realty.dependencies.auth import get_user_client
from maeson_realty.schemas.review import (
    PropertyReviews,
    Review,
    ReviewCreateRequest,
    ReviewUpdateRequest,
)
from maeson_realty.services.backend import SupabaseClient
from maeson_realty.services.reviews import (
    create_review,
    delete_review,
    list_my_reviews,
    list_property_reviews,
    update_review,
)

router = APIRouter(prefix="/api/v1/reviews", tags=["reviews"])


@router.get("/property/{property_id}", response_model=PropertyReviews)
async def property_reviews(property_id: str, client: SupabaseClient = Depends(get_user_client)):
    return await list_property_reviews(client, property_id)


@router.get("/user", response_model=List[Review])
async def my_reviews(client: SupabaseClient = Depends(get_user_client)):
    return await list_my_reviews(client)


@router.post("", response_model=Review, status_code=status.HTTP_201_CREATED)
async def create_review_endpoint(request: ReviewCreateRequest, client: SupabaseClient = Depends(get_user_client)):
    return await create_review(client, request)


@router.put("/{review_id}", response_model=Review)
async def update_review_endpoint(
    review_id: str,
    request: ReviewUpdateRequest,
    client: SupabaseClient = Depends(get_user_client),
):
    return await update_review(client, review_id, request)


@router.delete("/{review_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_review_endpoint(review_id: str, client: SupabaseClient = Depends(get_user_client)):
    await delete_review(client, review_id)
