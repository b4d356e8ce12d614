from typing import List

from structlog import get_logger

from maeson_realty.errors import BackendOperationError, NotFoundError
from maeson_realty.schemas.review import (
    PropertyReviews,
    Review,
    ReviewCreateRequest,
    ReviewUpdateRequest,
)
from maeson_realty.services.auth import resolve_identity
from maeson_realty.services.backend import BackendError, SupabaseClient

logger = get_logger()

REVIEWS_TABLE = "reviews"
REVIEW_COLUMNS = (
    "id,rating,title,comment,is_approved,created_at,"
    "property:properties(*),user:profiles(id,first_name,last_name,email)"
)


def average_rating(reviews: List[Review]) -> float:
    if not reviews:
        return 0.0
    return round(sum(r.rating for r in reviews) / len(reviews), 1)


async def list_property_reviews(client: SupabaseClient, property_id: str) -> PropertyReviews:
    """Approved reviews of one listing, newest first. Readable without signing in."""
    try:
        result = await (
            client.table(REVIEWS_TABLE)
            .select(REVIEW_COLUMNS)
            .eq("property_id", property_id)
            .eq("is_approved", True)
            .order("created_at", desc=True)
            .execute()
        )
    except BackendError as e:
        raise BackendOperationError.from_backend("Failed to load reviews", e) from e
    reviews = [Review.model_validate(row) for row in result.data or []]
    return PropertyReviews(reviews=reviews, average_rating=average_rating(reviews), count=len(reviews))


async def list_my_reviews(client: SupabaseClient) -> List[Review]:
    identity = await resolve_identity(client)
    try:
        result = await (
            client.table(REVIEWS_TABLE)
            .select(REVIEW_COLUMNS)
            .eq("user_id", identity.id)
            .order("created_at", desc=True)
            .execute()
        )
    except BackendError as e:
        raise BackendOperationError.from_backend("Failed to load reviews", e) from e
    return [Review.model_validate(row) for row in result.data or []]


async def create_review(client: SupabaseClient, data: ReviewCreateRequest) -> Review:
    identity = await resolve_identity(client)
    row = {
        "property_id": data.property_id,
        "user_id": identity.id,
        "rating": data.rating,
        "title": data.title,
        "comment": data.comment,
    }
    try:
        result = await client.table(REVIEWS_TABLE).insert(row).select(REVIEW_COLUMNS).single().execute()
    except BackendError as e:
        raise BackendOperationError.from_backend("Failed to create review", e) from e
    logger.info("Created review", user_id=identity.id, property_id=data.property_id, rating=data.rating)
    return Review.model_validate(result.data)


async def update_review(client: SupabaseClient, review_id: str, data: ReviewUpdateRequest) -> Review:
    identity = await resolve_identity(client)
    try:
        result = await (
            client.table(REVIEWS_TABLE)
            .update(data.model_dump())
            .eq("id", review_id)
            .eq("user_id", identity.id)
            .select(REVIEW_COLUMNS)
            .single()
            .execute()
        )
    except BackendError as e:
        if e.no_rows:
            raise NotFoundError("Review not found") from e
        raise BackendOperationError.from_backend("Failed to update review", e) from e
    return Review.model_validate(result.data)


async def delete_review(client: SupabaseClient, review_id: str) -> None:
    identity = await resolve_identity(client)
    try:
        await (
            client.table(REVIEWS_TABLE)
            .delete()
            .eq("id", review_id)
            .eq("user_id", identity.id)
            .execute()
        )
    except BackendError as e:
        raise BackendOperationError.from_backend("Failed to delete review", e) from e
    logger.info("Deleted review", review_id=review_id, user_id=identity.id)
