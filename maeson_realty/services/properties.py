from typing import List

from structlog import get_logger

from maeson_realty.errors import BackendOperationError, NotFoundError
from maeson_realty.schemas.property import (
    Property,
    PropertyCreateRequest,
    PropertyFilters,
    PropertyPage,
    PropertyUpdateRequest,
)
from maeson_realty.services.auth import resolve_identity
from maeson_realty.services.backend import BackendError, SupabaseClient
from maeson_realty.services.filters import build_query_plan, page_count

logger = get_logger()

PROPERTIES_TABLE = "properties"


async def list_properties(client: SupabaseClient, filters: PropertyFilters) -> PropertyPage:
    plan = build_query_plan(filters)
    query = (
        client.table(PROPERTIES_TABLE)
        .select("*", count="exact")
        .where(plan.clauses)
        .order(plan.order.column, desc=plan.order.descending)
        .range(plan.offset, plan.end)
    )
    try:
        result = await query.execute()
    except BackendError as e:
        raise BackendOperationError.from_backend("Failed to list properties", e) from e

    total = result.count or 0
    items = [Property.model_validate(row) for row in result.data or []]
    logger.info("Listed properties", page=plan.page, count=len(items), total=total)
    return PropertyPage(
        count=len(items),
        total=total,
        page=plan.page,
        pages=page_count(total, plan.page_size),
        data=items,
    )


async def get_property(client: SupabaseClient, property_id: str) -> Property:
    try:
        result = await (
            client.table(PROPERTIES_TABLE).select("*").eq("id", property_id).single().execute()
        )
    except BackendError as e:
        if e.no_rows:
            raise NotFoundError("Property not found") from e
        raise BackendOperationError.from_backend("Failed to load property", e) from e
    return Property.model_validate(result.data)


async def get_featured_properties(client: SupabaseClient) -> List[Property]:
    try:
        result = await (
            client.table(PROPERTIES_TABLE)
            .select("*")
            .eq("is_featured", True)
            .eq("is_published", True)
            .order("created_at", desc=True)
            .execute()
        )
    except BackendError as e:
        raise BackendOperationError.from_backend("Failed to load featured properties", e) from e
    return [Property.model_validate(row) for row in result.data or []]


async def create_property(client: SupabaseClient, data: PropertyCreateRequest) -> Property:
    identity = await resolve_identity(client)
    payload = data.model_dump(mode="json", exclude_none=True)
    payload.setdefault("agent_id", identity.id)
    try:
        result = await client.table(PROPERTIES_TABLE).insert(payload).select("*").single().execute()
    except BackendError as e:
        raise BackendOperationError.from_backend("Failed to create property", e) from e
    created = Property.model_validate(result.data)
    logger.info("Created property", property_id=created.id, user_id=identity.id)
    return created


async def _update(client: SupabaseClient, property_id: str, values: dict, action: str) -> Property:
    try:
        result = await (
            client.table(PROPERTIES_TABLE)
            .update(values)
            .eq("id", property_id)
            .select("*")
            .single()
            .execute()
        )
    except BackendError as e:
        if e.no_rows:
            raise NotFoundError("Property not found") from e
        raise BackendOperationError.from_backend(action, e) from e
    return Property.model_validate(result.data)


async def update_property(client: SupabaseClient, property_id: str, data: PropertyUpdateRequest) -> Property:
    identity = await resolve_identity(client)
    values = data.model_dump(mode="json", exclude_unset=True)
    if not values:
        return await get_property(client, property_id)
    updated = await _update(client, property_id, values, "Failed to update property")
    logger.info("Updated property", property_id=property_id, user_id=identity.id)
    return updated


async def set_property_images(client: SupabaseClient, property_id: str, images: List[str]) -> Property:
    """Replace the image list of a listing with already-hosted image URLs."""
    identity = await resolve_identity(client)
    updated = await _update(client, property_id, {"images": images}, "Failed to update images")
    logger.info("Updated property images", property_id=property_id, user_id=identity.id, count=len(images))
    return updated


async def delete_property(client: SupabaseClient, property_id: str) -> None:
    identity = await resolve_identity(client)
    try:
        await client.table(PROPERTIES_TABLE).delete().eq("id", property_id).execute()
    except BackendError as e:
        raise BackendOperationError.from_backend("Failed to delete property", e) from e
    logger.info("Deleted property", property_id=property_id, user_id=identity.id)
