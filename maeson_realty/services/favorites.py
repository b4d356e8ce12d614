"""
Favorites of the signed-in user.

Uniqueness is not enforced here: ``is_favorited`` followed by ``add_favorite`` is a
read-then-insert sequence and two concurrent adds can both succeed unless the
table carries a unique (user_id, property_id) constraint.
"""
from typing import List, Optional

from structlog import get_logger

from maeson_realty.errors import BackendOperationError, NotFoundError
from maeson_realty.schemas.favorite import Favorite
from maeson_realty.services.auth import resolve_identity
from maeson_realty.services.backend import BackendError, SupabaseClient

logger = get_logger()

FAVORITES_TABLE = "favorites"
FAVORITE_COLUMNS = "id,notes,created_at,property:properties(*)"


def _to_favorite(row: dict, user_id: str) -> Favorite:
    return Favorite(
        id=row["id"],
        user=user_id,
        property=row.get("property"),
        notes=row.get("notes") or None,
        created_at=row.get("created_at"),
    )


async def list_favorites(client: SupabaseClient) -> List[Favorite]:
    identity = await resolve_identity(client)
    try:
        result = await (
            client.table(FAVORITES_TABLE)
            .select(FAVORITE_COLUMNS)
            .eq("user_id", identity.id)
            .order("created_at", desc=True)
            .execute()
        )
    except BackendError as e:
        raise BackendOperationError.from_backend("Failed to load favorites", e) from e
    return [_to_favorite(row, identity.id) for row in result.data or []]


async def add_favorite(client: SupabaseClient, property_id: str, notes: Optional[str] = None) -> Favorite:
    identity = await resolve_identity(client)
    try:
        result = await (
            client.table(FAVORITES_TABLE)
            .insert({"user_id": identity.id, "property_id": property_id, "notes": notes or None})
            .select(FAVORITE_COLUMNS)
            .single()
            .execute()
        )
    except BackendError as e:
        raise BackendOperationError.from_backend("Failed to add favorite", e) from e
    logger.info("Added favorite", user_id=identity.id, property_id=property_id)
    return _to_favorite(result.data, identity.id)


async def update_favorite(client: SupabaseClient, favorite_id: str, notes: str) -> Favorite:
    identity = await resolve_identity(client)
    try:
        result = await (
            client.table(FAVORITES_TABLE)
            .update({"notes": notes})
            .eq("id", favorite_id)
            .eq("user_id", identity.id)
            .select(FAVORITE_COLUMNS)
            .single()
            .execute()
        )
    except BackendError as e:
        if e.no_rows:
            raise NotFoundError("Favorite not found") from e
        raise BackendOperationError.from_backend("Failed to update favorite", e) from e
    return _to_favorite(result.data, identity.id)


async def remove_favorite(client: SupabaseClient, favorite_id: str) -> None:
    identity = await resolve_identity(client)
    try:
        await (
            client.table(FAVORITES_TABLE)
            .delete()
            .eq("id", favorite_id)
            .eq("user_id", identity.id)
            .execute()
        )
    except BackendError as e:
        raise BackendOperationError.from_backend("Failed to remove favorite", e) from e
    logger.info("Removed favorite", user_id=identity.id, favorite_id=favorite_id)


async def is_favorited(client: SupabaseClient, property_id: str) -> bool:
    identity = await resolve_identity(client)
    try:
        result = await (
            client.table(FAVORITES_TABLE)
            .select("id")
            .eq("user_id", identity.id)
            .eq("property_id", property_id)
            .limit(1)
            .execute()
        )
    except BackendError as e:
        raise BackendOperationError.from_backend("Failed to check favorite", e) from e
    return len(result.data or []) > 0
