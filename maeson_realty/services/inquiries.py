"""
Inquiries sent by buyers/renters to the agent who owns a listing.
"""
from datetime import datetime, timezone
from typing import List, Optional

from structlog import get_logger

from maeson_realty.errors import BackendOperationError, NotFoundError
from maeson_realty.schemas.inquiry import Inquiry, InquiryCreateRequest
from maeson_realty.services.auth import resolve_identity
from maeson_realty.services.backend import BackendError, SupabaseClient

logger = get_logger()

INQUIRIES_TABLE = "inquiries"
_BASE_COLUMNS = (
    "id,name,email,phone,message,inquiry_type,preferred_contact_method,"
    "status,response,responded_at,created_at,property:properties(*)"
)
_RECIPIENT = "recipient:profiles!inquiries_recipient_id_fkey(id,first_name,last_name,email)"
_SENDER = "sender:profiles!inquiries_sender_id_fkey(id,first_name,last_name,email)"

SENT_COLUMNS = f"{_BASE_COLUMNS},{_RECIPIENT}"
RECEIVED_COLUMNS = f"{_BASE_COLUMNS},{_SENDER}"
FULL_COLUMNS = f"{_BASE_COLUMNS},{_SENDER},{_RECIPIENT}"

DEFAULT_INQUIRY_TYPE = "general"
DEFAULT_CONTACT_METHOD = "email"


def _to_inquiry(row: dict, sender: Optional[dict] = None, recipient: Optional[dict] = None) -> Inquiry:
    return Inquiry(
        id=row["id"],
        property=row.get("property"),
        sender=row.get("sender") or sender,
        recipient=row.get("recipient") or recipient,
        name=row.get("name") or "",
        email=row.get("email") or "",
        phone=row.get("phone") or None,
        message=row.get("message") or "",
        inquiry_type=row.get("inquiry_type") or DEFAULT_INQUIRY_TYPE,
        preferred_contact_method=row.get("preferred_contact_method") or DEFAULT_CONTACT_METHOD,
        status=row.get("status") or "new",
        response=row.get("response") or None,
        responded_at=row.get("responded_at") or None,
        created_at=row.get("created_at"),
    )


async def create_inquiry(client: SupabaseClient, data: InquiryCreateRequest) -> Inquiry:
    identity = await resolve_identity(client)

    # The recipient is whoever owns the listing; look it up before inserting
    try:
        prop = await (
            client.table("properties").select("id,agent_id").eq("id", data.property_id).single().execute()
        )
    except BackendError as e:
        if e.no_rows:
            raise NotFoundError("Property not found") from e
        raise BackendOperationError.from_backend("Failed to load property", e) from e

    row = {
        "property_id": data.property_id,
        "sender_id": identity.id,
        "recipient_id": prop.data.get("agent_id"),
        "name": data.name or None,
        "email": data.email or None,
        "phone": data.phone or None,
        "message": data.message,
        "inquiry_type": data.inquiry_type or DEFAULT_INQUIRY_TYPE,
        "preferred_contact_method": data.preferred_contact_method or DEFAULT_CONTACT_METHOD,
        "status": "new",
    }
    try:
        result = await client.table(INQUIRIES_TABLE).insert(row).select(SENT_COLUMNS).single().execute()
    except BackendError as e:
        raise BackendOperationError.from_backend("Failed to create inquiry", e) from e

    logger.info(
        "Created inquiry",
        user_id=identity.id,
        property_id=data.property_id,
        recipient_id=row["recipient_id"],
    )
    return _to_inquiry(result.data, sender={"id": identity.id})


async def list_sent_inquiries(client: SupabaseClient) -> List[Inquiry]:
    identity = await resolve_identity(client)
    try:
        result = await (
            client.table(INQUIRIES_TABLE)
            .select(SENT_COLUMNS)
            .eq("sender_id", identity.id)
            .order("created_at", desc=True)
            .execute()
        )
    except BackendError as e:
        raise BackendOperationError.from_backend("Failed to load sent inquiries", e) from e
    return [_to_inquiry(row, sender={"id": identity.id}) for row in result.data or []]


async def list_received_inquiries(client: SupabaseClient) -> List[Inquiry]:
    identity = await resolve_identity(client)
    try:
        result = await (
            client.table(INQUIRIES_TABLE)
            .select(RECEIVED_COLUMNS)
            .eq("recipient_id", identity.id)
            .order("created_at", desc=True)
            .execute()
        )
    except BackendError as e:
        raise BackendOperationError.from_backend("Failed to load received inquiries", e) from e
    return [_to_inquiry(row, recipient={"id": identity.id}) for row in result.data or []]


async def update_inquiry_status(
    client: SupabaseClient,
    inquiry_id: str,
    status: str,
    response: Optional[str] = None,
) -> Inquiry:
    identity = await resolve_identity(client)
    values = {
        "status": status,
        "response": response or None,
        "responded_at": datetime.now(timezone.utc).isoformat() if response else None,
    }
    try:
        result = await (
            client.table(INQUIRIES_TABLE)
            .update(values)
            .eq("id", inquiry_id)
            .select(FULL_COLUMNS)
            .single()
            .execute()
        )
    except BackendError as e:
        if e.no_rows:
            raise NotFoundError("Inquiry not found") from e
        raise BackendOperationError.from_backend("Failed to update inquiry", e) from e
    logger.info("Updated inquiry", inquiry_id=inquiry_id, status=status, user_id=identity.id)
    return _to_inquiry(result.data)


async def delete_inquiry(client: SupabaseClient, inquiry_id: str) -> None:
    identity = await resolve_identity(client)
    try:
        await client.table(INQUIRIES_TABLE).delete().eq("id", inquiry_id).execute()
    except BackendError as e:
        raise BackendOperationError.from_backend("Failed to delete inquiry", e) from e
    logger.info("Deleted inquiry", inquiry_id=inquiry_id, user_id=identity.id)
