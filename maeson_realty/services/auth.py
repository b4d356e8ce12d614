from structlog import get_logger

from maeson_realty.errors import BackendOperationError, NotAuthenticatedError, NotFoundError
from maeson_realty.schemas.auth import (
    AuthResponse,
    Identity,
    RegisterRequest,
    StatusResponse,
    User,
    UserUpdateRequest,
)
from maeson_realty.services.backend import BackendError, SupabaseClient

logger = get_logger()

PROFILES_TABLE = "profiles"

# request field -> profiles column
_PROFILE_COLUMNS = {
    "first_name": "first_name",
    "last_name": "last_name",
    "phone": "phone",
    "role": "role",
    "avatar": "avatar_url",
}


def _to_user(profile: dict) -> User:
    return User(
        id=profile["id"],
        first_name=profile.get("first_name") or "",
        last_name=profile.get("last_name") or "",
        email=profile.get("email") or "",
        phone=profile.get("phone") or None,
        role=profile.get("role") or "buyer",
        avatar=profile.get("avatar_url") or None,
    )


async def resolve_identity(client: SupabaseClient) -> Identity:
    """Turn the caller's session token into a concrete user via the auth service."""
    if not client.access_token:
        raise NotAuthenticatedError()
    try:
        payload = await client.auth.get_user()
    except BackendError as e:
        logger.info("Identity resolution failed", status_code=e.status_code, error=e.message)
        raise NotAuthenticatedError() from e
    # GoTrue answers with the user object; some proxies wrap it
    user = payload.get("user", payload) if isinstance(payload, dict) else None
    if not user or not user.get("id"):
        raise NotAuthenticatedError()
    return Identity(id=user["id"], email=user.get("email"))


async def get_profile(client: SupabaseClient, user_id: str) -> dict:
    try:
        result = await (
            client.table(PROFILES_TABLE).select("*").eq("id", user_id).single().execute()
        )
    except BackendError as e:
        if e.no_rows:
            raise NotFoundError("Profile not found") from e
        raise BackendOperationError.from_backend("Failed to load profile", e) from e
    return result.data


async def login(client: SupabaseClient, email: str, password: str) -> AuthResponse:
    try:
        session = await client.auth.sign_in_with_password(email, password)
    except BackendError as e:
        logger.info("Login rejected", email=email, status_code=e.status_code)
        raise NotAuthenticatedError(e.message or "Login failed") from e

    token = session.get("access_token")
    user = session.get("user") or {}
    if not token or not user.get("id"):
        raise NotAuthenticatedError("Login failed")

    profile = await get_profile(client.with_token(token), user["id"])
    logger.info("User logged in", user_id=user["id"])
    return AuthResponse(
        message="Login successful",
        token=token,
        refresh_token=session.get("refresh_token"),
        user=_to_user(profile),
    )


async def register(client: SupabaseClient, data: RegisterRequest) -> AuthResponse:
    try:
        auth_data = await client.auth.sign_up(data.email, data.password)
    except BackendError as e:
        raise BackendOperationError.from_backend("Registration failed", e) from e

    # With email confirmation enabled the auth service returns the bare user
    user = auth_data.get("user") or (auth_data if auth_data.get("id") else {})
    if not user.get("id"):
        raise BackendOperationError("Registration failed")
    token = auth_data.get("access_token") or ""

    profile_payload = {
        "id": user["id"],
        "first_name": data.first_name,
        "last_name": data.last_name,
        "email": data.email,
        "phone": data.phone or None,
        "role": data.role or "buyer",
    }
    scoped = client.with_token(token) if token else client
    try:
        result = await (
            scoped.table(PROFILES_TABLE).upsert(profile_payload).select("*").single().execute()
        )
    except BackendError as e:
        raise BackendOperationError.from_backend("Profile creation failed", e) from e

    logger.info("User registered", user_id=user["id"], role=profile_payload["role"])
    return AuthResponse(
        message="Registration successful",
        token=token,
        refresh_token=auth_data.get("refresh_token"),
        user=_to_user(result.data),
    )


async def refresh(client: SupabaseClient, refresh_token: str) -> AuthResponse:
    try:
        session = await client.auth.refresh_session(refresh_token)
    except BackendError as e:
        raise NotAuthenticatedError(e.message or "Session expired") from e

    token = session.get("access_token")
    user = session.get("user") or {}
    if not token or not user.get("id"):
        raise NotAuthenticatedError("Session expired")
    profile = await get_profile(client.with_token(token), user["id"])
    return AuthResponse(
        message="Session refreshed",
        token=token,
        refresh_token=session.get("refresh_token"),
        user=_to_user(profile),
    )


async def get_me(client: SupabaseClient) -> User:
    identity = await resolve_identity(client)
    return _to_user(await get_profile(client, identity.id))


async def update_details(client: SupabaseClient, data: UserUpdateRequest) -> User:
    identity = await resolve_identity(client)
    changes = data.model_dump(exclude_unset=True)
    updates = {_PROFILE_COLUMNS[field]: value for field, value in changes.items()}
    if not updates:
        return _to_user(await get_profile(client, identity.id))

    try:
        result = await (
            client.table(PROFILES_TABLE)
            .update(updates)
            .eq("id", identity.id)
            .select("*")
            .single()
            .execute()
        )
    except BackendError as e:
        if e.no_rows:
            raise NotFoundError("Profile not found") from e
        raise BackendOperationError.from_backend("Update failed", e) from e
    logger.info("Profile updated", user_id=identity.id, fields=sorted(updates))
    return _to_user(result.data)


async def update_password(client: SupabaseClient, current_password: str, new_password: str) -> StatusResponse:
    identity = await resolve_identity(client)
    # The current password is checked by signing in with it, which needs an email
    if not identity.email:
        raise NotAuthenticatedError("Current password cannot be verified for this account")
    try:
        await client.auth.sign_in_with_password(identity.email, current_password)
    except BackendError as e:
        raise NotAuthenticatedError("Current password is incorrect") from e

    try:
        await client.auth.update_user({"password": new_password})
    except BackendError as e:
        raise BackendOperationError.from_backend("Password update failed", e) from e
    logger.info("Password updated", user_id=identity.id)
    return StatusResponse(message="Password updated")


async def logout(client: SupabaseClient) -> StatusResponse:
    if client.access_token:
        try:
            await client.auth.sign_out()
        except BackendError as e:
            raise BackendOperationError.from_backend("Logout failed", e) from e
    return StatusResponse(message="Logged out")
