from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer

from maeson_realty.dependencies.backend import get_backend
from maeson_realty.services.backend import SupabaseClient

# Swagger's "Authorize" posts the form to the token endpoint
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="api/v1/auth/token", auto_error=False)


async def get_user_client(
    token: str | None = Depends(oauth2_scheme),
    backend: SupabaseClient = Depends(get_backend),
) -> SupabaseClient:
    """Backend view carrying the caller's bearer token, or the anonymous handle."""
    return backend.with_token(token) if token else backend
