from fastapi import APIRouter, Depends
from fastapi.security import OAuth2PasswordRequestForm
from structlog import get_logger

from maeson_realty.dependencies.auth import get_user_client
from maeson_realty.dependencies.backend import get_backend
from maeson_realty.schemas.auth import (
    AuthResponse,
    LoginRequest,
    PasswordUpdateRequest,
    RefreshRequest,
    RegisterRequest,
    StatusResponse,
    User,
    UserUpdateRequest,
)
from maeson_realty.services import auth as auth_service
from maeson_realty.services.backend import SupabaseClient

logger = get_logger()
router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


@router.post("/login", response_model=AuthResponse)
async def login(request: LoginRequest, backend: SupabaseClient = Depends(get_backend)):
    return await auth_service.login(backend, request.email, request.password)


@router.post("/token")
async def token(form_data: OAuth2PasswordRequestForm = Depends(), backend: SupabaseClient = Depends(get_backend)):
    """OAuth2 password flow for the interactive docs; the username is the email."""
    result = await auth_service.login(backend, form_data.username, form_data.password)
    return {"access_token": result.token, "token_type": "bearer"}


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(request: RegisterRequest, backend: SupabaseClient = Depends(get_backend)):
    return await auth_service.register(backend, request)


@router.post("/refresh", response_model=AuthResponse)
async def refresh(request: RefreshRequest, backend: SupabaseClient = Depends(get_backend)):
    return await auth_service.refresh(backend, request.refresh_token)


@router.get("/me", response_model=User)
async def me(client: SupabaseClient = Depends(get_user_client)):
    return await auth_service.get_me(client)


@router.put("/me", response_model=User)
async def update_me(request: UserUpdateRequest, client: SupabaseClient = Depends(get_user_client)):
    return await auth_service.update_details(client, request)


@router.put("/password", response_model=StatusResponse)
async def change_password(request: PasswordUpdateRequest, client: SupabaseClient = Depends(get_user_client)):
    return await auth_service.update_password(client, request.current_password, request.new_password)


@router.post("/logout", response_model=StatusResponse)
async def logout(client: SupabaseClient = Depends(get_user_client)):
    result = await auth_service.logout(client)
    logger.info("Logout", had_session=bool(client.access_token))
    return result
