from fastapi import Request

from maeson_realty.config import settings
from maeson_realty.services.backend import SupabaseClient


def create_backend() -> SupabaseClient:
    return SupabaseClient(
        settings.backend_url,
        settings.backend_key,
        timeout=settings.BACKEND_TIMEOUT,
    )


def get_backend(request: Request) -> SupabaseClient:
    """The process-wide backend handle owned by the application."""
    return request.app.state.backend
