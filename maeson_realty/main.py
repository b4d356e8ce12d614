from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from structlog import get_logger

from maeson_realty.config import settings
from maeson_realty.dependencies.backend import create_backend, get_backend
from maeson_realty.errors import BackendOperationError, NotAuthenticatedError, NotFoundError
from maeson_realty.routers import auth, favorites, inquiries, properties, reviews, search
from maeson_realty.services.backend import BackendError, SupabaseClient

logger = get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.missing_backend_config:
        logger.warning(
            "Missing Supabase configuration, using placeholders. "
            "Set SUPABASE_URL and SUPABASE_ANON_KEY."
        )
    app.state.backend = create_backend()
    yield
    await app.state.backend.aclose()


app = FastAPI(title="Maeson Realty Marketplace API", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(NotAuthenticatedError)
async def not_authenticated_handler(request: Request, exc: NotAuthenticatedError):
    return JSONResponse(
        status_code=401,
        content={"detail": exc.message},
        headers={"WWW-Authenticate": "Bearer"},
    )


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"detail": exc.message})


@app.exception_handler(BackendOperationError)
async def backend_failure_handler(request: Request, exc: BackendOperationError):
    logger.error(
        "Backend operation failed",
        path=request.url.path,
        upstream_status=exc.status_code,
        code=exc.code,
        error=exc.message,
    )
    return JSONResponse(
        status_code=502,
        content={"detail": exc.message, "upstream_status": exc.status_code, "code": exc.code},
    )


app.include_router(auth.router)
app.include_router(properties.router)
app.include_router(search.router)
app.include_router(favorites.router)
app.include_router(inquiries.router)
app.include_router(reviews.router)


@app.get("/health")
async def root_health():
    return "ok"


@app.get("/api/v1/health")
async def backend_health(backend: SupabaseClient = Depends(get_backend)):
    """Reachability of the hosted backend's auth service."""
    try:
        upstream = await backend.health()
    except BackendError as e:
        return {"status": "error", "error": e.message}
    healthy = 200 <= upstream["status_code"] < 400
    return {"status": "ok" if healthy else "degraded", "backend": upstream}
