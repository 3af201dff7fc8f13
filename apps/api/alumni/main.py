from contextlib import asynccontextmanager
from collections.abc import AsyncGenerator

import structlog
from fastapi import APIRouter, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from alumni.core.config import settings
from alumni.core.errors import global_exception_handler, http_exception_handler
from alumni.middleware.security import (
    RateLimitMiddleware,
    RequestBodySizeLimitMiddleware,
    SecurityHeadersMiddleware,
)

import alumni.models  # noqa: F401  register all models at startup

from alumni.auth.router import router as auth_router
from alumni.modules.admin.router import router as admin_router
from alumni.modules.announcements.router import router as announcements_router
from alumni.modules.batch_admin.router import router as batch_admin_router
from alumni.modules.batches.router import router as batches_router
from alumni.modules.connections.router import router as connections_router
from alumni.modules.directory.router import router as directory_router
from alumni.modules.events.router import router as events_router
from alumni.modules.home.router import router as home_router
from alumni.modules.onboarding.router import router as onboarding_router
from alumni.modules.profiles.router import router as profiles_router
from alumni.core.sentry import init_sentry

# ── Sentry: initialise before the FastAPI app is created ─────────────────────
init_sentry(settings.SENTRY_DSN, settings.SENTRY_ENVIRONMENT, settings.APP_VERSION)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None]:
    logger.info("Starting Alumni API", env=settings.APP_ENV)
    yield
    from alumni.core.database import engine

    await engine.dispose()
    logger.info("Shutting down Alumni API")


_is_prod = settings.APP_ENV == "production"

app = FastAPI(
    title="Alumni Network API",
    description="Alumni directory, connections, batch events and announcements.",
    version=settings.APP_VERSION or "0.1.0",
    docs_url=None if _is_prod else "/docs",
    redoc_url=None if _is_prod else "/redoc",
    openapi_url=None if _is_prod else "/openapi.json",
    lifespan=lifespan,
)

app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore[arg-type]
app.add_exception_handler(Exception, global_exception_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.FRONTEND_URL],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "Accept", "X-Request-ID"],
    expose_headers=["X-RateLimit-Limit", "X-RateLimit-Remaining", "X-RateLimit-Window"],
)
# Added last = outermost
app.add_middleware(
    RequestBodySizeLimitMiddleware,  # type: ignore[arg-type]
    max_bytes=settings.MAX_REQUEST_BODY_BYTES,
)
app.add_middleware(
    RateLimitMiddleware,  # type: ignore[arg-type]
    redis_url=settings.REDIS_URL,
    enabled=settings.RATE_LIMIT_ENABLED,
)
app.add_middleware(
    SecurityHeadersMiddleware,  # type: ignore[arg-type]
    is_production=_is_prod,
)


# ── X-API-Version response header ────────────────────────────────────────────


@app.middleware("http")
async def add_version_header(request: Request, call_next) -> Response:
    response = await call_next(request)
    response.headers["X-API-Version"] = "v1"
    return response


# ── Health check (root-level, not under /v1) ─────────────────────────────────


@app.get("/health")
async def health_check() -> dict:
    """Probes the database and Redis. Any failing probe reports `degraded`."""
    checks: dict[str, dict] = {}

    try:
        from sqlalchemy import text
        from alumni.core.database import async_session_factory
        async with async_session_factory() as db:
            await db.execute(text("SELECT 1"))
        checks["database"] = {"status": "healthy"}
    except Exception as exc:
        checks["database"] = {"status": "unhealthy", "error": str(exc)}

    try:
        from redis.asyncio import from_url as redis_from_url
        r = redis_from_url(settings.REDIS_URL, socket_connect_timeout=2)
        await r.ping()
        await r.aclose()
        checks["redis"] = {"status": "healthy"}
    except Exception as exc:
        checks["redis"] = {"status": "unhealthy", "error": str(exc)}

    overall = (
        "healthy"
        if all(c["status"] == "healthy" for c in checks.values())
        else "degraded"
    )
    return {"status": overall, "service": "alumni-api", "checks": checks}


# ── /v1 versioned router ──────────────────────────────────────────────────────

api_v1 = APIRouter(prefix="/v1")

api_v1.include_router(auth_router)
api_v1.include_router(onboarding_router)
api_v1.include_router(profiles_router)
api_v1.include_router(directory_router)
api_v1.include_router(batches_router)
api_v1.include_router(connections_router)
api_v1.include_router(events_router)
api_v1.include_router(announcements_router)
api_v1.include_router(home_router)
api_v1.include_router(admin_router)
api_v1.include_router(batch_admin_router)

app.include_router(api_v1)
