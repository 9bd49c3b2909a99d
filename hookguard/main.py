# hookguard/main.py (async version)

import logging
import asyncio
from datetime import timedelta
from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi
from contextlib import asynccontextmanager

from hookguard.adapters.configuration.config import settings
from hookguard.adapters.outbound.persistence.database import AsyncSessionLocal, create_tables
from hookguard.adapters.outbound.persistence.repositories.token_store_repository import AsyncSqlTokenStore
from hookguard.application.use_cases.client_use_cases import AsyncClientService
from hookguard.application.use_cases.webhook_token_use_cases import AsyncWebhookTokenService
from hookguard.shared.rate_limiter import FixedWindowRateLimiter

# ─── UNIQUE LOGGING CONFIGURATION ─────────────────────────────────────────────────
level = logging.DEBUG if settings.DEBUG else getattr(logging, settings.LOG_LEVEL, logging.INFO)
logging.basicConfig(
    level=level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)


# ────────────────────────────────────────────────────────────────────────────────


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup: create missing tables and start the rate-limit eviction task.
    Shutdown: stop the task.
    """
    logger.info("Application starting up...")

    await create_tables()

    app.state.cleanup_task = asyncio.create_task(periodic_cleanup(app))

    yield

    logger.info("Application shutting down...")
    app.state.cleanup_task.cancel()
    try:
        await app.state.cleanup_task
    except asyncio.CancelledError:
        pass


# Create FastAPI instance
app = FastAPI(
    title="HOOKGUARD",
    description="Webhook token issuing, validation and rate limiting",
    version="1.0.0",
    debug=settings.DEBUG,
    lifespan=lifespan,
)

# Application services
token_store = AsyncSqlTokenStore(AsyncSessionLocal, timeout=settings.STORE_TIMEOUT_SECONDS)
app.state.token_service = AsyncWebhookTokenService(
    store=token_store,
    hashing_salt=settings.TOKEN_HASHING_SALT,
    default_expiration=timedelta(days=settings.DEFAULT_TOKEN_EXPIRATION_DAYS),
    max_tokens_per_client=settings.MAX_TOKENS_PER_CLIENT,
)
app.state.client_service = AsyncClientService(store=token_store)
app.state.rate_limiter = FixedWindowRateLimiter(
    max_requests=settings.MAX_REQUESTS_PER_WINDOW,
    window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
)

# Middlewares (the last one added is the outermost)
from hookguard.shared.middleware import (
    AsyncExceptionMiddleware,
    AsyncRequestLoggingMiddleware,
    AsyncWebhookAuthMiddleware,
)

app.add_middleware(AsyncWebhookAuthMiddleware)
app.add_middleware(AsyncRequestLoggingMiddleware)
app.add_middleware(AsyncExceptionMiddleware)

# Routers
from hookguard.adapters.inbound.api.v1.router import api_router as api_v1_router

app.include_router(api_v1_router, prefix="/api/v1")


@app.get("/health", include_in_schema=False)
async def health():
    return {"status": "ok"}


def custom_openapi():
    if app.openapi_schema:
        return app.openapi_schema

    spec = get_openapi(
        title=app.title,
        version=app.version,
        description=app.description,
        routes=app.routes,
    )

    # Remove unwanted schemas and 422 responses
    for schema in ("HTTPValidationError", "ValidationError"):
        spec.get("components", {}).get("schemas", {}).pop(schema, None)

    for path in spec.get("paths", {}).values():
        for op in path.values():
            op.get("responses", {}).pop("422", None)

    app.openapi_schema = spec
    return spec


app.openapi = custom_openapi


# ── RATE LIMIT WINDOW CLEANUP TASK ────────────────────────────────────────────
async def periodic_cleanup(app: FastAPI):
    """Background task that evicts expired rate-limit windows."""
    while True:
        try:
            await asyncio.sleep(settings.RATE_LIMIT_CLEANUP_INTERVAL_SECONDS)
            evicted = app.state.rate_limiter.purge_expired()
            logger.info(f"Evicted {evicted} expired rate limit windows")
        except asyncio.CancelledError:
            logger.info("Rate limit cleanup task cancelled")
            break
        except Exception as e:
            logger.exception(f"Error in rate limit cleanup: {e}")
