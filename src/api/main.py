"""
Signup service application.

Mounts the v1 signup router under /v1 plus the configured signup route,
and owns the PostgreSQL pool shared by every request.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import psycopg
from fastapi import FastAPI, HTTPException, Request, status
from psycopg_pool import ConnectionPool

from src.adapters.repository.postgres import run_migrations
from src.api.v1 import router as v1_router
from src.config.settings import get_settings

logger = logging.getLogger(__name__)

tags_metadata = [
    {
        "name": "v1",
        "description": "Signup API v1 - Sign up, resend verification and verify email addresses",
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Open the account store for the lifetime of the app.

    The accounts schema is migrated before the first request is served.
    """
    settings = get_settings()

    logger.info("Opening account store pool (%d-%d connections)", settings.pool_min_size, settings.pool_max_size)
    pool = ConnectionPool(
        conninfo=settings.database_url,
        min_size=settings.pool_min_size,
        max_size=settings.pool_max_size,
    )

    run_migrations(pool)
    app.state.pool = pool
    logger.info("Signup service ready, token lifetime %ds", settings.signup_token_ttl_seconds)

    yield

    pool.close()
    logger.info("Account store pool closed")


app = FastAPI(
    title="signup",
    description="Signup API - Account signup with single-use, time-limited email verification tokens",
    version="0.1.0",
    openapi_tags=tags_metadata,
    lifespan=lifespan,
)

app.include_router(v1_router, prefix="/v1" + get_settings().signup_route)


@app.get("/health")
def health_check(request: Request) -> dict[str, str]:
    """
    Report whether the account store is reachable.

    Returns 503 with the same body as the signup routes when it is not.
    """
    try:
        with request.app.state.pool.connection() as conn:
            conn.execute("SELECT 1")
    except psycopg.Error as exc:
        logger.error("Health check failed: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service unavailable",
        ) from exc

    return {"status": "healthy"}
