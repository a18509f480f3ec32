"""
FastAPI application factory and configuration.

This module creates the FastAPI application instance,
configures logging, the account store and lifespan events.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, HTTPException, Request, status
from psycopg_pool import ConnectionPool

from src.adapters.repository.memory import InMemoryAccountRepository
from src.adapters.repository.postgres import PostgresAccountRepository, run_migrations
from src.api.models import HealthResponse
from src.api.v1 import router as v1_router
from src.config.settings import Settings, get_settings
from src.domain.exceptions import StoreUnavailable

logger = logging.getLogger(__name__)

# OpenAPI tags for documentation grouping
tags_metadata = [
    {
        "name": "v1",
        "description": "Account Signup API v1 - Register accounts and check email availability",
    },
]


def configure_logging(level: str) -> None:
    """Configure root logging once; a no-op if handlers already exist."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_repository(
    settings: Settings,
) -> tuple[PostgresAccountRepository | InMemoryAccountRepository, ConnectionPool | None]:
    """
    Create the account store selected by settings.

    Returns:
        Tuple of (repository, pool). pool is None for the in-memory backend.
    """
    if settings.storage_backend == "memory":
        logger.warning("Using in-memory account store; accounts are lost on restart")
        return InMemoryAccountRepository(), None

    logger.info("Connecting to database...")
    pool = ConnectionPool(
        conninfo=settings.database_url,
        min_size=settings.pool_min_size,
        max_size=settings.pool_max_size,
    )

    logger.info("Running database migrations...")
    run_migrations(pool)

    return PostgresAccountRepository(pool), pool


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Manages application startup and shutdown:
    - Creates the account store on startup (pool + migrations for Postgres)
    - Closes connection pool on shutdown
    """
    settings = get_settings()
    configure_logging(settings.log_level)

    logger.info("Starting application...")

    repository, pool = build_repository(settings)

    # Store repository in app state for dependency injection
    app.state.repository = repository

    logger.info("Application startup complete")

    yield

    # Shutdown
    logger.info("Shutting down application...")
    if pool is not None:
        pool.close()
        logger.info("Database connection pool closed")


app = FastAPI(
    title="signup-service",
    description="Account Signup API - Unique-email registration with salted PBKDF2 password hashes",
    version="0.1.0",
    openapi_tags=tags_metadata,
    lifespan=lifespan,
)

# Include v1 API routes
app.include_router(v1_router, prefix="/v1")


@app.get("/health", response_model=HealthResponse)
def health_check(request: Request) -> HealthResponse:
    """
    Health check endpoint with account store validation.

    Returns 200 OK if application and store are healthy, 503 otherwise.
    """
    try:
        request.app.state.repository.ping()
    except StoreUnavailable:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Account store unavailable",
        ) from None

    return HealthResponse(status="healthy", timestamp=datetime.now(timezone.utc))
