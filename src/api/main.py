"""
FastAPI application factory and configuration.

This module creates the FastAPI application instance,
configures logging, exception handlers, and lifespan events.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse
from psycopg_pool import ConnectionPool

from src.adapters.repository.memory import InMemoryAuctionHouseRepository
from src.adapters.repository.postgres import PostgresAuctionHouseRepository, run_migrations
from src.api.error_handlers import register_error_handlers
from src.api.v1 import router as v1_router
from src.config.settings import get_settings
from src.domain.locking import KeyedLocks

logger = logging.getLogger(__name__)

# OpenAPI tags for documentation grouping
tags_metadata = [
    {
        "name": "v1",
        "description": "Auction House API v1 - Manage auction houses, auctions and bids",
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Manages application startup and shutdown:
    - Configures the log level
    - Creates the repository for the configured backend
      (postgres: connection pool + migrations)
    - Closes the connection pool on shutdown
    """
    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper())

    logger.info("Starting application...")

    pool = None
    if settings.repository_backend == "postgres":
        logger.info("Connecting to database...")
        pool = ConnectionPool(
            conninfo=settings.database_url,
            min_size=settings.pool_min_size,
            max_size=settings.pool_max_size,
        )

        logger.info("Running database migrations...")
        run_migrations(pool)
        app.state.repository = PostgresAuctionHouseRepository(pool)
    else:
        app.state.repository = InMemoryAuctionHouseRepository()

    # One lock registry per process, shared by every request
    app.state.locks = KeyedLocks()
    app.state.pool = pool

    logger.info("Application startup complete (%s backend)", settings.repository_backend)

    yield

    # Shutdown
    logger.info("Shutting down application...")
    if pool is not None:
        pool.close()
        logger.info("Database connection pool closed")


app = FastAPI(
    title="auction-house",
    description="Auction House API - Auction houses hosting time-bound auctions resolved to a single winner",
    version="0.1.0",
    openapi_tags=tags_metadata,
    lifespan=lifespan,
)

register_error_handlers(app)

# Include v1 API routes
app.include_router(v1_router, prefix="/v1")


@app.get("/health")
async def health_check(request: Request) -> dict[str, str]:
    """
    Health check endpoint with database validation.

    Returns 200 OK if the application (and database, when used) is healthy.
    Raises exception if database connection fails.
    """
    pool = getattr(request.app.state, "pool", None)
    if pool is not None:
        with pool.connection() as conn:
            conn.execute("SELECT 1")

    return {"status": "healthy"}


@app.get("/", response_class=HTMLResponse, include_in_schema=False)
async def welcome() -> str:
    """Welcome text pointing to the API documentation."""
    return 'Welcome to the Auction House API, you may see the <a href="/docs">documentation</a> now.'
