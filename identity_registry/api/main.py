"""
FastAPI application factory and configuration.

This module creates the FastAPI application instance and wires the
registry, serial dispatcher and optional audit archive in the lifespan.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from psycopg_pool import ConnectionPool

from identity_registry.adapters.archive.postgres import PostgresAuditArchive, run_migrations
from identity_registry.adapters.clock import make_clock
from identity_registry.adapters.dispatcher import SerialDispatcher
from identity_registry.api.v1 import router as v1_router
from identity_registry.config.settings import get_settings
from identity_registry.domain.registry import Registry

logger = logging.getLogger(__name__)

# OpenAPI tags for documentation grouping
tags_metadata = [
    {
        "name": "v1",
        "description": "Identity Registry API v1 - Identities, attributes and verification workflow",
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Manages application startup and shutdown:
    - Creates the registry and serial dispatcher on startup
    - Opens the archive connection pool and runs migrations when configured
    - Archives outstanding audit entries and closes the pool on shutdown
    """
    settings = get_settings()

    logger.info("Starting application...")
    app.state.registry = Registry(owner=settings.owner_principal)
    app.state.dispatcher = SerialDispatcher(make_clock(settings.clock))
    app.state.archive = None
    pool = None

    if settings.database_url:
        logger.info("Connecting to audit archive database...")
        pool = ConnectionPool(
            conninfo=settings.database_url,
            min_size=settings.pool_min_size,
            max_size=settings.pool_max_size,
        )
        logger.info("Running database migrations...")
        run_migrations(pool)
        app.state.pool = pool
        app.state.archive = PostgresAuditArchive(pool)
    else:
        logger.info("No database configured, audit archive disabled")

    logger.info("Application startup complete")

    yield

    # Shutdown
    logger.info("Shutting down application...")
    if pool is not None:
        registry: Registry = app.state.registry
        try:
            archived = registry.export_audit(registry.owner, app.state.archive)
            logger.info(f"Archived {archived} outstanding audit entries")
        except Exception:
            logger.exception("Final audit archive failed")
        finally:
            pool.close()
            logger.info("Database connection pool closed")


app = FastAPI(
    title="identity-registry",
    description="Self-Sovereign Identity Registry API - Identities, attributes and third-party verification",
    version="0.1.0",
    openapi_tags=tags_metadata,
    lifespan=lifespan,
)

# Include v1 API routes
app.include_router(v1_router, prefix="/v1")


@app.get("/health")
async def health_check(request: Request) -> dict[str, str]:
    """
    Health check endpoint.

    Returns 200 OK if the application is up. When the audit archive is
    configured, also validates database connectivity and raises if it fails.
    """
    pool = getattr(request.app.state, "pool", None)
    if pool is not None:
        with pool.connection() as conn:
            conn.execute("SELECT 1")

    return {"status": "healthy"}
