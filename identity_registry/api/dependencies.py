"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting the registry,
the serial dispatcher, the optional audit archive and the caller
principal into routes.
"""

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import APIKeyHeader

from identity_registry.adapters.archive.postgres import PostgresAuditArchive
from identity_registry.adapters.dispatcher import SerialDispatcher
from identity_registry.domain.registry import Registry


def get_registry(request: Request) -> Registry:
    """
    Get the registry from app state.

    The registry is created during app lifespan startup and stored in app.state.
    """
    return request.app.state.registry


def get_dispatcher(request: Request) -> SerialDispatcher:
    """Get the serial dispatcher from app state."""
    return request.app.state.dispatcher


def get_archive(request: Request) -> PostgresAuditArchive | None:
    """Get the audit archive, or None when no database is configured."""
    return getattr(request.app.state, "archive", None)


# Caller principal header for OpenAPI documentation. The upstream gateway
# authenticates the caller; this service only reads the resulting principal.
principal_header = APIKeyHeader(name="X-Principal", auto_error=False)


def get_caller(principal: str | None = Depends(principal_header)) -> str:
    """
    Extract the caller principal from the X-Principal header.

    Args:
        principal: Raw header value (None when absent)

    Returns:
        Stripped principal identifier

    Raises:
        HTTPException: 401 when the header is missing or blank
    """
    if principal is None or not principal.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing caller principal",
        )
    return principal.strip()
