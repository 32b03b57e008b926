"""
API v1 package.

Contains versioned API routes for the identity registry.
"""

from identity_registry.api.v1.routes import router

__all__ = ["router"]
