"""
Domain exceptions - Semantic error types for the identity registry.

This module defines domain-specific exceptions that communicate
precondition violations without leaking infrastructure details.
All of them are synchronous validation failures; none are retryable.
"""


class RegistryError(Exception):
    """Base class for registry domain errors."""

    pass


class AlreadyExists(RegistryError):
    """Principal already owns an identity."""

    pass


class NotFound(RegistryError):
    """Identity or verification request does not exist."""

    pass


class Unauthorized(RegistryError):
    """Caller lacks the required role (owner, identity owner or verifier)."""

    pass


class InvalidInput(RegistryError):
    """Empty required string or null principal."""

    pass


class FailedPrecondition(RegistryError):
    """Operation is not valid in the current state."""

    pass


class AlreadyProcessed(FailedPrecondition):
    """Verification request has already been approved or rejected."""

    pass
