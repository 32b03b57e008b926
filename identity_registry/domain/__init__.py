"""
Domain layer - Pure business logic with zero framework imports.

This package contains the identity registry core: the identity and
attribute data model, the verifier registry, the verification request
state machine and the audit log, coordinated by the Registry aggregate.
"""

from .exceptions import (
    AlreadyExists,
    AlreadyProcessed,
    FailedPrecondition,
    InvalidInput,
    NotFound,
    RegistryError,
    Unauthorized,
)
from .models import AuditEntry, Identity, RegistryStats, VerificationRequest
from .ports import (
    ZERO_PRINCIPAL,
    AuditArchive,
    AuditEventType,
    CallContext,
    Clock,
    Principal,
    RequestState,
    is_null_principal,
)
from .registry import Registry

__all__ = [
    "AlreadyExists",
    "AlreadyProcessed",
    "AuditArchive",
    "AuditEntry",
    "AuditEventType",
    "CallContext",
    "Clock",
    "FailedPrecondition",
    "Identity",
    "InvalidInput",
    "NotFound",
    "Principal",
    "Registry",
    "RegistryError",
    "RegistryStats",
    "RequestState",
    "Unauthorized",
    "VerificationRequest",
    "ZERO_PRINCIPAL",
    "is_null_principal",
]
