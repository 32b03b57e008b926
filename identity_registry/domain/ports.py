"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the call context the substrate hands to the core,
the enums shared by the domain, and the interfaces (ports) that the
domain expects from infrastructure. Adapters implement these protocols.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from .models import AuditEntry

# Principals are opaque identifiers supplied by the caller-context collaborator.
Principal = str

ZERO_PRINCIPAL: Principal = "0x" + "0" * 40


def is_null_principal(principal: Principal | None) -> bool:
    """Return True for a missing, blank or all-zero principal."""
    if principal is None or not principal.strip():
        return True
    return principal.strip().lower() == ZERO_PRINCIPAL


@dataclass(frozen=True)
class CallContext:
    """
    Explicit execution context for a mutating operation.

    Attributes:
        caller: Principal on whose behalf the operation runs
        now: Logical timestamp assigned by the substrate
    """

    caller: Principal
    now: int


class RequestState(str, Enum):
    """
    Verification request lifecycle states.

    State Transitions (forward-only, exactly once):
    - REQUESTED -> APPROVED
    - REQUESTED -> REJECTED

    APPROVED and REJECTED are terminal. There is no cancellation or expiry.
    """

    REQUESTED = "REQUESTED"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class AuditEventType(str, Enum):
    """Kinds of entries recorded in the audit log, one per accepted mutation."""

    IDENTITY_CREATED = "IdentityCreated"
    IDENTITY_UPDATED = "IdentityUpdated"
    VERIFICATION_REQUESTED = "VerificationRequested"
    IDENTITY_VERIFIED = "IdentityVerified"
    VERIFICATION_REJECTED = "VerificationRejected"
    VERIFIER_AUTHORIZED = "VerifierAuthorized"
    ATTRIBUTE_ADDED = "AttributeAdded"


class Clock(Protocol):
    """Port interface for the logical clock owned by the substrate."""

    def now(self) -> int:
        """
        Return the next logical timestamp.

        Successive calls must never go backwards.
        """
        ...


class AuditArchive(Protocol):
    """Port interface for copying audit entries to external storage."""

    def last_archived_seq(self) -> int:
        """Return the highest sequence number already archived (0 if none)."""
        ...

    def archive(self, entries: Sequence["AuditEntry"]) -> int:
        """
        Store audit entries, skipping any already present.

        Args:
            entries: Entries in ascending sequence order

        Returns:
            Number of entries newly written
        """
        ...
