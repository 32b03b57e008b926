"""
Domain records - Immutable snapshots handed out by the registry.

Stores keep their own mutable state; callers only ever receive these
frozen copies, so a snapshot can never observe a later mutation.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from .ports import AuditEventType, Principal, RequestState


@dataclass(frozen=True)
class Identity:
    """Snapshot of an identity record."""

    principal: Principal
    name: str
    email: str
    profile_hash: str
    verified: bool
    created_at: int
    updated_at: int
    attributes: dict[str, str] = field(default_factory=dict)

    @property
    def attribute_keys(self) -> list[str]:
        return list(self.attributes)


@dataclass(frozen=True)
class VerificationRequest:
    """Snapshot of a verification request."""

    id: int
    requester: Principal
    verifier: Principal
    document_hash: str
    approved: bool
    processed: bool
    requested_at: int
    processed_at: int | None = None

    @property
    def state(self) -> RequestState:
        if not self.processed:
            return RequestState.REQUESTED
        return RequestState.APPROVED if self.approved else RequestState.REJECTED


@dataclass(frozen=True)
class AuditEntry:
    """One accepted state transition. Details are a read-only view."""

    seq: int
    kind: AuditEventType
    timestamp: int
    actor: Principal
    subject: str
    details: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))


@dataclass(frozen=True)
class RegistryStats:
    """Global counters read together under one lock."""

    total_identities: int
    next_request_id: int
    audit_entries: int
