"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
"""

from typing import Any

from pydantic import BaseModel, Field

from identity_registry.domain.models import AuditEntry, Identity, VerificationRequest
from identity_registry.domain.ports import RequestState


class IdentityRequest(BaseModel):
    """Request model for identity creation and update."""

    name: str = Field(..., min_length=1, description="Display name")
    email: str = Field(..., min_length=1, description="Contact email, stored verbatim")
    profile_hash: str = Field("", description="Content hash of the off-chain profile")


class IdentityResponse(BaseModel):
    """Identity snapshot."""

    principal: str
    name: str
    email: str
    profile_hash: str
    verified: bool
    created_at: int
    updated_at: int

    @classmethod
    def from_domain(cls, identity: Identity) -> "IdentityResponse":
        return cls(
            principal=identity.principal,
            name=identity.name,
            email=identity.email,
            profile_hash=identity.profile_hash,
            verified=identity.verified,
            created_at=identity.created_at,
            updated_at=identity.updated_at,
        )


class AttributeRequest(BaseModel):
    """Request model for adding an attribute."""

    key: str = Field(..., min_length=1)
    value: str = Field(..., min_length=1)


class AttributeResponse(BaseModel):
    """Single attribute lookup. Value is empty when the key is absent."""

    key: str
    value: str


class AttributeKeysResponse(BaseModel):
    """Attribute keys in first-insertion order."""

    principal: str
    keys: list[str]


class AuthorizeVerifierRequest(BaseModel):
    """Request model for verifier authorization."""

    verifier: str = Field(..., min_length=1, description="Principal to authorize")


class VerifierStatusResponse(BaseModel):
    """Verifier authorization lookup."""

    principal: str
    authorized: bool


class VerificationCreateRequest(BaseModel):
    """Request model for opening a verification request."""

    verifier: str = Field(..., min_length=1, description="Authorized verifier principal")
    document_hash: str = Field(..., min_length=1, description="Content hash of the document")


class VerificationCreateResponse(BaseModel):
    """Response model for a newly opened verification request."""

    request_id: int


class DecisionRequest(BaseModel):
    """Request model for approving or rejecting a verification request."""

    approved: bool


class VerificationRequestResponse(BaseModel):
    """Full verification request record."""

    id: int
    requester: str
    verifier: str
    document_hash: str
    approved: bool
    processed: bool
    state: RequestState
    requested_at: int
    processed_at: int | None = None

    @classmethod
    def from_domain(cls, request: VerificationRequest) -> "VerificationRequestResponse":
        return cls(
            id=request.id,
            requester=request.requester,
            verifier=request.verifier,
            document_hash=request.document_hash,
            approved=request.approved,
            processed=request.processed,
            state=request.state,
            requested_at=request.requested_at,
            processed_at=request.processed_at,
        )


class AuditEntryResponse(BaseModel):
    """One audit log entry."""

    seq: int
    kind: str
    timestamp: int
    actor: str
    subject: str
    details: dict[str, Any]

    @classmethod
    def from_domain(cls, entry: AuditEntry) -> "AuditEntryResponse":
        return cls(
            seq=entry.seq,
            kind=entry.kind.value,
            timestamp=entry.timestamp,
            actor=entry.actor,
            subject=entry.subject,
            details=dict(entry.details),
        )


class StatsResponse(BaseModel):
    """Global counters."""

    total_identities: int
    next_request_id: int
    audit_entries: int


class ArchiveResponse(BaseModel):
    """Result of an audit archive run."""

    archived: int


class ErrorResponse(BaseModel):
    """Standard error response model."""

    detail: str
