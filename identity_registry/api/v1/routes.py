"""
API v1 routes.

Defines REST endpoints for the identity registry. Mutating routes go
through the SerialDispatcher with the caller taken from X-Principal;
read routes call the registry directly.
"""

from fastapi import APIRouter, Depends, HTTPException, Query, status

from identity_registry.adapters.archive.postgres import PostgresAuditArchive
from identity_registry.adapters.dispatcher import SerialDispatcher
from identity_registry.api.dependencies import (
    get_archive,
    get_caller,
    get_dispatcher,
    get_registry,
)
from identity_registry.api.models import (
    ArchiveResponse,
    AttributeKeysResponse,
    AttributeRequest,
    AttributeResponse,
    AuditEntryResponse,
    AuthorizeVerifierRequest,
    DecisionRequest,
    ErrorResponse,
    IdentityRequest,
    IdentityResponse,
    StatsResponse,
    VerificationCreateRequest,
    VerificationCreateResponse,
    VerificationRequestResponse,
    VerifierStatusResponse,
)
from identity_registry.config.settings import get_settings
from identity_registry.domain.exceptions import (
    AlreadyExists,
    FailedPrecondition,
    InvalidInput,
    NotFound,
    RegistryError,
    Unauthorized,
)
from identity_registry.domain.registry import Registry

router = APIRouter(tags=["v1"])

_STATUS_BY_ERROR: list[tuple[type[RegistryError], int]] = [
    (AlreadyExists, status.HTTP_409_CONFLICT),
    (NotFound, status.HTTP_404_NOT_FOUND),
    (Unauthorized, status.HTTP_403_FORBIDDEN),
    (InvalidInput, 422),
    (FailedPrecondition, status.HTTP_409_CONFLICT),
]


def _http_error(error: RegistryError) -> HTTPException:
    """Translate a domain error into an HTTPException carrying its message."""
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return HTTPException(status_code=status_code, detail=str(error))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))


@router.post(
    "/identities",
    response_model=IdentityResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        401: {"model": ErrorResponse, "description": "Missing caller principal"},
        409: {"model": ErrorResponse, "description": "Identity already exists"},
        422: {"description": "Validation error"},
    },
    summary="Create the caller's identity",
)
async def create_identity(
    body: IdentityRequest,
    caller: str = Depends(get_caller),
    registry: Registry = Depends(get_registry),
    dispatcher: SerialDispatcher = Depends(get_dispatcher),
) -> IdentityResponse:
    """
    Register an identity for the calling principal.

    A principal can own at most one identity, and it is never deleted.
    """
    try:
        identity = dispatcher.submit(
            caller, registry.create_identity, body.name, body.email, body.profile_hash
        )
    except RegistryError as e:
        raise _http_error(e) from None
    return IdentityResponse.from_domain(identity)


@router.put(
    "/identities/me",
    response_model=IdentityResponse,
    responses={
        401: {"model": ErrorResponse, "description": "Missing caller principal"},
        404: {"model": ErrorResponse, "description": "Caller has no identity"},
        422: {"description": "Validation error"},
    },
    summary="Update the caller's identity",
)
async def update_identity(
    body: IdentityRequest,
    caller: str = Depends(get_caller),
    registry: Registry = Depends(get_registry),
    dispatcher: SerialDispatcher = Depends(get_dispatcher),
) -> IdentityResponse:
    """Overwrite name, email and profile hash. Verification status is kept."""
    try:
        identity = dispatcher.submit(
            caller, registry.update_identity, body.name, body.email, body.profile_hash
        )
    except RegistryError as e:
        raise _http_error(e) from None
    return IdentityResponse.from_domain(identity)


@router.post(
    "/identities/me/attributes",
    response_model=AttributeResponse,
    responses={
        401: {"model": ErrorResponse, "description": "Missing caller principal"},
        404: {"model": ErrorResponse, "description": "Caller has no identity"},
        422: {"description": "Validation error"},
    },
    summary="Add or overwrite an attribute",
)
async def add_attribute(
    body: AttributeRequest,
    caller: str = Depends(get_caller),
    registry: Registry = Depends(get_registry),
    dispatcher: SerialDispatcher = Depends(get_dispatcher),
) -> AttributeResponse:
    try:
        dispatcher.submit(caller, registry.add_attribute, body.key, body.value)
    except RegistryError as e:
        raise _http_error(e) from None
    return AttributeResponse(key=body.key, value=body.value)


@router.get(
    "/identities/{principal}",
    response_model=IdentityResponse,
    responses={404: {"model": ErrorResponse, "description": "Identity not found"}},
    summary="Get an identity",
)
async def get_identity(
    principal: str, registry: Registry = Depends(get_registry)
) -> IdentityResponse:
    try:
        identity = registry.get_identity(principal)
    except RegistryError as e:
        raise _http_error(e) from None
    return IdentityResponse.from_domain(identity)


@router.get(
    "/identities/{principal}/attributes",
    response_model=AttributeKeysResponse,
    responses={404: {"model": ErrorResponse, "description": "Identity not found"}},
    summary="List attribute keys in insertion order",
)
async def get_attribute_keys(
    principal: str, registry: Registry = Depends(get_registry)
) -> AttributeKeysResponse:
    try:
        keys = registry.get_attribute_keys(principal)
    except RegistryError as e:
        raise _http_error(e) from None
    return AttributeKeysResponse(principal=principal, keys=keys)


@router.get(
    "/identities/{principal}/attributes/{key}",
    response_model=AttributeResponse,
    responses={404: {"model": ErrorResponse, "description": "Identity not found"}},
    summary="Get an attribute value",
)
async def get_attribute(
    principal: str, key: str, registry: Registry = Depends(get_registry)
) -> AttributeResponse:
    """Return the attribute value; an absent key yields an empty value, not 404."""
    try:
        value = registry.get_attribute(principal, key)
    except RegistryError as e:
        raise _http_error(e) from None
    return AttributeResponse(key=key, value=value)


@router.get(
    "/identities/{principal}/verification-requests",
    response_model=list[VerificationRequestResponse],
    summary="List verification requests opened by a principal",
)
async def list_requests_for(
    principal: str, registry: Registry = Depends(get_registry)
) -> list[VerificationRequestResponse]:
    return [
        VerificationRequestResponse.from_domain(r)
        for r in registry.list_requests_for(principal)
    ]


@router.post(
    "/verifiers",
    response_model=VerifierStatusResponse,
    responses={
        401: {"model": ErrorResponse, "description": "Missing caller principal"},
        403: {"model": ErrorResponse, "description": "Caller is not the owner"},
        422: {"description": "Validation error"},
    },
    summary="Authorize a verifier",
    description="Owner only. Authorizing an already-authorized verifier is a no-op.",
)
async def authorize_verifier(
    body: AuthorizeVerifierRequest,
    caller: str = Depends(get_caller),
    registry: Registry = Depends(get_registry),
    dispatcher: SerialDispatcher = Depends(get_dispatcher),
) -> VerifierStatusResponse:
    try:
        dispatcher.submit(caller, registry.authorize_verifier, body.verifier)
    except RegistryError as e:
        raise _http_error(e) from None
    return VerifierStatusResponse(principal=body.verifier, authorized=True)


@router.get(
    "/verifiers/{principal}",
    response_model=VerifierStatusResponse,
    summary="Check verifier authorization",
)
async def get_verifier(
    principal: str, registry: Registry = Depends(get_registry)
) -> VerifierStatusResponse:
    return VerifierStatusResponse(
        principal=principal, authorized=registry.is_verifier(principal)
    )


@router.get(
    "/verifiers/{principal}/pending-requests",
    response_model=list[VerificationRequestResponse],
    summary="List undecided requests assigned to a verifier",
)
async def list_pending_for_verifier(
    principal: str, registry: Registry = Depends(get_registry)
) -> list[VerificationRequestResponse]:
    return [
        VerificationRequestResponse.from_domain(r)
        for r in registry.list_pending_for_verifier(principal)
    ]


@router.post(
    "/verification-requests",
    response_model=VerificationCreateResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        401: {"model": ErrorResponse, "description": "Missing caller principal"},
        403: {"model": ErrorResponse, "description": "Verifier is not authorized"},
        404: {"model": ErrorResponse, "description": "Caller has no identity"},
        422: {"description": "Validation error"},
    },
    summary="Request verification of the caller's identity",
)
async def request_verification(
    body: VerificationCreateRequest,
    caller: str = Depends(get_caller),
    registry: Registry = Depends(get_registry),
    dispatcher: SerialDispatcher = Depends(get_dispatcher),
) -> VerificationCreateResponse:
    try:
        request_id = dispatcher.submit(
            caller, registry.request_verification, body.verifier, body.document_hash
        )
    except RegistryError as e:
        raise _http_error(e) from None
    return VerificationCreateResponse(request_id=request_id)


@router.get(
    "/verification-requests/{request_id}",
    response_model=VerificationRequestResponse,
    responses={404: {"model": ErrorResponse, "description": "Request not found"}},
    summary="Get a verification request",
)
async def get_verification_request(
    request_id: int, registry: Registry = Depends(get_registry)
) -> VerificationRequestResponse:
    try:
        request = registry.get_verification_request(request_id)
    except RegistryError as e:
        raise _http_error(e) from None
    return VerificationRequestResponse.from_domain(request)


@router.post(
    "/verification-requests/{request_id}/decision",
    response_model=VerificationRequestResponse,
    responses={
        401: {"model": ErrorResponse, "description": "Missing caller principal"},
        403: {"model": ErrorResponse, "description": "Caller is not the assigned verifier"},
        404: {"model": ErrorResponse, "description": "Request not found"},
        409: {"model": ErrorResponse, "description": "Request already processed"},
    },
    summary="Approve or reject a verification request",
)
async def process_verification(
    request_id: int,
    body: DecisionRequest,
    caller: str = Depends(get_caller),
    registry: Registry = Depends(get_registry),
    dispatcher: SerialDispatcher = Depends(get_dispatcher),
) -> VerificationRequestResponse:
    """
    Decide a pending request. Only the assigned, authorized verifier may call.

    Approval marks the requester's identity as verified. Each request can
    be decided exactly once.
    """
    try:
        request = dispatcher.submit(
            caller, registry.process_verification, request_id, body.approved
        )
    except RegistryError as e:
        raise _http_error(e) from None
    return VerificationRequestResponse.from_domain(request)


@router.get(
    "/audit",
    response_model=list[AuditEntryResponse],
    summary="Read the audit log",
    description="Entries with seq greater than `after`, oldest first.",
)
async def get_audit_entries(
    after: int = Query(0, ge=0),
    limit: int | None = Query(None, ge=1),
    registry: Registry = Depends(get_registry),
) -> list[AuditEntryResponse]:
    page_limit = get_settings().audit_page_limit
    limit = page_limit if limit is None else min(limit, page_limit)
    return [AuditEntryResponse.from_domain(e) for e in registry.audit_entries(after, limit)]


@router.post(
    "/audit/archive",
    response_model=ArchiveResponse,
    responses={
        401: {"model": ErrorResponse, "description": "Missing caller principal"},
        403: {"model": ErrorResponse, "description": "Caller is not the owner"},
        503: {"model": ErrorResponse, "description": "Archive not configured"},
    },
    summary="Copy unarchived audit entries to PostgreSQL",
)
async def archive_audit(
    caller: str = Depends(get_caller),
    registry: Registry = Depends(get_registry),
    archive: PostgresAuditArchive | None = Depends(get_archive),
) -> ArchiveResponse:
    if archive is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Audit archive not configured",
        )
    try:
        archived = registry.export_audit(caller, archive)
    except RegistryError as e:
        raise _http_error(e) from None
    return ArchiveResponse(archived=archived)


@router.get("/stats", response_model=StatsResponse, summary="Global counters")
async def get_stats(registry: Registry = Depends(get_registry)) -> StatsResponse:
    stats = registry.stats()
    return StatsResponse(
        total_identities=stats.total_identities,
        next_request_id=stats.next_request_id,
        audit_entries=stats.audit_entries,
    )
