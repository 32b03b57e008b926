"""
Registry - Orchestrator for the identity registry aggregate.

This module owns the identity store, verifier registry, verification
workflow and audit log, and exposes the public operations over them.

Atomicity
=========

Every public method runs under one re-entrant lock. Mutating methods
validate before touching state, apply the store mutation, then append
exactly one audit entry; a raised RegistryError therefore leaves no
trace in any store or in the audit log. Read methods take the same lock
and return immutable snapshots.

Callers identify themselves through an explicit CallContext; the
registry checks the caller against stored authorization state but
never authenticates it.
"""

import threading

from .audit import AuditLog
from .exceptions import InvalidInput, Unauthorized
from .identities import IdentityStore
from .models import AuditEntry, Identity, RegistryStats, VerificationRequest
from .ports import AuditArchive, AuditEventType, CallContext, Principal, is_null_principal
from .verification import VerificationWorkflow
from .verifiers import VerifierRegistry


class Registry:
    """Single owning aggregate for all registry state."""

    def __init__(self, owner: Principal) -> None:
        self._lock = threading.RLock()
        self._identities = IdentityStore()
        self._verifiers = VerifierRegistry(owner)
        self._workflow = VerificationWorkflow(self._identities, self._verifiers)
        self._audit = AuditLog()

    @property
    def owner(self) -> Principal:
        return self._verifiers.owner

    # Mutating operations

    def create_identity(
        self, ctx: CallContext, name: str, email: str, profile_hash: str
    ) -> Identity:
        """
        Create the caller's identity.

        Raises:
            InvalidInput: If caller is null, or name/email is empty
            AlreadyExists: If caller already has an identity
        """
        with self._lock:
            self._require_caller(ctx)
            identity = self._identities.create(
                ctx.caller, name, email, profile_hash, ctx.now
            )
            self._audit.append(
                AuditEventType.IDENTITY_CREATED,
                ctx.now,
                ctx.caller,
                ctx.caller,
                {"name": name},
            )
            return identity

    def update_identity(
        self, ctx: CallContext, name: str, email: str, profile_hash: str
    ) -> Identity:
        """
        Update the caller's name, email and profile hash.

        Raises:
            NotFound: If caller has no identity
            InvalidInput: If name or email is empty
        """
        with self._lock:
            identity = self._identities.update(
                ctx.caller, name, email, profile_hash, ctx.now
            )
            self._audit.append(
                AuditEventType.IDENTITY_UPDATED, ctx.now, ctx.caller, ctx.caller
            )
            return identity

    def add_attribute(self, ctx: CallContext, key: str, value: str) -> None:
        """
        Add or overwrite an attribute on the caller's identity.

        Raises:
            NotFound: If caller has no identity
            InvalidInput: If key or value is empty
        """
        with self._lock:
            is_new = self._identities.add_attribute(ctx.caller, key, value, ctx.now)
            self._audit.append(
                AuditEventType.ATTRIBUTE_ADDED,
                ctx.now,
                ctx.caller,
                ctx.caller,
                {"key": key, "new_key": is_new},
            )

    def authorize_verifier(self, ctx: CallContext, verifier: Principal) -> None:
        """
        Authorize a verifier. Owner only; idempotent.

        Raises:
            Unauthorized: If caller is not the owner
            InvalidInput: If verifier is the null principal
        """
        with self._lock:
            newly_authorized = self._verifiers.authorize(ctx.caller, verifier)
            self._audit.append(
                AuditEventType.VERIFIER_AUTHORIZED,
                ctx.now,
                ctx.caller,
                verifier,
                {"newly_authorized": newly_authorized},
            )

    def request_verification(
        self, ctx: CallContext, verifier: Principal, document_hash: str
    ) -> int:
        """
        Ask an authorized verifier to verify the caller's identity.

        Returns:
            The allocated request id

        Raises:
            NotFound: If caller has no identity
            Unauthorized: If verifier is not authorized
            InvalidInput: If document_hash is empty
        """
        with self._lock:
            request = self._workflow.request(ctx.caller, verifier, document_hash, ctx.now)
            self._audit.append(
                AuditEventType.VERIFICATION_REQUESTED,
                ctx.now,
                ctx.caller,
                str(request.id),
                {
                    "request_id": request.id,
                    "requester": request.requester,
                    "verifier": request.verifier,
                    "document_hash": request.document_hash,
                },
            )
            return request.id

    def process_verification(
        self, ctx: CallContext, request_id: int, approved: bool
    ) -> VerificationRequest:
        """
        Approve or reject a request assigned to the caller.

        Raises:
            NotFound: If the request does not exist
            Unauthorized: If caller is not the assigned, authorized verifier
            AlreadyProcessed: If the request was already decided
        """
        with self._lock:
            request = self._workflow.process(ctx.caller, request_id, approved, ctx.now)
            kind = (
                AuditEventType.IDENTITY_VERIFIED
                if approved
                else AuditEventType.VERIFICATION_REJECTED
            )
            self._audit.append(
                kind,
                ctx.now,
                ctx.caller,
                request.requester,
                {"request_id": request.id, "verifier": request.verifier},
            )
            return request

    # Read operations

    def get_identity(self, principal: Principal) -> Identity:
        with self._lock:
            return self._identities.get(principal)

    def get_attribute(self, principal: Principal, key: str) -> str:
        with self._lock:
            return self._identities.get_attribute(principal, key)

    def get_attribute_keys(self, principal: Principal) -> list[str]:
        with self._lock:
            return self._identities.get_attribute_keys(principal)

    def get_verification_request(self, request_id: int) -> VerificationRequest:
        with self._lock:
            return self._workflow.get(request_id)

    def has_identity(self, principal: Principal) -> bool:
        with self._lock:
            return self._identities.exists(principal)

    def is_verifier(self, principal: Principal) -> bool:
        with self._lock:
            return self._verifiers.is_authorized(principal)

    def total_identities(self) -> int:
        with self._lock:
            return self._identities.total

    def next_request_id(self) -> int:
        with self._lock:
            return self._workflow.next_request_id

    def list_requests_for(self, requester: Principal) -> list[VerificationRequest]:
        with self._lock:
            return self._workflow.list_for_requester(requester)

    def list_pending_for_verifier(self, verifier: Principal) -> list[VerificationRequest]:
        with self._lock:
            return self._workflow.list_pending_for_verifier(verifier)

    def audit_entries(self, after_seq: int = 0, limit: int | None = None) -> list[AuditEntry]:
        with self._lock:
            return self._audit.entries(after_seq, limit)

    def audit_length(self) -> int:
        with self._lock:
            return len(self._audit)

    def stats(self) -> RegistryStats:
        """Return all global counters as one consistent snapshot."""
        with self._lock:
            return RegistryStats(
                total_identities=self._identities.total,
                next_request_id=self._workflow.next_request_id,
                audit_entries=len(self._audit),
            )

    # Export

    def export_audit(self, caller: Principal, archive: AuditArchive) -> int:
        """
        Copy audit entries not yet in the archive. Owner only.

        The entry snapshot is taken under the lock; archive I/O runs
        outside it so writers are not blocked on the database.

        Returns:
            Number of entries newly archived

        Raises:
            Unauthorized: If caller is not the owner
        """
        if caller != self.owner:
            raise Unauthorized("only the registry owner may export the audit log")
        pending = self.audit_entries(after_seq=archive.last_archived_seq())
        return archive.archive(pending)

    def _require_caller(self, ctx: CallContext) -> None:
        if is_null_principal(ctx.caller):
            raise InvalidInput("caller must not be the null principal")
