"""
Verification workflow - Request/approve/reject state machine.

Request State Machine (Forward-Only Transitions)
================================================

States:
- REQUESTED: Initial state, awaiting the assigned verifier's decision
- APPROVED: Terminal state, requester's identity is marked verified
- REJECTED: Terminal state, identity is left unchanged

Valid Transitions (each request transitions exactly once):
    REQUESTED -> APPROVED
    REQUESTED -> REJECTED

Invalid Transitions (never allowed):
    APPROVED -> any
    REJECTED -> any

Approval is the only path that sets Identity.verified, and nothing
ever clears it. Request ids start at 1 and are never reused.
"""

from dataclasses import dataclass, replace

from .exceptions import AlreadyProcessed, InvalidInput, NotFound, Unauthorized
from .identities import IdentityStore
from .models import VerificationRequest
from .ports import Principal
from .verifiers import VerifierRegistry


@dataclass
class VerificationWorkflow:
    """
    Domain service for verification requests.

    Reads identities and verifier authorizations; writes only its own
    request table and, on approval, the requester's verified flag.
    """

    identities: IdentityStore
    verifiers: VerifierRegistry

    def __post_init__(self) -> None:
        self._requests: dict[int, VerificationRequest] = {}
        self._next_request_id = 1

    @property
    def next_request_id(self) -> int:
        return self._next_request_id

    def request(
        self, requester: Principal, verifier: Principal, document_hash: str, now: int
    ) -> VerificationRequest:
        """
        Open a verification request from requester to verifier.

        Args:
            requester: Identity owner asking to be verified
            verifier: Authorized verifier chosen by the requester
            document_hash: Opaque content hash of the supporting document
            now: Logical timestamp recorded as requested_at

        Returns:
            The new request in REQUESTED state

        Raises:
            NotFound: If requester has no identity
            Unauthorized: If verifier is not an authorized verifier
            InvalidInput: If document_hash is empty
        """
        if not self.identities.exists(requester):
            raise NotFound(f"no identity for {requester}")
        if not self.verifiers.is_authorized(verifier):
            raise Unauthorized(f"{verifier} is not an authorized verifier")
        if not document_hash:
            raise InvalidInput("document hash must not be empty")

        request = VerificationRequest(
            id=self._next_request_id,
            requester=requester,
            verifier=verifier,
            document_hash=document_hash,
            approved=False,
            processed=False,
            requested_at=now,
        )
        self._requests[request.id] = request
        self._next_request_id += 1
        return request

    def process(
        self, caller: Principal, request_id: int, approved: bool, now: int
    ) -> VerificationRequest:
        """
        Approve or reject a pending request.

        Raises:
            NotFound: If request_id does not exist
            Unauthorized: If caller is not an authorized verifier, or is not
                the verifier assigned to this request
            AlreadyProcessed: If the request was already decided
        """
        request = self.get(request_id)
        if not self.verifiers.is_authorized(caller):
            raise Unauthorized(f"{caller} is not an authorized verifier")
        if caller != request.verifier:
            raise Unauthorized(f"request {request_id} is assigned to another verifier")
        if request.processed:
            raise AlreadyProcessed(f"request {request_id} has already been processed")

        processed = replace(request, processed=True, approved=approved, processed_at=now)
        if approved:
            self.identities.mark_verified(request.requester)
        self._requests[request_id] = processed
        return processed

    def get(self, request_id: int) -> VerificationRequest:
        request = self._requests.get(request_id)
        if request is None:
            raise NotFound(f"verification request {request_id} does not exist")
        return request

    def list_for_requester(self, requester: Principal) -> list[VerificationRequest]:
        return [r for r in self._requests.values() if r.requester == requester]

    def list_pending_for_verifier(self, verifier: Principal) -> list[VerificationRequest]:
        return [
            r for r in self._requests.values() if r.verifier == verifier and not r.processed
        ]
