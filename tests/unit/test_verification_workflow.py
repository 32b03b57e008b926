"""
Unit tests for VerificationWorkflow.

Tests verify the REQUESTED -> APPROVED/REJECTED state machine:
- Request preconditions and id allocation
- Decision preconditions (assigned, authorized verifier; exactly once)
- Approval as the only path to Identity.verified
"""

import pytest

from identity_registry.domain.exceptions import (
    AlreadyProcessed,
    FailedPrecondition,
    InvalidInput,
    NotFound,
    Unauthorized,
)
from identity_registry.domain.identities import IdentityStore
from identity_registry.domain.ports import RequestState
from identity_registry.domain.verification import VerificationWorkflow
from identity_registry.domain.verifiers import VerifierRegistry

OWNER = "0xowner"
ALICE = "0xa11ce"
BOB = "0xb0b"
VERIFIER = "0xverifier"
OTHER_VERIFIER = "0xverifier2"


@pytest.fixture
def identities() -> IdentityStore:
    store = IdentityStore()
    store.create(ALICE, "Alice", "alice@example.com", "", now=1)
    return store


@pytest.fixture
def verifiers() -> VerifierRegistry:
    registry = VerifierRegistry(OWNER)
    registry.authorize(OWNER, VERIFIER)
    registry.authorize(OWNER, OTHER_VERIFIER)
    return registry


@pytest.fixture
def workflow(identities: IdentityStore, verifiers: VerifierRegistry) -> VerificationWorkflow:
    return VerificationWorkflow(identities, verifiers)


class TestRequest:
    """Tests for VerificationWorkflow.request."""

    def test_first_request_id_is_one(self, workflow: VerificationWorkflow) -> None:
        request = workflow.request(ALICE, VERIFIER, "Qm123", now=2)

        assert request.id == 1
        assert request.state == RequestState.REQUESTED
        assert request.processed is False
        assert request.approved is False
        assert request.requested_at == 2
        assert request.processed_at is None
        assert workflow.next_request_id == 2

    def test_ids_strictly_increase(self, workflow: VerificationWorkflow) -> None:
        ids = [workflow.request(ALICE, VERIFIER, f"Qm{i}", now=i).id for i in range(5)]
        assert ids == [1, 2, 3, 4, 5]

    def test_multiple_outstanding_requests_allowed(
        self, workflow: VerificationWorkflow
    ) -> None:
        workflow.request(ALICE, VERIFIER, "Qm1", now=2)
        workflow.request(ALICE, VERIFIER, "Qm1", now=3)

        assert len(workflow.list_for_requester(ALICE)) == 2

    def test_requester_without_identity_raises_not_found(
        self, workflow: VerificationWorkflow
    ) -> None:
        with pytest.raises(NotFound):
            workflow.request(BOB, VERIFIER, "Qm123", now=2)
        assert workflow.next_request_id == 1

    def test_unauthorized_verifier_raises_unauthorized(
        self, workflow: VerificationWorkflow
    ) -> None:
        with pytest.raises(Unauthorized):
            workflow.request(ALICE, "0xrandom", "Qm123", now=2)
        assert workflow.next_request_id == 1

    def test_empty_document_hash_raises_invalid_input(
        self, workflow: VerificationWorkflow
    ) -> None:
        with pytest.raises(InvalidInput):
            workflow.request(ALICE, VERIFIER, "", now=2)
        assert workflow.next_request_id == 1


class TestProcess:
    """Tests for VerificationWorkflow.process."""

    def test_approve_marks_identity_verified(
        self, workflow: VerificationWorkflow, identities: IdentityStore
    ) -> None:
        request = workflow.request(ALICE, VERIFIER, "Qm123", now=2)

        processed = workflow.process(VERIFIER, request.id, approved=True, now=3)

        assert processed.processed is True
        assert processed.approved is True
        assert processed.state == RequestState.APPROVED
        assert processed.processed_at == 3
        assert identities.get(ALICE).verified is True

    def test_reject_leaves_identity_unverified(
        self, workflow: VerificationWorkflow, identities: IdentityStore
    ) -> None:
        request = workflow.request(ALICE, VERIFIER, "Qm123", now=2)

        processed = workflow.process(VERIFIER, request.id, approved=False, now=3)

        assert processed.state == RequestState.REJECTED
        assert identities.get(ALICE).verified is False

    def test_second_decision_raises_already_processed(
        self, workflow: VerificationWorkflow
    ) -> None:
        request = workflow.request(ALICE, VERIFIER, "Qm123", now=2)
        workflow.process(VERIFIER, request.id, approved=True, now=3)

        with pytest.raises(AlreadyProcessed):
            workflow.process(VERIFIER, request.id, approved=False, now=4)

        assert workflow.get(request.id).approved is True
        assert workflow.get(request.id).processed_at == 3

    def test_already_processed_is_failed_precondition(self) -> None:
        assert issubclass(AlreadyProcessed, FailedPrecondition)

    def test_rejection_after_approval_never_unverifies(
        self, workflow: VerificationWorkflow, identities: IdentityStore
    ) -> None:
        """A later rejection of a different request keeps verified=True."""
        first = workflow.request(ALICE, VERIFIER, "Qm1", now=2)
        second = workflow.request(ALICE, VERIFIER, "Qm2", now=3)

        workflow.process(VERIFIER, first.id, approved=True, now=4)
        workflow.process(VERIFIER, second.id, approved=False, now=5)

        assert identities.get(ALICE).verified is True

    def test_unknown_request_raises_not_found(self, workflow: VerificationWorkflow) -> None:
        with pytest.raises(NotFound):
            workflow.process(VERIFIER, 42, approved=True, now=2)

    def test_non_verifier_caller_raises_unauthorized(
        self, workflow: VerificationWorkflow, identities: IdentityStore
    ) -> None:
        request = workflow.request(ALICE, VERIFIER, "Qm123", now=2)

        with pytest.raises(Unauthorized):
            workflow.process(ALICE, request.id, approved=True, now=3)

        assert workflow.get(request.id).processed is False
        assert identities.get(ALICE).verified is False

    def test_other_authorized_verifier_raises_unauthorized(
        self, workflow: VerificationWorkflow
    ) -> None:
        """Only the verifier named on the request may decide it."""
        request = workflow.request(ALICE, VERIFIER, "Qm123", now=2)

        with pytest.raises(Unauthorized):
            workflow.process(OTHER_VERIFIER, request.id, approved=True, now=3)

        assert workflow.get(request.id).processed is False


class TestListing:
    """Tests for request listings."""

    def test_pending_for_verifier_excludes_processed_and_others(
        self, workflow: VerificationWorkflow
    ) -> None:
        first = workflow.request(ALICE, VERIFIER, "Qm1", now=2)
        second = workflow.request(ALICE, VERIFIER, "Qm2", now=3)
        workflow.request(ALICE, OTHER_VERIFIER, "Qm3", now=4)
        workflow.process(VERIFIER, first.id, approved=False, now=5)

        pending = workflow.list_pending_for_verifier(VERIFIER)

        assert [r.id for r in pending] == [second.id]

    def test_list_for_requester_ordered_by_id(self, workflow: VerificationWorkflow) -> None:
        for i in range(3):
            workflow.request(ALICE, VERIFIER, f"Qm{i}", now=i + 2)

        assert [r.id for r in workflow.list_for_requester(ALICE)] == [1, 2, 3]
        assert workflow.list_for_requester(BOB) == []
