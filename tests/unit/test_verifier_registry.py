"""
Unit tests for VerifierRegistry.

Tests verify owner-only authorization, null principal rejection and
idempotency.
"""

import pytest

from identity_registry.domain.exceptions import InvalidInput, Unauthorized
from identity_registry.domain.ports import ZERO_PRINCIPAL
from identity_registry.domain.verifiers import VerifierRegistry

OWNER = "0xowner"
VERIFIER = "0xverifier"


@pytest.fixture
def verifiers() -> VerifierRegistry:
    return VerifierRegistry(OWNER)


class TestAuthorize:
    """Tests for VerifierRegistry.authorize."""

    def test_owner_can_authorize(self, verifiers: VerifierRegistry) -> None:
        assert verifiers.authorize(OWNER, VERIFIER) is True
        assert verifiers.is_authorized(VERIFIER)

    def test_non_owner_rejected(self, verifiers: VerifierRegistry) -> None:
        with pytest.raises(Unauthorized):
            verifiers.authorize("0xmallory", VERIFIER)
        assert not verifiers.is_authorized(VERIFIER)

    def test_authorized_verifier_cannot_authorize_others(
        self, verifiers: VerifierRegistry
    ) -> None:
        """Verifier status does not confer owner rights."""
        verifiers.authorize(OWNER, VERIFIER)

        with pytest.raises(Unauthorized):
            verifiers.authorize(VERIFIER, "0xfriend")

    @pytest.mark.parametrize("null", ["", "   ", ZERO_PRINCIPAL, ZERO_PRINCIPAL.upper()])
    def test_null_principal_rejected(self, verifiers: VerifierRegistry, null: str) -> None:
        with pytest.raises(InvalidInput):
            verifiers.authorize(OWNER, null)

    def test_authorize_is_idempotent(self, verifiers: VerifierRegistry) -> None:
        assert verifiers.authorize(OWNER, VERIFIER) is True
        assert verifiers.authorize(OWNER, VERIFIER) is False
        assert verifiers.is_authorized(VERIFIER)

    def test_unknown_principal_is_not_authorized(self, verifiers: VerifierRegistry) -> None:
        assert verifiers.is_authorized("0xnobody") is False

    def test_owner_is_not_implicitly_a_verifier(self, verifiers: VerifierRegistry) -> None:
        assert verifiers.is_authorized(OWNER) is False


class TestOwner:
    """Tests for owner configuration."""

    def test_owner_exposed(self, verifiers: VerifierRegistry) -> None:
        assert verifiers.owner == OWNER

    def test_null_owner_rejected(self) -> None:
        with pytest.raises(InvalidInput):
            VerifierRegistry(ZERO_PRINCIPAL)
