"""
Verifier registry - Principals authorized to process verification requests.

Authorization is kept as a per-principal boolean rather than set
membership, so a revocation can later flip the flag without changing
the stored shape.
"""

from .exceptions import InvalidInput, Unauthorized
from .ports import Principal, is_null_principal


class VerifierRegistry:
    """Owner-managed verifier authorizations."""

    def __init__(self, owner: Principal) -> None:
        if is_null_principal(owner):
            raise InvalidInput("registry owner must not be the null principal")
        self._owner = owner
        self._authorized: dict[Principal, bool] = {}

    @property
    def owner(self) -> Principal:
        return self._owner

    def authorize(self, caller: Principal, verifier: Principal) -> bool:
        """
        Authorize verifier on behalf of caller.

        Idempotent: authorizing an already-authorized principal succeeds.

        Returns:
            True if verifier was not previously authorized

        Raises:
            Unauthorized: If caller is not the registry owner
            InvalidInput: If verifier is the null principal
        """
        if caller != self._owner:
            raise Unauthorized("only the registry owner may authorize verifiers")
        if is_null_principal(verifier):
            raise InvalidInput("verifier must not be the null principal")

        was_authorized = self._authorized.get(verifier, False)
        self._authorized[verifier] = True
        return not was_authorized

    def is_authorized(self, principal: Principal) -> bool:
        return self._authorized.get(principal, False)
