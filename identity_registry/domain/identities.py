"""
Identity store - Identity records keyed by principal.

An identity is created at most once per principal and is never deleted.
Every method validates all of its inputs before touching state, so a
raised exception always leaves the store unchanged.
"""

from dataclasses import dataclass, field

from .attributes import AttributeStore
from .exceptions import AlreadyExists, InvalidInput, NotFound
from .models import Identity
from .ports import Principal


@dataclass
class _IdentityRecord:
    name: str
    email: str
    profile_hash: str
    created_at: int
    updated_at: int
    verified: bool = False
    attributes: AttributeStore = field(default_factory=AttributeStore)


def _require_name_and_email(name: str, email: str) -> None:
    # Whitespace-only values count as empty.
    if not name.strip():
        raise InvalidInput("name must not be empty")
    if not email.strip():
        raise InvalidInput("email must not be empty")


class IdentityStore:
    """In-memory identity records with a running creation count."""

    def __init__(self) -> None:
        self._records: dict[Principal, _IdentityRecord] = {}
        self._total = 0

    @property
    def total(self) -> int:
        """Number of identities ever created."""
        return self._total

    def exists(self, principal: Principal) -> bool:
        return principal in self._records

    def create(
        self, principal: Principal, name: str, email: str, profile_hash: str, now: int
    ) -> Identity:
        """
        Register a new identity for principal.

        Args:
            principal: Owner of the new identity
            name: Display name (non-empty)
            email: Contact email (non-empty)
            profile_hash: Opaque content hash of the off-chain profile
            now: Logical timestamp used for created_at and updated_at

        Returns:
            Snapshot of the created identity

        Raises:
            AlreadyExists: If principal already has an identity
            InvalidInput: If name or email is empty
        """
        if principal in self._records:
            raise AlreadyExists(f"identity already exists for {principal}")
        _require_name_and_email(name, email)

        self._records[principal] = _IdentityRecord(
            name=name,
            email=email,
            profile_hash=profile_hash,
            created_at=now,
            updated_at=now,
        )
        self._total += 1
        return self.get(principal)

    def update(
        self, principal: Principal, name: str, email: str, profile_hash: str, now: int
    ) -> Identity:
        """
        Overwrite name, email and profile hash of an existing identity.

        The verified flag and attributes are left untouched.

        Raises:
            NotFound: If principal has no identity
            InvalidInput: If name or email is empty
        """
        record = self._require(principal)
        _require_name_and_email(name, email)

        record.name = name
        record.email = email
        record.profile_hash = profile_hash
        record.updated_at = now
        return self.get(principal)

    def add_attribute(self, principal: Principal, key: str, value: str, now: int) -> bool:
        """
        Upsert an attribute on principal's identity.

        Returns:
            True if key was new

        Raises:
            NotFound: If principal has no identity
            InvalidInput: If key or value is empty
        """
        record = self._require(principal)
        is_new = record.attributes.set(key, value)
        record.updated_at = now
        return is_new

    def mark_verified(self, principal: Principal) -> None:
        """Set the verified flag. There is no inverse operation."""
        self._require(principal).verified = True

    def get(self, principal: Principal) -> Identity:
        """
        Return a snapshot of principal's identity.

        Raises:
            NotFound: If principal has no identity
        """
        record = self._require(principal)
        return Identity(
            principal=principal,
            name=record.name,
            email=record.email,
            profile_hash=record.profile_hash,
            verified=record.verified,
            created_at=record.created_at,
            updated_at=record.updated_at,
            attributes=record.attributes.snapshot(),
        )

    def get_attribute(self, principal: Principal, key: str) -> str:
        """Return an attribute value, or an empty string when the key is absent."""
        return self._require(principal).attributes.get(key)

    def get_attribute_keys(self, principal: Principal) -> list[str]:
        return self._require(principal).attributes.keys()

    def _require(self, principal: Principal) -> _IdentityRecord:
        record = self._records.get(principal)
        if record is None:
            raise NotFound(f"no identity for {principal}")
        return record
