"""
Attribute store - Per-identity ordered key/value collection.

Keys keep their first-insertion position and never repeat; values
follow last-write-wins. A plain dict gives both properties plus O(1)
membership checks.
"""

from .exceptions import InvalidInput


class AttributeStore:
    """Insertion-ordered, duplicate-free attribute mapping for one identity."""

    def __init__(self) -> None:
        self._values: dict[str, str] = {}

    def set(self, key: str, value: str) -> bool:
        """
        Upsert an attribute.

        Args:
            key: Attribute name (non-empty)
            value: Attribute value (non-empty)

        Returns:
            True if the key was new, False if an existing value was replaced

        Raises:
            InvalidInput: If key or value is empty
        """
        if not key:
            raise InvalidInput("attribute key must not be empty")
        if not value:
            raise InvalidInput("attribute value must not be empty")
        is_new = key not in self._values
        # Reassigning an existing key keeps its original position.
        self._values[key] = value
        return is_new

    def get(self, key: str) -> str:
        """Return the value for key, or an empty string if absent."""
        return self._values.get(key, "")

    def keys(self) -> list[str]:
        return list(self._values)

    def snapshot(self) -> dict[str, str]:
        return dict(self._values)

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __len__(self) -> int:
        return len(self._values)
