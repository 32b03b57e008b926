"""
Audit log - Append-only record of accepted state transitions.

Entries are numbered from 1 in append order, which is the same total
order in which the registry applies mutations. Each entry is also
written to the "audit" logger as a structured INFO record.
"""

import logging
from types import MappingProxyType
from typing import Any

from .models import AuditEntry
from .ports import AuditEventType, Principal

log = logging.getLogger("audit")


class AuditLog:
    """In-memory, append-only audit trail."""

    def __init__(self) -> None:
        self._entries: list[AuditEntry] = []

    def append(
        self,
        kind: AuditEventType,
        timestamp: int,
        actor: Principal,
        subject: str,
        details: dict[str, Any] | None = None,
    ) -> AuditEntry:
        """
        Record one accepted mutation.

        Args:
            kind: Event type
            timestamp: Logical timestamp of the mutation
            actor: Caller principal that performed it
            subject: Affected principal or request id
            details: Additional context

        Returns:
            The stored entry with its sequence number
        """
        entry = AuditEntry(
            seq=len(self._entries) + 1,
            kind=kind,
            timestamp=timestamp,
            actor=actor,
            subject=subject,
            details=MappingProxyType(dict(details or {})),
        )
        self._entries.append(entry)

        log.info(
            "audit: %s %s",
            entry.kind.value,
            entry.subject,
            extra={
                "type": "audit",
                "seq": entry.seq,
                "principal": entry.actor,
                "action": entry.kind.value,
                "timestamp": entry.timestamp,
            },
        )
        return entry

    def entries(self, after_seq: int = 0, limit: int | None = None) -> list[AuditEntry]:
        """
        Return entries with seq > after_seq, oldest first.

        Args:
            after_seq: Exclusive lower bound on sequence number
            limit: Maximum number of entries to return (None for all)
        """
        start = max(after_seq, 0)
        selected = self._entries[start:]
        if limit is not None:
            selected = selected[: max(limit, 0)]
        return list(selected)

    def __len__(self) -> int:
        return len(self._entries)
