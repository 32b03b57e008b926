"""
PostgreSQL audit archive adapter - Implements AuditArchive protocol.

This module copies audit log entries into PostgreSQL using psycopg3
with raw SQL. The in-memory audit log stays authoritative; the archive
is an export target and is never read back into the registry.

Idempotency:
------------
Entries are keyed by their sequence number. Inserts use
ON CONFLICT (seq) DO NOTHING, so re-archiving an overlapping range is
harmless and concurrent archive calls cannot duplicate rows.
"""

import logging
from collections.abc import Sequence
from pathlib import Path

from psycopg.types.json import Jsonb
from psycopg_pool import ConnectionPool

from identity_registry.domain.models import AuditEntry

logger = logging.getLogger(__name__)


class PostgresAuditArchive:
    """
    Implements AuditArchive protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        """
        Initialize archive with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
        """
        self._pool = pool

    def last_archived_seq(self) -> int:
        """Return the highest archived sequence number, 0 for an empty table."""
        sql = "SELECT COALESCE(MAX(seq), 0) FROM audit_events"

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql)
            row = cursor.fetchone()
            return int(row[0]) if row is not None else 0

    def archive(self, entries: Sequence[AuditEntry]) -> int:
        """
        Insert audit entries, skipping sequence numbers already stored.

        All rows are written in one transaction.

        Args:
            entries: Audit entries in ascending sequence order

        Returns:
            Number of rows actually inserted
        """
        if not entries:
            return 0

        sql = """
            INSERT INTO audit_events (seq, kind, logical_ts, actor, subject, details)
            VALUES (%s, %s, %s, %s, %s, %s)
            ON CONFLICT (seq) DO NOTHING
        """

        inserted = 0
        with self._pool.connection() as conn, conn.cursor() as cursor:
            for entry in entries:
                cursor.execute(
                    sql,
                    (
                        entry.seq,
                        entry.kind.value,
                        entry.timestamp,
                        entry.actor,
                        entry.subject,
                        Jsonb(dict(entry.details)),
                    ),
                )
                inserted += cursor.rowcount
            conn.commit()

        logger.info(
            f"Archived {inserted} audit entries (seq {entries[0].seq}..{entries[-1].seq})"
        )
        return inserted


def run_migrations(pool: ConnectionPool) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration should be idempotent (use IF NOT EXISTS, etc.).

    Args:
        pool: psycopg3 ConnectionPool instance
    """
    # Structure: identity_registry/adapters/archive/postgres.py -> migrations/
    migrations_dir = Path(__file__).parent.parent.parent.parent / "migrations"

    if not migrations_dir.exists():
        logger.warning(f"Migrations directory not found: {migrations_dir}")
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))

    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info(f"Running {len(sql_files)} migration(s)")

    for sql_file in sql_files:
        logger.info(f"Executing migration: {sql_file.name}")
        try:
            sql_content = sql_file.read_text()

            with pool.connection() as conn:
                conn.execute(sql_content)

            logger.info(f"Migration complete: {sql_file.name}")
        except Exception as e:
            logger.error(f"Migration failed: {sql_file.name} - {e}")
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
