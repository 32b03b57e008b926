"""Audit archive adapters - Database implementations."""

from .postgres import PostgresAuditArchive, run_migrations

__all__ = ["PostgresAuditArchive", "run_migrations"]
