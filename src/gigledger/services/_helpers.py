"""Shared service-layer helper functions."""

from __future__ import annotations

from datetime import UTC, datetime


def utcnow() -> datetime:
    """Current time as an aware UTC datetime (payment timestamps)."""
    return datetime.now(UTC)


def now_iso() -> str:
    """Current UTC time as standard ISO 8601 (for audit trails, event WAL)."""
    return utcnow().isoformat()
