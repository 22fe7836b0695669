"""Timestamps: always timezone-aware UTC inside crudkit.

SQLite hands DateTime(timezone=True) columns back naive; ensure_utc()
normalizes them before they leave the service layer.
"""

from datetime import UTC, datetime


def utc_now() -> datetime:
    return datetime.now(UTC)


def ensure_utc(value: datetime | None) -> datetime | None:
    """Return value as aware UTC. Naive values are read as UTC; None passes through."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def to_iso(value: datetime) -> str:
    """ISO-8601 text for cache payloads."""
    return value.isoformat()


def from_iso(text: str) -> datetime:
    """Parse to_iso() output.

    Raises:
        ValueError: If text is not an ISO-8601 datetime.
    """
    return datetime.fromisoformat(text)
