"""Time helpers."""

from datetime import UTC, datetime


def utcnow() -> datetime:
    """Naive UTC timestamp, matching the store's timezone-less columns."""
    return datetime.now(UTC).replace(tzinfo=None)
