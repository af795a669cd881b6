"""UTC datetime helpers shared by domain code and response schemas."""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(timezone.utc)


def isoformat_or_none(value: datetime | None) -> str | None:
    """ISO 8601 string for API responses; None for rows not yet timestamped."""
    return value.isoformat() if value is not None else None
