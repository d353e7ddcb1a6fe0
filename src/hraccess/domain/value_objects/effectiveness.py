"""Lazy expiry rule shared by assignments and overrides. All times are UTC."""

from datetime import UTC, datetime


def utcnow() -> datetime:
    return datetime.now(UTC)


def as_utc(value: datetime) -> datetime:
    """Normalize to aware UTC; naive values are taken to be UTC already."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def is_effective(active: bool, expiry_at: datetime | None, now: datetime) -> bool:
    """Active and either open-ended or expiring strictly after now."""
    return active and (expiry_at is None or as_utc(expiry_at) > now)
