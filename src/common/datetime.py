"""Datetime utilities."""

from datetime import date, datetime, timezone


def parse_datetime(value) -> datetime:
    """Parse datetime from ISO string or return as-is if already datetime.

    Naive values are assumed to be UTC.
    """
    if value is None:
        return datetime.now(timezone.utc)
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def utc_date(value: datetime) -> date:
    """Return the UTC calendar date of a datetime."""
    if value.tzinfo is None:
        return value.date()
    return value.astimezone(timezone.utc).date()
