"""
Timestamp helpers.

All persisted timestamps are ISO-8601 UTC strings with millisecond
precision and a trailing "Z" (e.g. 2024-06-01T09:30:00.000Z).
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def to_timestamp(moment: datetime) -> str:
    """Format a datetime as a persisted timestamp string."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value: str) -> datetime:
    """
    Parse a persisted timestamp string.

    Args:
        value: ISO-8601 string, with "Z" or an explicit offset

    Returns:
        Aware UTC datetime

    Raises:
        ValueError: If the string is not a valid ISO-8601 timestamp
    """
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    moment = datetime.fromisoformat(value)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def format_relative(value: str, now: datetime) -> str:
    """Render a timestamp as "just now", "5 minutes ago", "2 weeks ago", ..."""
    seconds = int((now - parse_timestamp(value)).total_seconds())

    if seconds < 60:
        return "just now"
    if seconds < 3600:
        return f"{seconds // 60} minutes ago"
    if seconds < 86400:
        return f"{seconds // 3600} hours ago"
    if seconds < 604800:
        return f"{seconds // 86400} days ago"
    if seconds < 2592000:
        return f"{seconds // 604800} weeks ago"
    return f"{seconds // 2592000} months ago"
