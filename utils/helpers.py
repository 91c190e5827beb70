"""
============================================================================
HONEYPOT SENSOR - HELPERS UTILITY
============================================================================
Small time helpers shared by the sensor components.
============================================================================
"""

from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """Get current timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def utc_now_iso(dt: Optional[datetime] = None) -> str:
    """
    Format a UTC timestamp as ISO-8601 with millisecond precision.

    Args:
        dt: Datetime to format (defaults to now)

    Returns:
        String like "2024-05-01T12:00:00.123Z"
    """
    dt = (dt or utc_now()).astimezone(timezone.utc)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def seconds_to_human(seconds: float) -> str:
    """
    Convert seconds to human-readable format.

    Args:
        seconds: Number of seconds

    Returns:
        Human-readable string (e.g., "2h 30m 15s")
    """
    seconds = int(seconds)
    if seconds < 0:
        return "0s"

    days, remainder = divmod(seconds, 86400)
    hours, remainder = divmod(remainder, 3600)
    minutes, secs = divmod(remainder, 60)

    parts = []
    if days > 0:
        parts.append(f"{days}d")
    if hours > 0:
        parts.append(f"{hours}h")
    if minutes > 0:
        parts.append(f"{minutes}m")
    if secs > 0 or not parts:
        parts.append(f"{secs}s")

    return " ".join(parts)
