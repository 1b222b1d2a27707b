"""
Human-friendly time formatting for alert lists and mission clocks.
"""

from datetime import datetime, timezone


def _now() -> datetime:
    return datetime.now(timezone.utc)


def time_ago(timestamp: datetime, now: datetime | None = None) -> str:
    """
    Relative description of a past timestamp.

    Args:
        timestamp: Moment to describe (timezone-aware)
        now: Reference time, defaults to the current UTC time

    Returns:
        e.g. "Just now", "12 seconds ago", "1 hour ago", "Yesterday"
    """
    now = now or _now()
    seconds = int((now - timestamp).total_seconds())

    days, remainder = divmod(seconds, 86400)
    hours, remainder = divmod(remainder, 3600)
    minutes, seconds = divmod(remainder, 60)

    if days > 0:
        return "Yesterday" if days == 1 else f"{days} days ago"
    if hours > 0:
        return "1 hour ago" if hours == 1 else f"{hours} hours ago"
    if minutes > 0:
        return "1 minute ago" if minutes == 1 else f"{minutes} minutes ago"
    if seconds >= 5:
        return f"{seconds} seconds ago"
    return "Just now"


def mission_time(start: datetime, now: datetime | None = None) -> str:
    """Elapsed time since start as zero-padded HH:MM."""
    now = now or _now()
    total_minutes = max(0, int((now - start).total_seconds()) // 60)
    hours, minutes = divmod(total_minutes, 60)
    return f"{hours:02d}:{minutes:02d}"
