"""Local-time rendering of grid timestamps.

Every helper takes an explicit ``tz``; ``None`` means the host's local zone,
which is what the event page itself uses when it renders the grid.
"""

from datetime import datetime, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from src.when2meet.errors import InvalidSourceError

SLOT_SECONDS = 900

# Half-open hour ranges for period shorthands
PERIOD_HOURS: dict[str, tuple[int, int]] = {
    "morning": (6, 12),
    "afternoon": (12, 17),
    "evening": (17, 24),
}


def resolve_timezone(name: str | None) -> tzinfo | None:
    """Map a configured IANA zone name to a tzinfo (None stays host-local)."""
    if not name:
        return None
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise InvalidSourceError(f"Unknown time zone {name!r}") from e


def to_local(timestamp: int, tz: tzinfo | None = None) -> datetime:
    if tz is None:
        return datetime.fromtimestamp(timestamp).astimezone()
    return datetime.fromtimestamp(timestamp, tz)


def format_time(timestamp: int, tz: tzinfo | None = None) -> str:
    """'09:00 AM' style clock time."""
    return to_local(timestamp, tz).strftime("%I:%M %p")


def format_date(timestamp: int, tz: tzinfo | None = None) -> str:
    """'Monday, Apr 14, 2025' style date."""
    dt = to_local(timestamp, tz)
    return f"{dt.strftime('%A, %b')} {dt.day}, {dt.year}"


def weekday_name(timestamp: int, tz: tzinfo | None = None) -> str:
    return to_local(timestamp, tz).strftime("%A")


def in_period(timestamp: int, period: str, tz: tzinfo | None = None) -> bool:
    """True when the local hour of ``timestamp`` falls in the named period."""
    start, end = PERIOD_HOURS[period]
    return start <= to_local(timestamp, tz).hour < end
