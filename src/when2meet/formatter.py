"""Readable confirmation lines for a list of selected timestamps."""

from datetime import tzinfo

from src.when2meet.logging import get_logger
from src.when2meet.models import DayGroup, TimeSlot
from src.when2meet.timeutil import format_date, format_time

log = get_logger(__name__)

UNKNOWN_DATE = "Unknown date"


def index_slots(days: list[DayGroup]) -> dict[int, TimeSlot]:
    return {slot.timestamp: slot for day in days for slot in day.slots}


def describe_timestamp(
    timestamp: int, slot: TimeSlot | None, tz: tzinfo | None = None
) -> tuple[str, str]:
    """(date, time) display pair for one timestamp.

    Timestamps outside the platform's datetime range (e.g. milliseconds
    pasted as seconds) are grouped under UNKNOWN_DATE with the raw integer
    as their time.
    """
    try:
        date = format_date(timestamp, tz)
        time = slot.label if slot is not None and slot.label else format_time(timestamp, tz)
    except (ValueError, OverflowError, OSError):
        log.warning("timestamp_out_of_range", timestamp=timestamp)
        return UNKNOWN_DATE, str(timestamp)
    return date, time


def format_selection(
    timestamps: list[int],
    days: list[DayGroup],
    tz: tzinfo | None = None,
) -> list[str]:
    """Group timestamps by local calendar date as ``"{date}: {t1}, {t2}"``.

    Dates appear in order of their first timestamp, not re-sorted. Each time
    uses the slot's page label when the timestamp is on the grid, otherwise a
    locally formatted clock time.
    """
    slots = index_slots(days)
    grouped: dict[str, list[str]] = {}
    for timestamp in timestamps:
        date, time = describe_timestamp(timestamp, slots.get(timestamp), tz)
        grouped.setdefault(date, []).append(time)

    return [f"{date}: {', '.join(times)}" for date, times in grouped.items()]
