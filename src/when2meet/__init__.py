"""When2Meet availability helper.

Reads an event's group grid, renders it as a slot selection menu, parses the
user's answer back to timestamps and marks them on the event page.
"""

from src.when2meet.formatter import format_selection
from src.when2meet.grid import normalize_grid, summarize_availability, validate_cells
from src.when2meet.models import (
    DayGroup,
    EventDetails,
    MarkResult,
    RawCell,
    SelectionResult,
    SlotLookup,
    TimeBlock,
    TimeSlot,
)
from src.when2meet.prompt import compile_prompt
from src.when2meet.selection import parse_selection

__all__ = [
    "normalize_grid",
    "validate_cells",
    "summarize_availability",
    "compile_prompt",
    "parse_selection",
    "format_selection",
    "RawCell",
    "TimeSlot",
    "TimeBlock",
    "DayGroup",
    "SlotLookup",
    "SelectionResult",
    "EventDetails",
    "MarkResult",
]
