"""Selection prompt rendering.

Turns normalized day groups into the text menu shown to the user and the
slot-code lookup the selection parser resolves against.
"""

from datetime import tzinfo

from src.when2meet.logging import get_logger
from src.when2meet.models import DayGroup, SlotLookup
from src.when2meet.timeutil import format_time

log = get_logger(__name__)

SHORTHAND_HELP = """\
You can also use these shorthand options:
- To select all time slots for a day, enter: day{n} (e.g., day0 for the first day)
- To select all morning slots (6am-noon), enter: morning{n} (e.g., morning0)
- To select all afternoon slots (noon-5pm), enter: afternoon{n} (e.g., afternoon0)
- To select all evening slots (after 5pm), enter: evening{n} (e.g., evening0)

Or if you prefer, you can directly enter UTC timestamps separated by commas:
{example}
"""

DEFAULT_RAW_EXAMPLE = "1744549200, 1744550100, 1744551000"


def compile_prompt(
    days: list[DayGroup],
    event_name: str | None = None,
    tz: tzinfo | None = None,
) -> tuple[str, SlotLookup]:
    """Render the selection menu and build its slot lookup.

    Slots are re-sorted by timestamp per day, so codes stay chronological
    even if the caller reordered ``day.slots``.

    Returns:
        (menu text, lookup from ``d{day}t{index}`` to timestamp)
    """
    lookup: dict[str, int] = {}
    sections: list[str] = []
    raw_example: list[int] = []

    for day in days:
        lines = [f"{day.full_date_label} ({day.weekday_name}):"]
        for index, slot in enumerate(sorted(day.slots, key=lambda s: s.timestamp)):
            slot_id = f"d{day.day_index}t{index}"
            lookup[slot_id] = slot.timestamp
            lines.append(f"[{slot_id}] {format_time(slot.timestamp, tz)} ({slot.timestamp})")
            if len(raw_example) < 3:
                raw_example.append(slot.timestamp)
        sections.append("\n".join(lines))

    example = (
        ", ".join(str(ts) for ts in raw_example)
        if len(raw_example) >= 2
        else DEFAULT_RAW_EXAMPLE
    )

    title = f"Please select your available time slots for: {event_name}\n\n" if event_name else ""
    parts = [
        f"{title}Enter the IDs of the time slots you're available for "
        "(e.g., d0t0 d1t2 d2t1):",
        "\n\n".join(sections) if sections else "(no time slots found)",
        SHORTHAND_HELP.replace("{example}", example),
        "Enter your selections (using any of the formats above):",
    ]
    menu = "\n\n".join(parts) + "\n"

    log.debug("prompt_compiled", days=len(days), slots=len(lookup))
    return menu, SlotLookup(lookup)
