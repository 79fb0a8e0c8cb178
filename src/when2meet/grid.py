"""Grid normalization: raw group-grid cells to day groups and time blocks.

Cells are grouped by their grid column, ordered by timestamp inside each
column (row numbers are not trusted to be chronological), given slot codes
``d<day>t<index>`` and compressed into runs of contiguous 15-minute slots.
"""

from collections import defaultdict
from collections.abc import Iterable
from datetime import tzinfo

from src.when2meet.errors import GridValidationError
from src.when2meet.logging import get_logger
from src.when2meet.models import DayGroup, RawCell, TimeBlock, TimeSlot
from src.when2meet.timeutil import SLOT_SECONDS, format_date, format_time, weekday_name

log = get_logger(__name__)


def validate_cells(cells: Iterable[RawCell]) -> None:
    """Reject grids that break the 15-minute raster or reuse a timestamp.

    Raises:
        GridValidationError: On the first offending cell.
    """
    seen: dict[int, int] = {}
    for cell in cells:
        if cell.timestamp < 0 or cell.timestamp % SLOT_SECONDS:
            raise GridValidationError(
                f"Timestamp {cell.timestamp} (day {cell.day}) is not on the "
                f"{SLOT_SECONDS}-second grid"
            )
        if cell.timestamp in seen:
            raise GridValidationError(
                f"Timestamp {cell.timestamp} appears more than once "
                f"(days {seen[cell.timestamp]} and {cell.day})"
            )
        seen[cell.timestamp] = cell.day


def build_blocks(slots: list[TimeSlot], tz: tzinfo | None = None) -> list[TimeBlock]:
    """Run-length encode chronologically sorted slots into contiguous blocks."""
    blocks: list[TimeBlock] = []
    run: list[int] = []

    def _close() -> None:
        blocks.append(
            TimeBlock(
                start_timestamp=run[0],
                end_timestamp=run[-1],
                start_label=format_time(run[0], tz),
                end_label=format_time(run[-1], tz),
                timestamps=list(run),
            )
        )

    for slot in slots:
        if run and slot.timestamp - run[-1] != SLOT_SECONDS:
            _close()
            run = []
        run.append(slot.timestamp)

    if run:
        _close()
    return blocks


def normalize_grid(
    cells: Iterable[RawCell],
    tz: tzinfo | None = None,
    *,
    strict: bool = False,
) -> list[DayGroup]:
    """Build one DayGroup per grid column present in ``cells``.

    Columns without cells are omitted rather than filled with empty days, so
    day indices in the result may have gaps. An empty input gives ``[]``.

    Args:
        cells: Raw cells from the event page.
        tz: Zone used for weekday, date and time labels (None = host local).
        strict: Run validate_cells() first.

    Returns:
        Day groups ordered by day index.
    """
    cells = list(cells)
    if strict:
        validate_cells(cells)

    by_day: dict[int, list[RawCell]] = defaultdict(list)
    for cell in cells:
        by_day[cell.day].append(cell)

    days: list[DayGroup] = []
    for day_index in sorted(by_day):
        ordered = sorted(by_day[day_index], key=lambda c: (c.timestamp, c.row))
        slots = [
            TimeSlot(**cell.model_dump(), id=f"d{day_index}t{i}")
            for i, cell in enumerate(ordered)
        ]
        first = slots[0].timestamp
        days.append(
            DayGroup(
                day_index=day_index,
                weekday_name=weekday_name(first, tz),
                full_date_label=format_date(first, tz),
                slots=slots,
                blocks=build_blocks(slots, tz),
            )
        )

    log.debug(
        "grid_normalized",
        cells=len(cells),
        days=len(days),
        blocks=sum(len(d.blocks) for d in days),
    )
    return days


def summarize_availability(days: list[DayGroup]) -> list[str]:
    """One ``"{date}: {start} - {end}, ..."`` line per day, built from its blocks."""
    lines = []
    for day in days:
        blocks = ", ".join(f"{b.start_label} - {b.end_label}" for b in day.blocks)
        lines.append(f"{day.full_date_label}: {blocks}")
    return lines
