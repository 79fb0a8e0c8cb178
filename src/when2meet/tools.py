"""Tool operations over plain (JSON-shaped) arguments.

Each operation validates its arguments into the grid models, runs the core,
and returns a ToolResult. Errors are reported as ``ToolResult(ok=False,
kind=..., message=...)`` and never raised to the caller.
"""

import functools
from typing import Any

from pydantic import TypeAdapter, ValidationError

from src.when2meet import formatter, grid, prompt, selection
from src.when2meet.config import HelperConfig, get_config
from src.when2meet.errors import When2MeetError
from src.when2meet.logging import bind_request, get_logger
from src.when2meet.models import DayGroup, RawCell, SlotLookup, ToolResult
from src.when2meet.pages import availability, event
from src.when2meet.timeutil import resolve_timezone

log = get_logger(__name__)

_CELLS = TypeAdapter(list[RawCell])
_DAYS = TypeAdapter(list[DayGroup])
_TIMESTAMPS = TypeAdapter(list[int])

HELP_TEXT = """When2Meet availability helper - available tools:

1. get-event-details
   - Reads an event page: name, date range, day groups and time blocks
   - Input: event_url

2. describe-grid
   - Groups raw grid cells into days and contiguous time blocks
   - Input: cells [{timestamp, day, row, label}]

3. generate-availability-prompt
   - Renders the selection menu and the slot code lookup
   - Input: days (from get-event-details or describe-grid), event_name

4. parse-availability-selections
   - Converts slot codes, day/period shorthands or raw timestamps to timestamps
   - Input: selections, days, slot_lookup

5. format-selection
   - Groups timestamps into readable per-date lines
   - Input: timestamps, days

6. mark-when2meet-availability
   - Signs in and marks the timestamps as available
   - Input: event_url, user_name, password (optional), timestamps

Example workflow: get-event-details -> generate-availability-prompt ->
parse-availability-selections -> mark-when2meet-availability"""


def _failure_from(operation: str, exc: Exception) -> ToolResult:
    if isinstance(exc, When2MeetError):
        log.warning("tool_failed", operation=operation, kind=exc.kind, error=str(exc))
        return ToolResult.failure(exc.kind, str(exc))
    if isinstance(exc, ValidationError):
        log.warning("tool_failed", operation=operation, kind="invalid_input", error=str(exc))
        return ToolResult.failure("invalid_input", f"Invalid arguments: {exc}")
    log.exception("tool_crashed", operation=operation)
    return ToolResult.failure("internal", f"{type(exc).__name__}: {exc}")


def structured(operation: str):
    """Turn exceptions raised by a sync tool into failure results."""

    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> ToolResult:
            bind_request(operation)
            try:
                return func(*args, **kwargs)
            except Exception as e:
                return _failure_from(operation, e)

        return wrapper

    return decorator


def structured_async(operation: str):
    """Async counterpart of structured()."""

    def decorator(func):
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> ToolResult:
            bind_request(operation)
            try:
                return await func(*args, **kwargs)
            except Exception as e:
                return _failure_from(operation, e)

        return wrapper

    return decorator


def _tz(timezone: str | None, config: HelperConfig | None):
    if timezone is None:
        timezone = (config or get_config()).timezone
    return resolve_timezone(timezone)


def _dump_days(days: list[DayGroup]) -> list[dict]:
    return [day.model_dump(mode="json") for day in days]


@structured("describe-grid")
def describe_grid(
    cells: list[dict],
    timezone: str | None = None,
    strict: bool | None = None,
    config: HelperConfig | None = None,
) -> ToolResult:
    config = config or get_config()
    raw_cells = _CELLS.validate_python(cells)
    if strict is None:
        strict = config.strict_grid

    days = grid.normalize_grid(raw_cells, _tz(timezone, config), strict=strict)
    return ToolResult.success(
        f"{len(days)} days, {len(raw_cells)} time slots",
        days=_dump_days(days),
        formatted_availability=grid.summarize_availability(days),
    )


@structured("generate-availability-prompt")
def compile_prompt(
    days: list[dict],
    event_name: str | None = None,
    timezone: str | None = None,
    config: HelperConfig | None = None,
) -> ToolResult:
    day_groups = _DAYS.validate_python(days)
    menu, lookup = prompt.compile_prompt(day_groups, event_name, _tz(timezone, config))
    return ToolResult.success(menu, menu=menu, slot_lookup=lookup.model_dump())


@structured("parse-availability-selections")
def parse_selection(
    selections: str,
    days: list[dict],
    slot_lookup: dict[str, int] | None = None,
    timezone: str | None = None,
    config: HelperConfig | None = None,
) -> ToolResult:
    day_groups = _DAYS.validate_python(days)
    lookup = SlotLookup(slot_lookup or {})
    result = selection.parse_selection(
        selections, day_groups, lookup, _tz(timezone, config)
    )
    summary = "\n".join(result.readable)
    return ToolResult.success(
        f"Selected {len(result.timestamps)} time slots:\n{summary}",
        **result.model_dump(),
    )


@structured("format-selection")
def format_selection(
    timestamps: list[int],
    days: list[dict],
    timezone: str | None = None,
    config: HelperConfig | None = None,
) -> ToolResult:
    day_groups = _DAYS.validate_python(days)
    readable = formatter.format_selection(
        _TIMESTAMPS.validate_python(timestamps), day_groups, _tz(timezone, config)
    )
    return ToolResult.success("\n".join(readable), readable=readable)


@structured_async("get-event-details")
async def get_event_details(
    event_url: str, config: HelperConfig | None = None
) -> ToolResult:
    config = config or get_config()
    details = await event.fetch_event(event_url, config)
    return ToolResult.success(
        f"Event: {details.name}\nDates: {details.date_range}",
        **details.model_dump(mode="json"),
    )


@structured_async("mark-when2meet-availability")
async def mark_availability(
    event_url: str,
    user_name: str,
    timestamps: list[int],
    password: str | None = None,
    config: HelperConfig | None = None,
) -> ToolResult:
    config = config or get_config()
    result = await availability.mark_availability(
        event_url, user_name, password, timestamps, config
    )
    message = f"Marked {result.marked_count} time slots as available."
    if result.failures:
        message += f" Failed to mark {len(result.failures)} time slots."
    return ToolResult.success(message, **result.model_dump(mode="json"))


def help_text() -> ToolResult:
    return ToolResult.success(HELP_TEXT)
