"""Selection mini-language parser.

Accepted input, one of two modes:

* Raw timestamp list: the input starts with two comma-separated integers
  (``"1744549200, 1744550100"``). Every comma field that starts with an
  integer is taken, everything else is skipped.
* Codes: whitespace-separated words, each matched in this order:
    ``d<day>t<index>``            one slot, via the slot lookup
    ``day<day>``                  every slot of the day
    ``morning|afternoon|evening<day>``  the day's slots in that period

Unknown words, unknown slot codes and days missing from the grid contribute
nothing. The output keeps the first occurrence of every timestamp.
"""

import re
from datetime import tzinfo

from src.when2meet.formatter import format_selection
from src.when2meet.logging import get_logger
from src.when2meet.models import (
    DayGroup,
    DayRef,
    PeriodRef,
    SelectionResult,
    SelectionToken,
    SlotLookup,
    SlotRef,
)
from src.when2meet.timeutil import in_period

log = get_logger(__name__)

_RAW_LIST = re.compile(r"^\s*\d+\s*,\s*\d+")
_LEADING_INT = re.compile(r"^[+-]?\d+")

_SLOT_CODE = re.compile(r"^d(\d+)t(\d+)$", re.IGNORECASE)
_DAY_CODE = re.compile(r"^day(\d+)$", re.IGNORECASE)
_PERIOD_CODE = re.compile(r"^(morning|afternoon|evening)(\d+)$", re.IGNORECASE)


def is_raw_list(text: str) -> bool:
    return _RAW_LIST.match(text) is not None


def parse_raw_list(text: str) -> list[int]:
    """Integers from a comma-separated list, skipping non-numeric fields."""
    values = []
    for field in text.split(","):
        match = _LEADING_INT.match(field.strip())
        if match:
            values.append(int(match.group(0)))
    return values


def parse_token(word: str) -> SelectionToken | None:
    """Classify one input word, or None when no grammar matches."""
    match = _SLOT_CODE.match(word)
    if match:
        return SlotRef(
            day=int(match.group(1)), slot_index=int(match.group(2)), code=word
        )

    match = _DAY_CODE.match(word)
    if match:
        return DayRef(day=int(match.group(1)))

    match = _PERIOD_CODE.match(word)
    if match:
        return PeriodRef(period=match.group(1).lower(), day=int(match.group(2)))
    return None


def tokenize(text: str) -> list[SelectionToken]:
    tokens = []
    for word in text.split():
        token = parse_token(word)
        if token is None:
            log.debug("selection_token_ignored", word=word)
            continue
        tokens.append(token)
    return tokens


def resolve_token(
    token: SelectionToken,
    days_by_index: dict[int, DayGroup],
    lookup: SlotLookup,
    tz: tzinfo | None = None,
) -> list[int]:
    """Timestamps one token selects, in the day's slot order."""
    if isinstance(token, SlotRef):
        timestamp = lookup.resolve(token.slot_id)
        return [] if timestamp is None else [timestamp]

    day = days_by_index.get(token.day)
    if day is None:
        return []
    if isinstance(token, DayRef):
        return [slot.timestamp for slot in day.slots]
    return [
        slot.timestamp
        for slot in day.slots
        if in_period(slot.timestamp, token.period, tz)
    ]


def dedupe(timestamps: list[int]) -> list[int]:
    """Drop repeated timestamps, keeping first-occurrence order."""
    return list(dict.fromkeys(timestamps))


def parse_selection(
    text: str,
    days: list[DayGroup],
    lookup: SlotLookup,
    tz: tzinfo | None = None,
) -> SelectionResult:
    """Resolve free-form selection text to unique timestamps.

    Args:
        text: User input in either raw-list or code mode.
        days: Day groups the lookup was compiled from.
        lookup: Slot code lookup from compile_prompt().
        tz: Zone used for period boundaries and readable output.

    Returns:
        SelectionResult; an empty selection is a valid result.
    """
    selected: list[int] = []
    raw_mode = is_raw_list(text)

    if raw_mode:
        selected = parse_raw_list(text)
    else:
        days_by_index = {day.day_index: day for day in days}
        for token in tokenize(text):
            selected.extend(resolve_token(token, days_by_index, lookup, tz))

    timestamps = dedupe(selected)
    log.info(
        "selection_parsed",
        mode="raw" if raw_mode else "codes",
        selected=len(selected),
        unique=len(timestamps),
    )
    return SelectionResult(
        timestamps=timestamps,
        readable=format_selection(timestamps, days, tz),
        raw_mode=raw_mode,
    )
