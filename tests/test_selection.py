import pytest

from src.when2meet.grid import normalize_grid
from src.when2meet.models import DayRef, PeriodRef, SlotRef
from src.when2meet.prompt import compile_prompt
from src.when2meet.selection import (
    dedupe,
    is_raw_list,
    parse_raw_list,
    parse_selection,
    parse_token,
    tokenize,
)
from tests.conftest import HOUR, MONDAY, QUARTER, cell


@pytest.fixture
def small(small_cells, utc):
    days = normalize_grid(small_cells, utc)
    _, lookup = compile_prompt(days, tz=utc)
    return days, lookup


@pytest.fixture
def week(week_cells, utc):
    days = normalize_grid(week_cells, utc)
    _, lookup = compile_prompt(days, tz=utc)
    return days, lookup


def test_repeated_code_selected_once(small, utc):
    result = parse_selection("d0t0 d0t0", *small, utc)
    assert result.timestamps == [1000]


def test_first_seen_order_not_sorted(small, utc):
    result = parse_selection("d1t0 d0t0", *small, utc)
    assert result.timestamps == [5000, 1000]


def test_day_code_selects_whole_day(small, utc):
    result = parse_selection("day0", *small, utc)
    assert result.timestamps == [1000, 1900, 2800]


def test_overlapping_codes_keep_first_position(small, utc):
    result = parse_selection("d0t2 day0 d1t1", *small, utc)
    assert result.timestamps == [2800, 1000, 1900, 8000]


def test_morning_filters_by_local_hour(week, utc):
    days, lookup = week

    result = parse_selection("morning0", days, lookup, utc)

    assert result.timestamps == [MONDAY + 7 * HOUR, MONDAY + 7 * HOUR + QUARTER]


def test_afternoon_and_evening(week, utc):
    days, lookup = week
    tuesday = MONDAY + 24 * HOUR

    assert parse_selection("afternoon0", days, lookup, utc).timestamps == [
        MONDAY + 14 * HOUR,
        MONDAY + 14 * HOUR + QUARTER,
    ]
    assert parse_selection("evening1", days, lookup, utc).timestamps == [
        tuesday + 18 * HOUR,
        tuesday + 23 * HOUR + 3 * QUARTER,
    ]
    assert parse_selection("evening0 morning1", days, lookup, utc).timestamps == []


def test_early_hours_fall_in_no_period(utc):
    days = normalize_grid([cell(MONDAY + 3 * HOUR, 0)], utc)
    _, lookup = compile_prompt(days, tz=utc)

    for period in ("morning0", "afternoon0", "evening0"):
        assert parse_selection(period, days, lookup, utc).timestamps == []
    assert parse_selection("day0", days, lookup, utc).timestamps == [MONDAY + 3 * HOUR]


def test_codes_are_case_insensitive(week, utc):
    days, lookup = week

    result = parse_selection("D0T0 DAY1 Morning0", days, lookup, utc)

    tuesday = [s.timestamp for s in days[1].slots]
    assert result.timestamps == [MONDAY + 7 * HOUR, *tuesday, MONDAY + 7 * HOUR + QUARTER]


def test_unknown_references_are_no_ops(small, utc):
    result = parse_selection("d9t9 day7 evening4 hello d0t7", *small, utc)

    assert result.timestamps == []
    assert result.readable == []
    assert result.raw_mode is False


def test_empty_input(small, utc):
    assert parse_selection("   ", *small, utc).timestamps == []


def test_day_reference_uses_column_not_position(utc):
    days = normalize_grid([cell(MONDAY, 0), cell(MONDAY + 48 * HOUR, 2)], utc)
    _, lookup = compile_prompt(days, tz=utc)

    assert parse_selection("day2", days, lookup, utc).timestamps == [MONDAY + 48 * HOUR]
    assert parse_selection("day1", days, lookup, utc).timestamps == []


def test_raw_list_mode(small, utc):
    result = parse_selection("100, 200", *small, utc)

    assert result.raw_mode is True
    assert result.timestamps == [100, 200]


def test_raw_list_never_falls_back_to_codes(small, utc):
    result = parse_selection("1000, 1900 day1, d1t0, 1000", *small, utc)

    assert result.timestamps == [1000, 1900]


def test_raw_list_skips_non_numeric_fields(small, utc):
    result = parse_selection(" 5000 ,8000, soon, ,2800", *small, utc)

    assert result.timestamps == [5000, 8000, 2800]


def test_single_number_is_not_raw_mode():
    assert not is_raw_list("1000")
    assert not is_raw_list("d0t0, 1000")
    assert is_raw_list("  1000 ,2000")


def test_parse_raw_list():
    assert parse_raw_list("1,2,x,3abc") == [1, 2, 3]


def test_parse_token_variants():
    assert parse_token("d2t11") == SlotRef(day=2, slot_index=11, code="d2t11")
    assert parse_token("Day3") == DayRef(day=3)
    assert parse_token("EVENING0") == PeriodRef(day=0, period="evening")
    assert parse_token("night0") is None
    assert parse_token("d0t") is None
    assert SlotRef(day=2, slot_index=11, code="D2T11").slot_id == "d2t11"


def test_tokenize_drops_unrecognized_words():
    tokens = tokenize("d0t1  banana\tday2\nafternoon1")
    assert [t.kind for t in tokens] == ["slot", "day", "period"]


def test_dedupe_keeps_first_occurrence():
    assert dedupe([3, 1, 3, 2, 1]) == [3, 1, 2]


def test_result_has_readable_lines(small, utc):
    result = parse_selection("d1t1 d0t0", *small, utc)
    assert result.readable == [
        "Thursday, Jan 1, 1970: slot-e, slot-a",
    ]


def test_millisecond_timestamps_still_give_a_result(small, utc):
    result = parse_selection("1744549200000, 1744550100000", *small, utc)

    assert result.raw_mode is True
    assert result.timestamps == [1744549200000, 1744550100000]
    assert result.readable == ["Unknown date: 1744549200000, 1744550100000"]


def test_slot_codes_with_leading_zeros_are_not_normalized(small, utc):
    assert parse_selection("d00t01 d0t01 d00t1", *small, utc).timestamps == []
    assert parse_selection("D0T1", *small, utc).timestamps == [1900]
    assert parse_token("D00T01").slot_id == "d00t01"
