from src.when2meet.grid import normalize_grid
from src.when2meet.models import DayGroup, SlotLookup
from src.when2meet.prompt import compile_prompt
from tests.conftest import HOUR, MONDAY, cell


def test_lookup_resolves_every_rendered_slot(week_cells, utc):
    days = normalize_grid(week_cells, utc)

    _, lookup = compile_prompt(days, tz=utc)

    slots = [slot for day in days for slot in day.slots]
    assert len(lookup) == len(slots)
    for slot in slots:
        assert lookup.resolve(slot.id) == slot.timestamp


def test_menu_lists_days_and_slots(week_cells, utc):
    days = normalize_grid(week_cells, utc)

    menu, _ = compile_prompt(days, "Team sync", utc)

    assert "Please select your available time slots for: Team sync" in menu
    assert "Monday, Apr 14, 2025 (Monday):" in menu
    assert f"[d0t0] 07:00 AM ({MONDAY + 7 * HOUR})" in menu
    assert f"[d1t1] 11:45 PM ({week_cells[-1].timestamp})" in menu
    assert "morning{n}" in menu
    assert f"{MONDAY + 7 * HOUR}, {MONDAY + 7 * HOUR + 900}" in menu
    assert menu.rstrip().endswith("Enter your selections (using any of the formats above):")


def test_slots_are_resorted_before_numbering(week_cells, utc):
    day = normalize_grid(week_cells, utc)[0]
    shuffled = DayGroup(
        day_index=day.day_index,
        weekday_name=day.weekday_name,
        full_date_label=day.full_date_label,
        slots=list(reversed(day.slots)),
        blocks=day.blocks,
    )

    _, lookup = compile_prompt([shuffled], tz=utc)

    assert lookup.resolve("d0t0") == MONDAY + 7 * HOUR
    assert lookup.resolve("d0t3") == MONDAY + 14 * HOUR + 900


def test_codes_use_column_index(utc):
    days = normalize_grid([cell(MONDAY, 3)], utc)

    menu, lookup = compile_prompt(days, tz=utc)

    assert "[d3t0]" in menu
    assert lookup.resolve("d3t0") == MONDAY
    assert lookup.resolve("d0t0") is None


def test_empty_grid_renders(utc):
    menu, lookup = compile_prompt([], tz=utc)

    assert len(lookup) == 0
    assert "(no time slots found)" in menu


def test_lookup_is_case_insensitive():
    lookup = SlotLookup({"D1T2": 1800})

    assert lookup.resolve("d1t2") == 1800
    assert lookup.resolve("D1T2") == 1800
    assert "d1T2" in lookup
    assert lookup.model_dump() == {"d1t2": 1800}
