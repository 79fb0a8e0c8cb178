import asyncio

import pytest

from src.when2meet import tools
from src.when2meet.config import HelperConfig
from tests.conftest import HOUR, MONDAY


@pytest.fixture
def config():
    return HelperConfig(timezone="UTC", strict_grid=True)


@pytest.fixture
def cell_dicts(week_cells):
    return [c.model_dump() for c in week_cells]


def test_describe_grid(cell_dicts, config):
    result = tools.describe_grid(cell_dicts, config=config)

    assert result.ok
    assert result.message == "2 days, 6 time slots"
    assert [d["day_index"] for d in result.data["days"]] == [0, 1]
    assert result.data["formatted_availability"][0].startswith("Monday, Apr 14, 2025:")


def test_describe_grid_reports_invalid_cells(config):
    result = tools.describe_grid([{"day": 0}], config=config)

    assert not result.ok
    assert result.kind == "invalid_input"
    assert result.data is None


def test_describe_grid_reports_malformed_grid(config):
    cells = [{"timestamp": MONDAY + 60, "day": 0}]

    strict = tools.describe_grid(cells, config=config)
    lenient = tools.describe_grid(cells, strict=False, config=config)

    assert strict.kind == "invalid_grid"
    assert lenient.ok


def test_unknown_timezone(cell_dicts, config):
    result = tools.describe_grid(cell_dicts, timezone="Mars/Olympus", config=config)

    assert not result.ok
    assert result.kind == "invalid_input"
    assert "Mars/Olympus" in result.message


def test_prompt_parse_format_pipeline(cell_dicts, config):
    days = tools.describe_grid(cell_dicts, config=config).data["days"]

    compiled = tools.compile_prompt(days, "Standup", config=config)
    assert compiled.ok
    assert "[d0t0] 07:00 AM" in compiled.data["menu"]

    parsed = tools.parse_selection(
        "d1t0 morning0 d0t0", days, compiled.data["slot_lookup"], config=config
    )
    assert parsed.ok
    assert parsed.data["timestamps"] == [
        MONDAY + 24 * HOUR + 18 * HOUR,
        MONDAY + 7 * HOUR,
        MONDAY + 7 * HOUR + 900,
    ]
    assert parsed.message.startswith("Selected 3 time slots:")

    formatted = tools.format_selection(parsed.data["timestamps"], days, config=config)
    assert formatted.data["readable"] == parsed.data["readable"]
    assert formatted.data["readable"][0] == "Tuesday, Apr 15, 2025: Tuesday slot 0"


def test_parse_without_lookup_still_handles_shorthands(cell_dicts, config):
    days = tools.describe_grid(cell_dicts, config=config).data["days"]

    parsed = tools.parse_selection("d0t0 day1", days, None, config=config)

    assert parsed.ok
    assert len(parsed.data["timestamps"]) == 2


def test_parse_rejects_malformed_days(config):
    result = tools.parse_selection("day0", [{"day_index": "x"}], {}, config=config)

    assert not result.ok
    assert result.kind == "invalid_input"


def test_get_event_details_rejects_foreign_url(config):
    result = asyncio.run(tools.get_event_details("https://example.com/?1-abc", config=config))

    assert not result.ok
    assert result.kind == "invalid_input"


def test_mark_requires_timestamps(config):
    result = asyncio.run(
        tools.mark_availability("https://www.when2meet.com/?1-abc", "Ada", [], config=config)
    )

    assert not result.ok
    assert result.kind == "invalid_input"
    assert "timestamp" in result.message


def test_mark_requires_name(config):
    result = asyncio.run(
        tools.mark_availability("https://www.when2meet.com/?1-abc", "  ", [MONDAY], config=config)
    )

    assert result.kind == "invalid_input"


def test_help_text():
    result = tools.help_text()
    assert result.ok
    assert "mark-when2meet-availability" in result.message


def test_unexpected_errors_become_internal_failures():
    @tools.structured("boom")
    def explode():
        raise RuntimeError("kaput")

    result = explode()

    assert result.kind == "internal"
    assert "kaput" in result.message


def test_parse_selection_tool_accepts_millisecond_list(cell_dicts, config):
    days = tools.describe_grid(cell_dicts, config=config).data["days"]

    result = tools.parse_selection("1744549200000, 1744550100000", days, {}, config=config)

    assert result.ok
    assert result.data["timestamps"] == [1744549200000, 1744550100000]
    assert result.data["readable"] == ["Unknown date: 1744549200000, 1744550100000"]
