from datetime import timezone

import pytest

from src.when2meet.models import RawCell

# Monday 2025-04-14 00:00 UTC
MONDAY = 1744588800
HOUR = 3600
QUARTER = 900


def cell(timestamp: int, day: int, row: int = 0, label: str = "") -> RawCell:
    return RawCell(timestamp=timestamp, day=day, row=row, label=label)


@pytest.fixture
def utc():
    return timezone.utc


@pytest.fixture
def small_cells() -> list[RawCell]:
    """Day 0 contiguous at 1000/1900/2800, day 1 split at 5000/8000."""
    return [
        cell(1000, 0, 0, "slot-a"),
        cell(1900, 0, 1, "slot-b"),
        cell(2800, 0, 2, "slot-c"),
        cell(5000, 1, 0, "slot-d"),
        cell(8000, 1, 1, "slot-e"),
    ]


@pytest.fixture
def week_cells() -> list[RawCell]:
    """Monday 07:00-07:30 and 14:00-14:15, Tuesday 18:00 and 23:45 (UTC)."""
    monday = [MONDAY + 7 * HOUR, MONDAY + 7 * HOUR + QUARTER, MONDAY + 14 * HOUR, MONDAY + 14 * HOUR + QUARTER]
    tuesday = [MONDAY + 24 * HOUR + 18 * HOUR, MONDAY + 24 * HOUR + 23 * HOUR + 3 * QUARTER]
    cells = [cell(ts, 0, i, f"Monday slot {i}") for i, ts in enumerate(monday)]
    cells += [cell(ts, 1, i, f"Tuesday slot {i}") for i, ts in enumerate(tuesday)]
    return cells
