"""EventPage - reads the group availability grid of a When2Meet event.

DOM structure:
  title -> "<event name> - When2Meet"
  div#GroupGridSlots
    div[id^="GroupTime"] per 15-minute cell
      data-time   UTC seconds
      data-col    day column (0 = first day)
      data-row    row within the column
      onmouseover ShowSlot(<time>,"Monday 09:00:00 AM")

Nothing is submitted from this page; fetch_event() runs it with mutating
requests blocked.
"""

import re
from datetime import tzinfo

from playwright.async_api import Page, TimeoutError as PlaywrightTimeoutError
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_fixed

from src.when2meet.browser import open_page
from src.when2meet.config import HelperConfig
from src.when2meet.errors import TransientError
from src.when2meet.grid import normalize_grid, summarize_availability
from src.when2meet.logging import get_logger
from src.when2meet.models import EventDetails, RawCell
from src.when2meet.timeutil import resolve_timezone
from src.when2meet.utils import validate_event_url

log = get_logger(__name__)

_SHOW_SLOT = re.compile(r'ShowSlot\(\d+,"([^"]+)"\)')
_TITLE_SUFFIX = re.compile(r"\s*-\s*When2Meet\s*$")

# Returns one attribute record per grid cell in a single round trip
_READ_CELLS_JS = """(els) => els.map(el => ({
    time: el.getAttribute('data-time'),
    col: el.getAttribute('data-col'),
    row: el.getAttribute('data-row'),
    mouseover: el.getAttribute('onmouseover') || '',
}))"""

_READ_DATE_RANGE_JS = """(selectors) => {
    for (const sel of selectors) {
        const el = document.querySelector(sel);
        if (el && el.textContent && el.textContent.trim()) {
            return el.textContent.trim();
        }
    }
    return null;
}"""


class EventPage:
    """Group grid view of one When2Meet event."""

    GROUP_GRID = "#GroupGridSlots"
    GROUP_CELLS = '#GroupGridSlots [id^="GroupTime"]'
    DATE_SELECTORS = [".dateHeader", ".timeHeader", "#newTimeSlotsSection h2", "h1"]

    def __init__(self, page: Page) -> None:
        self.page = page

    @retry(
        stop=stop_after_attempt(2),
        wait=wait_fixed(2),
        retry=retry_if_exception_type(TransientError),
        reraise=True,
    )
    async def navigate(self, url: str) -> None:
        """Open the event and wait for the group grid.

        Raises:
            TransientError: If the page or grid fails to load within timeout.
        """
        try:
            await self.page.goto(url, wait_until="networkidle")
            await self.page.locator(self.GROUP_GRID).wait_for(state="attached")
        except PlaywrightTimeoutError as e:
            raise TransientError(f"Event page failed to load: {url}") from e

        log.info("event_page_navigated", url=url)

    async def extract_name(self) -> str:
        title = await self.page.title()
        return _TITLE_SUFFIX.sub("", title or "").strip()

    async def extract_date_range(self) -> str:
        """Text of the first populated date header, else the event name."""
        text = await self.page.evaluate(_READ_DATE_RANGE_JS, self.DATE_SELECTORS)
        if text:
            return text
        return await self.extract_name() or "Date information not found"

    async def extract_cells(self) -> list[RawCell]:
        """Read every group grid cell; cells with unreadable attributes are skipped."""
        records = await self.page.eval_on_selector_all(self.GROUP_CELLS, _READ_CELLS_JS)
        cells = [cell for cell in (parse_cell(r) for r in records) if cell is not None]

        skipped = len(records) - len(cells)
        if skipped:
            log.warning("grid_cells_skipped", skipped=skipped, total=len(records))
        log.info("grid_cells_extracted", cells=len(cells))
        return cells


def parse_cell(record: dict) -> RawCell | None:
    """Build a RawCell from a DOM attribute record."""
    try:
        timestamp = int(record.get("time") or "")
        day = int(record.get("col") or "")
    except ValueError:
        return None
    try:
        row = int(record.get("row") or 0)
    except ValueError:
        row = 0
    return RawCell(
        timestamp=timestamp,
        day=day,
        row=row,
        label=parse_slot_label(record.get("mouseover") or ""),
    )


def parse_slot_label(mouseover: str) -> str:
    """Extract the label from an ``onmouseover="ShowSlot(123,"label")"`` handler."""
    match = _SHOW_SLOT.search(mouseover)
    return match.group(1) if match else ""


async def fetch_event(
    url: str, config: HelperConfig, tz: tzinfo | None = None
) -> EventDetails:
    """Visit an event page and return its name, date range and grid model.

    Args:
        url: Event URL, validated against ``config.when2meet_host``.
        config: Helper configuration.
        tz: Zone for labels; defaults to ``config.timezone``.

    Raises:
        InvalidSourceError: If the URL is not a When2Meet event URL.
        GridValidationError: If ``config.strict_grid`` and the grid is malformed.
        TransientError: If the page fails to load.
    """
    validate_event_url(url, config.when2meet_host)
    if tz is None:
        tz = resolve_timezone(config.timezone)

    async with open_page(config, read_only=True) as page:
        event_page = EventPage(page)
        await event_page.navigate(url)
        name = await event_page.extract_name()
        date_range = await event_page.extract_date_range()
        cells = await event_page.extract_cells()

    days = normalize_grid(cells, tz, strict=config.strict_grid)
    log.info("event_fetched", name=name, days=len(days), cells=len(cells))
    return EventDetails(
        name=name,
        date_range=date_range,
        url=url,
        cells=cells,
        days=days,
        formatted_availability=summarize_availability(days),
    )
