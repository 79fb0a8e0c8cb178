"""AvailabilityPage - signs in to an event and marks the user's own grid.

DOM structure:
  input#name, input#password, input[value="Sign In"]   sign-in form
  div#YouGridSlots
    div#YouTime<timestamp> per 15-minute cell

The page toggles a cell on mousedown and commits the drag on mouseup, and it
saves asynchronously. Marks are therefore sent one at a time with a short
press delay, a pause between cells, and one final settle delay.
"""

import asyncio

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page, TimeoutError as PlaywrightTimeoutError
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_fixed

from src.when2meet.browser import open_page
from src.when2meet.config import HelperConfig
from src.when2meet.errors import AuthenticationError, InvalidSourceError, TransientError
from src.when2meet.logging import get_logger
from src.when2meet.models import MarkFailure, MarkResult
from src.when2meet.utils import validate_event_url

log = get_logger(__name__)

AVAILABLE_COLOR = "rgb(222, 255, 222)"

_MOUSE_EVENT_INIT = {"bubbles": True, "cancelable": True}

_FIRE_INPUT_EVENTS_JS = """(el) => {
    el.dispatchEvent(new Event('input', { bubbles: true }));
    el.dispatchEvent(new Event('change', { bubbles: true }));
}"""


class AvailabilityPage:
    """Personal availability grid of one When2Meet event."""

    NAME_INPUT = "#name"
    PASSWORD_INPUT = "#password"
    SIGN_IN_BUTTON = 'input[value="Sign In"]'
    YOU_GRID = "#YouGridSlots"

    def __init__(self, page: Page, config: HelperConfig) -> None:
        self.page = page
        self.config = config

    async def open(self, url: str) -> None:
        try:
            await self.page.goto(url, wait_until="networkidle")
        except PlaywrightTimeoutError as e:
            raise TransientError(f"Event page failed to load: {url}") from e
        log.info("availability_page_navigated", url=url)

    @retry(
        stop=stop_after_attempt(2),
        wait=wait_fixed(5),
        retry=retry_if_exception_type(TransientError),
        reraise=True,
    )
    async def sign_in(self, name: str, password: str | None = None) -> None:
        """Sign in to the event with a name and optional password.

        Retries on TransientError but fails fast on AuthenticationError.

        Raises:
            AuthenticationError: If the personal grid never appears after sign-in.
            TransientError: If the sign-in form does not load.
        """
        delay = self.config.keystroke_delay_ms
        log.info("sign_in_started", name=name, with_password=bool(password))

        try:
            name_input = self.page.locator(self.NAME_INPUT)
            await name_input.wait_for(state="visible")
            await name_input.fill("")
            await name_input.press_sequentially(name, delay=delay)

            if password:
                password_input = self.page.locator(self.PASSWORD_INPUT)
                await password_input.wait_for(state="visible")
                await password_input.press_sequentially(password, delay=delay)

            # The form reads the name on input/change, not on keystrokes
            await name_input.evaluate(_FIRE_INPUT_EVENTS_JS)
            await self.page.locator(self.SIGN_IN_BUTTON).click()
        except PlaywrightTimeoutError as e:
            log.warning("sign_in_timeout", error=str(e))
            raise TransientError(f"Sign-in form did not load: {e}") from e

        try:
            await self.page.locator(self.YOU_GRID).wait_for(state="visible")
        except PlaywrightTimeoutError as e:
            log.error("sign_in_failed", reason="grid_not_shown")
            raise AuthenticationError(
                "Sign-in did not open the availability grid - check name and password"
            ) from e

        log.info("sign_in_succeeded", name=name)

    async def mark(self, timestamps: list[int]) -> MarkResult:
        """Mark each timestamp as available, in order.

        A missing cell or a failed interaction is recorded for that timestamp
        and does not stop the remaining marks.
        """
        press = self.config.mark_press_delay_ms / 1000
        interval = self.config.mark_interval_ms / 1000
        result = MarkResult()

        for i, timestamp in enumerate(timestamps):
            cell = self.page.locator(f"#YouTime{timestamp}")
            if await cell.count() == 0:
                log.warning("slot_mark_failed", timestamp=timestamp, kind="target_not_found")
                result.failures.append(
                    MarkFailure(
                        timestamp=timestamp,
                        kind="target_not_found",
                        message="Element not found",
                    )
                )
                continue

            try:
                await cell.evaluate(
                    "(el, color) => { el.style.background = color; }", AVAILABLE_COLOR
                )
                await cell.dispatch_event("mousedown", _MOUSE_EVENT_INIT)
                await asyncio.sleep(press)
                await cell.dispatch_event("mouseup", _MOUSE_EVENT_INIT)
                result.marked_count += 1
            except PlaywrightError as e:
                log.warning(
                    "slot_mark_failed",
                    timestamp=timestamp,
                    kind="interaction_failed",
                    error=str(e),
                )
                result.failures.append(
                    MarkFailure(
                        timestamp=timestamp,
                        kind="interaction_failed",
                        message=str(e) or "Unknown error",
                    )
                )

            if i < len(timestamps) - 1:
                await asyncio.sleep(interval)

        log.info(
            "slots_marked",
            marked=result.marked_count,
            failed=len(result.failures),
        )
        await asyncio.sleep(self.config.final_settle_ms / 1000)
        result.result_url = self.page.url
        return result


async def mark_availability(
    url: str,
    name: str,
    password: str | None,
    timestamps: list[int],
    config: HelperConfig,
) -> MarkResult:
    """Sign in to an event and mark ``timestamps`` as available.

    Raises:
        InvalidSourceError: Bad URL, empty name, or no timestamps.
        AuthenticationError: Sign-in rejected.
        TransientError: Page failed to load.
    """
    validate_event_url(url, config.when2meet_host)
    if not name or not name.strip():
        raise InvalidSourceError("Username is required")
    if not timestamps:
        raise InvalidSourceError("At least one timestamp is required")

    async with open_page(config, read_only=False) as page:
        availability_page = AvailabilityPage(page, config)
        await availability_page.open(url)
        await availability_page.sign_in(name.strip(), password)
        return await availability_page.mark(timestamps)
