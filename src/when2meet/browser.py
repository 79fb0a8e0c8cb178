"""Chromium lifecycle for one event page visit."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from playwright.async_api import Page, async_playwright

from src.when2meet.config import HelperConfig
from src.when2meet.logging import get_logger
from src.when2meet.utils import configure_page

log = get_logger(__name__)

_LAUNCH_ARGS = ["--no-sandbox", "--disable-setuid-sandbox"]


@asynccontextmanager
async def open_page(
    config: HelperConfig, *, read_only: bool, headless: bool | None = None
) -> AsyncIterator[Page]:
    """Launch Chromium, yield a configured page and always close the browser.

    Every call gets a fresh context: nothing (cookies, sign-in) is kept
    between visits.
    """
    if headless is None:
        headless = config.headless

    async with async_playwright() as pw:
        browser = await pw.chromium.launch(headless=headless, args=_LAUNCH_ARGS)
        log.debug("browser_launched", headless=headless, read_only=read_only)
        try:
            context = await browser.new_context()
            page = await context.new_page()
            await configure_page(
                page, read_only=read_only, timeout_ms=config.navigation_timeout_ms
            )
            yield page
        finally:
            await browser.close()
            log.debug("browser_closed")
