"""Shared browser utilities: URL validation, resource blocking, read-only guardrails."""

from urllib.parse import urlparse

from playwright.async_api import Page, Route
from pydantic import HttpUrl, TypeAdapter, ValidationError

from src.when2meet.errors import InvalidSourceError
from src.when2meet.logging import get_logger

log = get_logger(__name__)

BLOCKED_RESOURCE_TYPES: frozenset[str] = frozenset(
    {"image", "stylesheet", "font", "media"}
)

# HTTP methods that modify server state, blocked in read-only mode
_BLOCKED_METHODS: frozenset[str] = frozenset({"POST", "PUT", "DELETE", "PATCH"})

_URL_ADAPTER = TypeAdapter(HttpUrl)


def validate_event_url(url: str, host: str = "when2meet.com") -> str:
    """Check that ``url`` is an http(s) URL on ``host`` or one of its subdomains.

    Raises:
        InvalidSourceError: If the URL is malformed or points elsewhere.
    """
    try:
        _URL_ADAPTER.validate_python(url)
    except ValidationError as e:
        raise InvalidSourceError(f"Please provide a valid When2Meet URL: {url!r}") from e

    netloc = (urlparse(url).hostname or "").lower()
    if netloc != host and not netloc.endswith(f".{host}"):
        raise InvalidSourceError(f"The provided URL is not a When2Meet URL: {url!r}")
    return url


async def configure_page(
    page: Page, *, read_only: bool = False, timeout_ms: int = 60000
) -> None:
    """Set up a Playwright page for grid extraction or submission.

    Blocks images, stylesheets, fonts and media; the grid is plain DOM with
    inline styles and scripts, so none of them are needed.

    Args:
        page: Playwright Page instance.
        read_only: If True, also block POST/PUT/DELETE/PATCH requests
                   so reading a grid never saves availability by accident.
        timeout_ms: Default action and navigation timeout.
    """

    async def _block_resources(route: Route) -> None:
        request = route.request

        if read_only and request.method in _BLOCKED_METHODS:
            log.warning(
                "blocked_mutating_request",
                method=request.method,
                url=request.url,
            )
            await route.abort("blockedbyclient")
            return

        if request.resource_type in BLOCKED_RESOURCE_TYPES:
            await route.abort()
        else:
            await route.continue_()

    await page.route("**/*", _block_resources)
    page.set_default_timeout(timeout_ms)
    page.set_default_navigation_timeout(timeout_ms)
