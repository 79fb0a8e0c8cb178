"""Error hierarchy for grid extraction, submission and tool reporting.

Transient failures (should retry) are kept apart from permanent failures
(should not retry) so tenacity decorators can classify them automatically.

Example usage with tenacity:
    @retry(retry=retry_if_exception_type(TransientError), stop=stop_after_attempt(3))
    async def sign_in(page, name):
        ...
"""


class When2MeetError(Exception):
    """Base exception for all availability helper errors."""

    kind = "source_error"


class TransientError(When2MeetError):
    """Temporary failure that may succeed on retry.

    Examples: navigation timeouts, grid not rendered yet, dropped connections.
    """

    kind = "transient"


class PermanentError(When2MeetError):
    """Failure that won't succeed on retry."""

    pass


class InvalidSourceError(PermanentError):
    """Caller input was rejected before any work was done.

    Examples: malformed event URL, URL on another host, missing user name,
    empty timestamp list, unknown time zone name.
    """

    kind = "invalid_input"


class GridValidationError(PermanentError):
    """Raw grid cells violate the grid model invariants.

    Raised for timestamps that are not on the 15-minute raster or that
    appear more than once across the grid.
    """

    kind = "invalid_grid"


class AuthenticationError(PermanentError):
    """Sign-in on the event page did not reach the personal grid."""

    kind = "authentication"
