"""Helper configuration loaded from environment variables."""

from pydantic import Field
from pydantic_settings import BaseSettings


class HelperConfig(BaseSettings):
    """Availability helper configuration loaded from environment variables.

    Settings are loaded from environment variables with sensible defaults.
    For local development, create a .env file in the project root.
    """

    # When2Meet settings (no API exists, the grid is read from the page)
    when2meet_host: str = Field(
        default="when2meet.com",
        description="Host every event URL must belong to",
    )
    headless: bool = Field(
        default=True,
        description="Run Chromium without a visible window",
    )
    navigation_timeout_ms: int = Field(
        default=60000,
        description="Timeout for page navigation and selector waits",
    )

    # Submission pacing (the event page updates its model on mouse events)
    keystroke_delay_ms: int = Field(
        default=100,
        description="Delay between keystrokes when typing the sign-in name",
    )
    mark_press_delay_ms: int = Field(
        default=100,
        description="Delay between mousedown and mouseup on one slot",
    )
    mark_interval_ms: int = Field(
        default=150,
        description="Delay between two consecutive slot marks",
    )
    final_settle_ms: int = Field(
        default=5000,
        description="Wait after the last mark before the result is read back",
    )

    # Grid model
    timezone: str | None = Field(
        default=None,
        description="IANA zone used for dates and periods (unset: host local zone)",
    )
    strict_grid: bool = Field(
        default=True,
        description="Reject grids with off-raster or duplicate timestamps",
    )

    # Logging
    log_json: bool = Field(
        default=False,
        description="Output logs in JSON format (for production)",
    )
    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    # MCP server
    mcp_transport: str = Field(
        default="stdio",
        description="MCP transport: stdio or streamable-http",
    )
    mcp_host: str = Field(default="127.0.0.1", description="HTTP bind host")
    mcp_port: int = Field(default=3000, description="HTTP bind port")

    model_config = {
        "env_prefix": "",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


# Singleton pattern
_config: HelperConfig | None = None


def get_config() -> HelperConfig:
    """Get the helper configuration singleton.

    Returns:
        HelperConfig: Helper configuration instance
    """
    global _config
    if _config is None:
        _config = HelperConfig()
    return _config
