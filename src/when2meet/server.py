"""MCP server exposing the availability tools.

Run with: python -m src.when2meet.server
HTTP:     MCP_TRANSPORT=streamable-http python -m src.when2meet.server
"""

from typing import Any

from mcp.server.fastmcp import FastMCP

from src.when2meet import tools
from src.when2meet.config import HelperConfig, get_config
from src.when2meet.logging import get_logger, setup_logging

log = get_logger(__name__)

SERVER_NAME = "when2meet-availability-helper"


def create_server(config: HelperConfig | None = None) -> FastMCP:
    """Build a FastMCP server with every tool bound to ``config``."""
    config = config or get_config()
    mcp = FastMCP(SERVER_NAME, host=config.mcp_host, port=config.mcp_port)

    @mcp.tool(name="get-event-details")
    async def get_event_details(event_url: str) -> dict[str, Any]:
        """Read an event's name, date range, days and time blocks from its URL."""
        result = await tools.get_event_details(event_url, config=config)
        return result.model_dump()

    @mcp.tool(name="describe-grid")
    def describe_grid(cells: list[dict[str, Any]]) -> dict[str, Any]:
        """Group raw grid cells into days and contiguous time blocks."""
        return tools.describe_grid(cells, config=config).model_dump()

    @mcp.tool(name="generate-availability-prompt")
    def generate_availability_prompt(
        days: list[dict[str, Any]], event_name: str | None = None
    ) -> dict[str, Any]:
        """Render the slot selection menu and its slot code lookup."""
        return tools.compile_prompt(days, event_name, config=config).model_dump()

    @mcp.tool(name="parse-availability-selections")
    def parse_availability_selections(
        selections: str,
        days: list[dict[str, Any]],
        slot_lookup: dict[str, int] | None = None,
    ) -> dict[str, Any]:
        """Convert slot codes, shorthands or raw timestamps into timestamps."""
        return tools.parse_selection(
            selections, days, slot_lookup, config=config
        ).model_dump()

    @mcp.tool(name="format-selection")
    def format_selection(
        timestamps: list[int], days: list[dict[str, Any]]
    ) -> dict[str, Any]:
        """Group timestamps into readable per-date lines."""
        return tools.format_selection(timestamps, days, config=config).model_dump()

    @mcp.tool(name="mark-when2meet-availability")
    async def mark_when2meet_availability(
        event_url: str,
        user_name: str,
        timestamps: list[int],
        password: str | None = None,
    ) -> dict[str, Any]:
        """Sign in to the event and mark the timestamps as available."""
        result = await tools.mark_availability(
            event_url, user_name, timestamps, password, config=config
        )
        return result.model_dump()

    @mcp.tool(name="help")
    def help_tool() -> dict[str, Any]:
        """Describe the available tools and the usual workflow."""
        return tools.help_text().model_dump()

    return mcp


def main() -> None:
    config = get_config()
    setup_logging(json_output=config.log_json, log_level=config.log_level)
    server = create_server(config)
    log.info("mcp_server_starting", transport=config.mcp_transport)
    server.run(transport=config.mcp_transport)


if __name__ == "__main__":
    main()
