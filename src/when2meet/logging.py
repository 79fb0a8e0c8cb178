"""Structured logging configuration using structlog.

Provides JSON output for production and human-readable console output for development.
Every event carries the service name so MCP host logs can be filtered. Output
goes to stderr: stdout belongs to the MCP stdio transport and to CLI output.
"""

import logging
import sys

import structlog

SERVICE_NAME = "when2meet-availability-helper"

# Chatty third-party loggers kept at WARNING unless DEBUG is requested
_QUIET_LOGGERS = ("mcp", "asyncio", "httpx")


def add_service(
    logger: object, method_name: str, event_dict: structlog.typing.EventDict
) -> structlog.typing.EventDict:
    """structlog processor that tags every event with the service name."""
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def setup_logging(json_output: bool = False, log_level: str = "INFO") -> None:
    """Configure structlog with appropriate processors and output format.

    Args:
        json_output: If True, output JSON (production). If False, console format (dev).
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    processors = [
        structlog.contextvars.merge_contextvars,
        add_service,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]

    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

    # Bridge stdlib logging (playwright, mcp) to the same stream
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=numeric_level,
    )
    logging.getLogger().handlers = []
    logging.getLogger().addHandler(logging.StreamHandler(sys.stderr))
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))


def bind_request(tool: str, **context: object) -> None:
    """Bind tool-call context (tool name, event URL...) for the current task."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(tool=tool, **context)


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a logger instance bound with the module name.

    Args:
        name: Logger name (typically __name__ from calling module).

    Returns:
        Configured structlog logger with module name context.
    """
    return structlog.get_logger(name)
