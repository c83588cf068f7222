"""
wikisearch - Structured Logging

Every event carries the service name; events emitted while a query is being
evaluated also carry the query label and operator, bound through structlog
contextvars by ``query_context()``. That way gateway lookups, chain folds
and failures can be grouped per query without threading the label through
every call.

Output goes to stderr. The CLI prints results on stdout, and the two must
not interleave.

Patterns Applied:
- One-time configure_logging() at startup, reset_logging() for tests
- structlog contextvars for per-query fields
"""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import structlog
from structlog.typing import EventDict

SERVICE_NAME = "wikisearch"

_configured: bool = False


def add_service_info(
    logger: logging.Logger,  # noqa: ARG001
    method_name: str,  # noqa: ARG001
    event_dict: EventDict,
) -> EventDict:
    """structlog processor stamping the service name on each event."""
    event_dict["service"] = SERVICE_NAME
    return event_dict


def configure_logging(
    log_level: str = "INFO",
    json_output: bool = True,
) -> None:
    """Configure structlog for the API process or a CLI run.

    Calls after the first are ignored until reset_logging().

    Args:
        log_level: Level name; unknown names fall back to INFO
        json_output: JSON lines when True, the console renderer otherwise
    """
    global _configured

    if _configured:
        return

    level = getattr(logging, log_level.upper(), logging.INFO)
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level)

    renderer: Any = (
        structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            add_service_info,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

    _configured = True


def get_logger(name: str) -> Any:
    """Return a structlog logger named after the calling module."""
    return structlog.get_logger(name)


@contextmanager
def query_context(query: str, operator: str | None = None) -> Iterator[None]:
    """Bind ``query`` and ``operator`` to every event logged inside the block.

    The previous bindings are restored on exit, so nested or concurrent
    queries in other contexts are unaffected.
    """
    tokens = structlog.contextvars.bind_contextvars(query=query, operator=operator)
    try:
        yield
    finally:
        structlog.contextvars.reset_contextvars(**tokens)


def reset_logging() -> None:
    """Forget the configuration so tests can configure again."""
    global _configured
    _configured = False
    structlog.contextvars.clear_contextvars()
    structlog.reset_defaults()
