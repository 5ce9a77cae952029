"""Structured logging for the portal scraper (structlog).

JSON lines in production, coloured console output while debugging. Output
goes to stderr so the CLI keeps stdout for the scrape payload. Modules log
through ``get_logger(__name__)`` with snake_case events and keyword context.
"""

import logging
import sys

import structlog
from structlog.typing import EventDict, Processor

# Keys that must never reach a log line, whatever a caller binds
REDACTED_KEYS = frozenset({"password", "senha", "sigaa_pass", "credentials"})


def redact_secrets(_logger: object, _method: str, event_dict: EventDict) -> EventDict:
    for key in REDACTED_KEYS.intersection(event_dict):
        event_dict[key] = "***"
    return event_dict


def _processors(json_output: bool) -> list[Processor]:
    chain: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        redact_secrets,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if json_output:
        chain += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        chain.append(structlog.dev.ConsoleRenderer())
    return chain


def setup_logging(json_output: bool = False, log_level: str = "INFO") -> None:
    """Configure structlog and route stdlib loggers (playwright, asyncio) to stderr.

    Args:
        json_output: JSON lines when True, console format otherwise.
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    structlog.configure(
        processors=_processors(json_output),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

    root = logging.getLogger()
    root.handlers = [logging.StreamHandler(sys.stderr)]
    root.setLevel(level)


def get_logger(name: str) -> structlog.typing.FilteringBoundLogger:
    """Logger bound to a module name (pass ``__name__``)."""
    return structlog.get_logger(name)
