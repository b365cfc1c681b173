"""Structured logging for times_drill.

Events are snake_case names with key/value context, for example
``logger.info("answer_missed", fact="2x3", level=3)``. Console output is
the default; JSON lines can be switched on with TIMES_DRILL_LOG_JSON.
"""

import logging
import sys
from enum import Enum
from typing import Any

import structlog
from structlog.typing import EventDict, WrappedLogger

__all__ = [
    "bind_session",
    "configure_logging",
    "get_logger",
]


def _enum_values(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Render enum members (phases, cues) by value."""
    for key, value in event_dict.items():
        if isinstance(value, Enum):
            event_dict[key] = value.value
    return event_dict


def configure_logging(
    level: int | str = logging.INFO,
    json_output: bool = False,
    add_timestamp: bool = True,
    force: bool = False,
) -> None:
    """Configure structlog for drill sessions.

    Log lines go to stderr so that stdout stays free for an
    interactive prompt.

    Args:
        level: Logging level, numeric or by name (default: INFO)
        json_output: Emit JSON lines instead of console output
        add_timestamp: Add an ISO timestamp to each entry
        force: Replace root handlers installed by the host application
    """
    if isinstance(level, str):
        level = logging.getLevelNamesMapping().get(level.upper(), logging.INFO)

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        _enum_values,
        structlog.processors.StackInfoRenderer(),
    ]
    if add_timestamp:
        processors.insert(0, structlog.processors.TimeStamper(fmt="iso"))

    if json_output:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level, force=force)
    logging.getLogger("redis").setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a logger, usually with ``__name__``."""
    return structlog.get_logger(name)


def bind_session(**context: Any) -> None:
    """Attach context (such as the store backend) to every later log line."""
    structlog.contextvars.bind_contextvars(**context)


if not structlog.is_configured():
    configure_logging()
