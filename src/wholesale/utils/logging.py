"""Logging for the Wholesale service.

stdlib handlers own the output streams; structlog renders the records. The
deployment environment comes from ``PROTEAN_ENV``, the same variable that
selects the domain configuration, and decides both the level and whether
records are rendered as JSON.
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Any

import structlog

_LEVELS = {"production": "INFO", "staging": "INFO", "development": "DEBUG", "test": "WARNING"}
_JSON_ENVIRONMENTS = {"production", "staging"}


def _environment() -> str:
    return (os.getenv("PROTEAN_ENV") or os.getenv("ENVIRONMENT") or "development").lower()


def get_log_level() -> str:
    """``LOG_LEVEL`` if set, otherwise the level for the current environment."""
    return os.getenv("LOG_LEVEL", _LEVELS.get(_environment(), "INFO"))


def configure_logging(log_dir: str | None = "logs", log_file_prefix: str = "wholesale") -> None:
    """Route all records to stdout and, when ``log_dir`` is given, a rotating file."""
    log_level = get_log_level()

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_dir:
        Path(log_dir).mkdir(exist_ok=True)
        handlers.append(
            logging.handlers.RotatingFileHandler(
                filename=Path(log_dir) / f"{log_file_prefix}.log",
                maxBytes=10 * 1024 * 1024,
                backupCount=5,
                encoding="utf-8",
            )
        )
    logging.basicConfig(level=log_level, handlers=handlers, format="%(message)s", force=True)
    logging.getLogger("protean").setLevel(logging.WARNING)

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.format_exc_info,
    ]
    if _environment() in _JSON_ENVIRONMENTS:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


# ---------------------------------------------------------------------------
# Request context
# ---------------------------------------------------------------------------
def bind_actor(actor) -> None:
    """Attach the acting user to every log line of the current request."""
    structlog.contextvars.bind_contextvars(actor_id=actor.user_id, actor_role=actor.role)


def add_context(**kwargs: Any) -> None:
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
