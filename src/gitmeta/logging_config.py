"""Structured logging configuration.

Sets up structlog so the pre-step's debug and error events come out as
key/value records:
  {"event": "git_metadata_fetch_failed", "status_code": 404, ...}
JSON in production, pretty console output everywhere else.

Usage:
    from gitmeta.logging_config import setup_logging, get_logger

    setup_logging(environment="production")
    logger = get_logger(__name__)
    logger.debug("fetching_git_metadata", uri="https://api.github.com/...")
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

import structlog


def _resolve_level(log_level: str | None) -> int:
    name = (log_level or os.environ.get("LOG_LEVEL", "INFO")).upper()
    level = logging.getLevelName(name)
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {name!r}")
    return level


def setup_logging(
    environment: str | None = None,
    log_level: str | None = None,
) -> None:
    """Configure structured logging for the application.

    Request fields bound with ``structlog.contextvars.bound_contextvars``
    (owner, repo, path, ref) are merged into every event.

    Args:
        environment: "development" or "production". Reads from
                     ENVIRONMENT env var if not provided.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
                   Reads from LOG_LEVEL env var if not provided.

    Raises:
        ValueError: If the log level is not a standard level name
    """
    production = (environment or os.environ.get("ENVIRONMENT")) == "production"
    level = _resolve_level(log_level)

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if production:
        # exceptions rendered as structured frames
        processors += [
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # httpx logs through the standard library
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)


def get_logger(name: str) -> Any:
    """Get a structured logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        A structlog bound logger
    """
    return structlog.get_logger(name)
