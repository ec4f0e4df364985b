"""Structured logging for Sketchforge.

structlog renders every event; stdlib logging only owns the destination,
either stderr or a size-rotated file. Two layers of context are merged into
each event:

- ``correlation_id``: one CLI invocation, set by the app callback
- ``export_id`` and ``mode``: the export currently running

Keys that can carry credentials are masked before rendering, so an
accidental ``logger.info("x", api_key=...)`` never reaches a log line.

Example usage:
    >>> setup_logging(LoggingConfig(level="INFO", format="console"))
    >>> logger = get_logger(__name__)
    >>> with export_log_context("exp-1", "model"):
    ...     logger.info("export_started", artifacts=5)
"""

from __future__ import annotations

import contextvars
import logging
import logging.handlers
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import structlog

from sketchforge.config import LoggingConfig

SENSITIVE_KEYS = frozenset({"api_key", "authorization", "x-api-key", "credentials", "secret"})
MASK = "***"

# Transport loggers that would otherwise log one line per request
QUIET_LOGGERS = ("httpx", "httpcore")

_correlation_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "correlation_id", default=None
)


def add_correlation_id(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """structlog processor adding the current correlation id, if any."""
    correlation_id = _correlation_id.get()
    if correlation_id is not None:
        event_dict["correlation_id"] = correlation_id
    return event_dict


def mask_secrets(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """structlog processor replacing credential-bearing values with ``***``."""
    for key in SENSITIVE_KEYS.intersection(event_dict):
        event_dict[key] = MASK
    return event_dict


def set_correlation_id(correlation_id: str | None) -> None:
    _correlation_id.set(correlation_id)


def get_correlation_id() -> str | None:
    return _correlation_id.get()


def bind_export_context(export_id: str, mode: str) -> None:
    """Bind export id and generation mode to all subsequent logs.

    Args:
        export_id: Identifier of the running export
        mode: Generation mode ("deterministic" or "model")
    """
    structlog.contextvars.bind_contextvars(export_id=export_id, mode=mode)


def clear_export_context() -> None:
    structlog.contextvars.unbind_contextvars("export_id", "mode")


@contextmanager
def export_log_context(export_id: str, mode: str) -> Iterator[None]:
    """Scope export context to a block; cleared even when the export raises."""
    bind_export_context(export_id, mode)
    try:
        yield
    finally:
        clear_export_context()


def _build_handler(config: LoggingConfig) -> logging.Handler:
    if config.file is None:
        # stdout belongs to the CLI tables
        return logging.StreamHandler(sys.stderr)
    config.file.parent.mkdir(parents=True, exist_ok=True)
    return logging.handlers.RotatingFileHandler(
        filename=config.file,
        maxBytes=config.rotation_size_mb * 1024 * 1024,
        backupCount=config.retention_count,
        encoding="utf-8",
    )


def _build_renderer(config: LoggingConfig) -> Any:
    if config.format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer()


def setup_logging(config: LoggingConfig) -> None:
    """Route structlog through a single stdlib handler chosen by config.

    Replaces any handlers already on the root logger, so calling it twice
    does not duplicate output.
    """
    log_level = getattr(logging, config.level)

    handler = _build_handler(config)
    handler.setLevel(log_level)
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            add_correlation_id,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            mask_secrets,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            _build_renderer(config),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
