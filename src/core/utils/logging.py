"""
Structured logging utilities.

Wires structlog onto the standard library logger and provides a context
manager for timed operation logging with error tracking and metadata.
"""

from __future__ import annotations

import logging
import sys
import time
from collections.abc import Callable  # noqa: TCH003
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from src.core.config.logging_config import LoggingConfig

logger = structlog.get_logger(__name__)


def configure_logging(logging_config: LoggingConfig) -> None:
    """
    Configure stdlib logging and route structlog through it.

    Args:
        logging_config: Level, format and optional log file.
    """
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if logging_config.file_path:
        handlers.append(logging.FileHandler(logging_config.file_path))

    logging.basicConfig(
        level=logging_config.level.upper(),
        format=logging_config.format,
        handlers=handlers,
        force=True,
    )

    renderer: Any = (
        structlog.processors.JSONRenderer() if logging_config.json else structlog.dev.ConsoleRenderer(colors=False)
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


@asynccontextmanager
async def log_operation(
    operation: str,
    subject_ids: dict[str, str] | None = None,
    **context: Any,
) -> Any:  # AsyncGenerator[None, None]
    """
    Context manager for structured operation logging.

    Logs operation start, completion, and errors with timing information.

    Args:
        operation: Name of the operation being performed
        subject_ids: Dictionary of subject identifiers (e.g., {"repo": "owner/repo"})
        **context: Additional context to include in logs

    Example:
        async with log_operation("catalog_load", repo="owner/repo"):
            catalog = await load_catalog(...)
    """
    start_time = time.time()
    log_context = {
        **(subject_ids or {}),
        **context,
    }

    logger.info(f"{operation}_started", operation=operation, **log_context)

    try:
        yield
    except Exception as e:
        latency_ms = int((time.time() - start_time) * 1000)
        logger.error(
            f"{operation}_failed",
            operation=operation,
            error=str(e),
            latency_ms=latency_ms,
            **log_context,
        )
        raise
    else:
        latency_ms = int((time.time() - start_time) * 1000)
        logger.info(f"{operation}_completed", operation=operation, latency_ms=latency_ms, **log_context)


def log_structured(
    logger_obj: Any,
    event: str,
    level: str = "info",
    **context: Any,
) -> None:
    """
    Lightweight structured logging helper.

    Args:
        logger_obj: structlog (or stdlib) logger instance to use.
        event: Event/operation name.
        level: Logging level (info|warning|error).
        **context: Arbitrary key/value metadata.
    """
    log_fn: Callable[..., Any] = getattr(logger_obj, level, logger_obj.info)
    log_fn(event, **context)
