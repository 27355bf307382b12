"""Logging helpers for sqlbits.

Every logger handed out by :func:`get_logger` lives under the ``sqlbits``
namespace, so applications tune the whole package through that one logger.
"""

from __future__ import annotations

import logging
from typing import Any

__all__ = ("get_logger", "log_with_context")


def get_logger(name: str | None = None) -> logging.Logger:
    """Get a logger in the ``sqlbits`` namespace.

    Args:
        name: Logger name. If not provided, returns the root sqlbits logger.

    Returns:
        Logger instance
    """
    if name is None:
        return logging.getLogger("sqlbits")

    if not name.startswith("sqlbits"):
        name = f"sqlbits.{name}"

    return logging.getLogger(name)


def log_with_context(logger: logging.Logger, level: int, message: str, **extra_fields: Any) -> None:
    """Log a message with structured extra fields.

    The fields are attached to the record as ``extra_fields`` for handlers
    and formatters that want them.

    Args:
        logger: The logger to use
        level: Log level
        message: Log message
        **extra_fields: Additional fields describing the event
    """
    if not logger.isEnabledFor(level):
        return
    logger.log(level, message, extra={"extra_fields": extra_fields}, stacklevel=2)
