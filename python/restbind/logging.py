"""Structured logging for restbind.

This module provides structured logging functions on top of the standard
``logging`` module. Every message goes to the ``restbind`` logger with its
structured fields attached as ``extra={"fields": ...}`` and rendered after
the message, so plain handlers still show them.

Example:
    >>> from restbind import log_info, log_warn
    >>>
    >>> log_info("Proxy created", {
    ...     "interface": "UserResource",
    ...     "base_url": "https://api.example.com",
    ... })
    >>>
    >>> log_warn("Conflicting values for path parameter", {
    ...     "key": "id",
    ...     "old": "1",
    ...     "new": "2",
    ... })
"""

from __future__ import annotations

import logging
from typing import Any

from .types import LogContext

LOGGER_NAME = "restbind"

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

_LEVELS = {
    "trace": TRACE,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}

_logger = logging.getLogger(LOGGER_NAME)


def get_logger() -> logging.Logger:
    """Return the package logger."""
    return _logger


def set_log_level(level: str) -> None:
    """Set the package log level.

    Args:
        level: One of trace, debug, info, warn, error.
    """
    _logger.setLevel(_LEVELS.get(level.lower(), logging.INFO))


def log_error(message: str, fields: dict[str, Any] | LogContext | None = None) -> None:
    """Log an ERROR level message with structured fields.

    Use this for failures that abort a call.

    Args:
        message: The log message.
        fields: Optional structured fields for context. Can be a dict
                or a LogContext instance.
    """
    _log(logging.ERROR, message, fields)


def log_warn(message: str, fields: dict[str, Any] | LogContext | None = None) -> None:
    """Log a WARN level message with structured fields.

    Use this for non-fatal conditions such as binding conflicts.

    Args:
        message: The log message.
        fields: Optional structured fields for context.

    Example:
        >>> log_warn("Conflicting values for path parameter", {"key": "id"})
    """
    _log(logging.WARNING, message, fields)


def log_info(message: str, fields: dict[str, Any] | LogContext | None = None) -> None:
    """Log an INFO level message with structured fields.

    Args:
        message: The log message.
        fields: Optional structured fields for context.
    """
    _log(logging.INFO, message, fields)


def log_debug(message: str, fields: dict[str, Any] | LogContext | None = None) -> None:
    """Log a DEBUG level message with structured fields.

    Use this for descriptor builds and outgoing requests.

    Args:
        message: The log message.
        fields: Optional structured fields for context.

    Example:
        >>> log_debug("Resolved request", {
        ...     "method": "GET",
        ...     "url": "https://api.example.com/items/42",
        ... })
    """
    _log(logging.DEBUG, message, fields)


def log_trace(message: str, fields: dict[str, Any] | LogContext | None = None) -> None:
    """Log a TRACE level message with structured fields.

    Use this for very verbose logging, like individual binding steps.
    This level is disabled unless set explicitly.

    Args:
        message: The log message.
        fields: Optional structured fields for context.
    """
    _log(TRACE, message, fields)


def _log(level: int, message: str, fields: dict[str, Any] | LogContext | None) -> None:
    if not _logger.isEnabledFor(level):
        return
    fields_dict = _normalize_fields(fields)
    if fields_dict:
        rendered = " ".join(f"{k}={v}" for k, v in fields_dict.items())
        message = f"{message} [{rendered}]"
    _logger.log(level, message, extra={"fields": fields_dict or {}})


def _normalize_fields(
    fields: dict[str, Any] | LogContext | None,
) -> dict[str, str] | None:
    """Normalize fields to a dict of strings.

    Args:
        fields: Input fields as dict, LogContext, or None.

    Returns:
        Dict with string values, or None if no fields.
    """
    if fields is None:
        return None

    if isinstance(fields, LogContext):
        # Convert LogContext to dict, excluding None values
        return {k: str(v) for k, v in fields.model_dump().items() if v is not None}

    return {k: str(v) for k, v in fields.items()}


__all__ = [
    "LOGGER_NAME",
    "TRACE",
    "get_logger",
    "set_log_level",
    "log_error",
    "log_warn",
    "log_info",
    "log_debug",
    "log_trace",
]
