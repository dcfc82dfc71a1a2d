"""Custom exceptions for restbind.

This module provides the hierarchy of exceptions raised while building
resource descriptors and while dispatching proxy calls.

Build-time problems surface as ConfigurationError the first time an
interface is introspected. Everything else is raised per call. Transport
errors (httpx, pydantic) are never wrapped.
"""

from __future__ import annotations

from typing import Any


class RestBindError(Exception):
    """Base exception for all restbind errors.

    Attributes:
        message: Human-readable error message
        metadata: Additional error context

    Example:
        >>> try:
        ...     client = build_proxy(Broken, "http://localhost")
        ... except RestBindError as e:
        ...     print(f"restbind error: {e}")
    """

    def __init__(self, message: str, *, metadata: dict[str, Any] | None = None) -> None:
        """Initialize the error.

        Args:
            message: Error message
            metadata: Additional context
        """
        super().__init__(message)
        self.message = message
        self.metadata = metadata or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for structured logging.

        Returns:
            Dictionary with error details
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "metadata": self.metadata,
        }


class ConfigurationError(RestBindError):
    """Raised when an interface cannot be turned into a descriptor.

    Common causes:
    - Two binding markers on one parameter
    - An entity parameter on a sub-resource locator
    - More than one entity parameter on a method
    - A locator without a class as its return annotation

    Example:
        >>> try:
        ...     describe(BrokenResource)
        ... except ConfigurationError as e:
        ...     print(f"Bad interface: {e}")
    """

    pass


class RequestConflictError(RestBindError):
    """Raised when a terminal call supplies both form values and an entity."""

    pass


class InvocationError(RestBindError):
    """Raised when a proxy call cannot be dispatched.

    Covers a method with no binding, arguments that do not fit the
    method signature, and internal invariant failures.
    """

    pass


class TemplateResolutionError(RestBindError):
    """Raised when a path template variable has no value at resolution time."""

    pass


class BindingConflictWarning(UserWarning):
    """Emitted when a path parameter is bound more than once in a call chain.

    Non-fatal: the most recent value wins.
    """

    pass


__all__ = [
    "RestBindError",
    "ConfigurationError",
    "RequestConflictError",
    "InvocationError",
    "TemplateResolutionError",
    "BindingConflictWarning",
]
