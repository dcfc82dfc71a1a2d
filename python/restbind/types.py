"""Pydantic models for restbind.

This module provides the configuration and logging-context models,
using Pydantic v2 for validation and serialization.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from .exceptions import ConfigurationError

ENV_BASE_URL = "RESTBIND_BASE_URL"
ENV_TIMEOUT = "RESTBIND_TIMEOUT"
ENV_LOG_LEVEL = "RESTBIND_LOG_LEVEL"


class ClientConfig(BaseModel):
    """Configuration for a RestClient.

    This model validates and holds the options used to build the
    underlying httpx client.

    Example:
        >>> config = ClientConfig(base_url="https://api.example.com", timeout=5.0)
        >>> client = RestClient(config)
    """

    base_url: str = Field(description="Base address every proxy target starts from.")
    timeout: float = Field(
        default=30.0,
        gt=0,
        description="Request timeout in seconds.",
    )
    default_headers: dict[str, str] = Field(
        default_factory=dict,
        description="Headers sent with every request.",
    )
    follow_redirects: bool = Field(
        default=False,
        description="Whether the transport follows redirects.",
    )
    verify: bool = Field(
        default=True,
        description="Whether TLS certificates are verified.",
    )
    log_level: str = Field(
        default="info",
        pattern="^(trace|debug|info|warn|error)$",
        description="Log level for the restbind logger (trace, debug, info, warn, error).",
    )

    model_config = {"extra": "forbid"}

    @classmethod
    def from_yaml(cls, path: str | Path) -> ClientConfig:
        """Load configuration from a YAML file.

        The file may hold the options at the top level or under a
        ``restbind`` key.

        Args:
            path: Path to the YAML file.

        Returns:
            Validated ClientConfig.

        Raises:
            ConfigurationError: If the file cannot be read or parsed.
            pydantic.ValidationError: If the options are invalid.
        """
        config_path = Path(path)
        try:
            with config_path.open() as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(
                f"Failed to load client config {config_path}: {e}",
                metadata={"path": str(config_path)},
            ) from e

        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Client config {config_path} must be a mapping",
                metadata={"path": str(config_path)},
            )

        section: Any = data.get("restbind", data)
        return cls.model_validate(section)

    @classmethod
    def from_env(cls, **overrides: Any) -> ClientConfig:
        """Build configuration from RESTBIND_* environment variables.

        Keyword overrides take precedence over the environment.

        Raises:
            ConfigurationError: If no base URL is available.
        """
        values: dict[str, Any] = {}
        if ENV_BASE_URL in os.environ:
            values["base_url"] = os.environ[ENV_BASE_URL]
        if ENV_TIMEOUT in os.environ:
            values["timeout"] = os.environ[ENV_TIMEOUT]
        if ENV_LOG_LEVEL in os.environ:
            values["log_level"] = os.environ[ENV_LOG_LEVEL].lower()
        values.update(overrides)

        if "base_url" not in values:
            raise ConfigurationError(f"{ENV_BASE_URL} is not set")
        return cls.model_validate(values)


class LogContext(BaseModel):
    """Context fields for structured logging.

    Example:
        >>> context = LogContext(interface="UserResource", method="get_user")
        >>> log_debug("Dispatching call", context)
    """

    interface: str | None = Field(
        default=None,
        description="Interface the call was made on.",
    )
    method: str | None = Field(
        default=None,
        description="Interface method name.",
    )
    http_method: str | None = Field(
        default=None,
        description="HTTP verb of the request.",
    )
    url: str | None = Field(
        default=None,
        description="Resolved request URL.",
    )


__all__ = [
    "ClientConfig",
    "LogContext",
    "ENV_BASE_URL",
    "ENV_TIMEOUT",
    "ENV_LOG_LEVEL",
]
