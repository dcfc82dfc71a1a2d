"""Client facade.

RestClient ties a ClientConfig, a Transport and a Dispatcher together and
hands out root proxies. It owns the httpx client it creates and closes it
on exit.

Example:
    >>> config = ClientConfig(base_url="http://localhost:8080/api")
    >>> with RestClient(config) as client:
    ...     items = client.proxy(ItemResource)
    ...     item = items.get_item("42")
"""

from __future__ import annotations

from typing import Any, TypeVar

import httpx

from .dispatcher import Dispatcher
from .logging import log_info, set_log_level
from .transport import HttpxTransport, Transport
from .types import ClientConfig

T = TypeVar("T")


class RestClient:
    """Factory for resource proxies sharing one transport.

    Attributes:
        config: Client configuration.
        transport: Transport executing terminal calls.
        dispatcher: Dispatcher used by every proxy of this client.
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        transport: Transport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: Client configuration.
            transport: Transport to use instead of one built from config.
        """
        self.config = config
        set_log_level(config.log_level)
        if transport is None:
            transport = HttpxTransport(self._build_http_client(config), owns_client=True)
        self.transport = transport
        self.dispatcher = Dispatcher(self.transport)
        log_info("REST client created", {"base_url": config.base_url})

    @staticmethod
    def _build_http_client(config: ClientConfig) -> httpx.Client:
        return httpx.Client(
            timeout=config.timeout,
            headers=config.default_headers,
            follow_redirects=config.follow_redirects,
            verify=config.verify,
        )

    def proxy(self, interface: type[T], base_url: str | None = None) -> T:
        """Build the root proxy of an interface.

        Args:
            interface: Resource interface class.
            base_url: Base address overriding config.base_url.

        Raises:
            ConfigurationError: If the interface is invalid.
        """
        return self.dispatcher.root_proxy(interface, base_url or self.config.base_url)

    def close(self) -> None:
        """Close the transport."""
        self.transport.close()

    def __enter__(self) -> RestClient:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


def build_proxy(
    interface: type[T],
    base_url: str,
    transport: Transport | None = None,
) -> T:
    """Build a root proxy without a RestClient.

    Args:
        interface: Resource interface class.
        base_url: Base address of the service.
        transport: Transport to use; a default HttpxTransport when omitted.

    Example:
        >>> dummy = build_proxy(Dummy, "http://localhost:8080/api")
        >>> dummy.what().the()
    """
    dispatcher = Dispatcher(transport if transport is not None else HttpxTransport())
    return dispatcher.root_proxy(interface, base_url)


__all__ = ["RestClient", "build_proxy"]
