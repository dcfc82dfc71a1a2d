"""HTTP transport contract and its httpx implementation.

The dispatcher only needs three things from a transport: a request target
for a base address, synchronous execution of a resolved request, and
conversion of the response to the method's declared return type.

Example:
    >>> transport = HttpxTransport(httpx.Client(timeout=5.0))
    >>> target = transport.target("https://api.example.com")
    >>> request = target.path("items").request("application/json").build("GET")
    >>> items = transport.invoke(request, list[dict])
"""

from __future__ import annotations

import functools
from abc import ABC, abstractmethod
from typing import Any

import httpx
from pydantic import TypeAdapter

from .logging import log_debug
from .target import HttpRequest, RequestTarget


class Transport(ABC):
    """Abstract transport consumed by the request resolver."""

    def target(self, base_url: str) -> RequestTarget:
        """Create a request target from a base address."""
        return RequestTarget(base_url)

    @abstractmethod
    def invoke(self, request: HttpRequest, return_type: Any) -> Any:
        """Execute a request and convert the response.

        Args:
            request: Fully resolved request.
            return_type: Declared return type of the interface method.

        Returns:
            The response converted to return_type.
        """
        ...

    def close(self) -> None:
        """Release transport resources."""
        return None


class HttpxTransport(Transport):
    """Transport backed by an ``httpx.Client``.

    Errors raised by httpx (connection failures, ``HTTPStatusError`` for
    non-2xx responses) and by pydantic during conversion propagate
    unchanged.

    Attributes:
        client: The underlying httpx client.
        owns_client: Whether close() also closes the client.
    """

    def __init__(self, client: httpx.Client | None = None, *, owns_client: bool | None = None) -> None:
        """Initialize the transport.

        Args:
            client: Client to send requests with. A default client is
                created when omitted.
            owns_client: Close the client on close(). Defaults to True only
                for a client created here.
        """
        self.client = client if client is not None else httpx.Client()
        self.owns_client = owns_client if owns_client is not None else client is None

    def invoke(self, request: HttpRequest, return_type: Any) -> Any:
        log_debug(
            "Sending request",
            {"http_method": request.method, "url": request.full_url},
        )
        response = self.client.request(
            request.method,
            request.url,
            params=list(request.params),
            headers=list(request.headers),
            content=request.content,
        )
        log_debug(
            "Received response",
            {"status_code": response.status_code, "url": request.full_url},
        )
        return convert_response(response, return_type)

    def close(self) -> None:
        if self.owns_client:
            self.client.close()


def convert_response(response: httpx.Response, return_type: Any) -> Any:
    """Convert a response to the declared return type.

    - ``httpx.Response``: the raw response, status not checked
    - ``None``: status checked, body ignored
    - ``Any`` (also unannotated methods): the decoded JSON body
    - ``str`` / ``bytes``: text / raw content
    - anything else: JSON body validated with a pydantic TypeAdapter;
      an empty body converts to None

    Raises:
        httpx.HTTPStatusError: For non-2xx responses.
        pydantic.ValidationError: If the body does not fit return_type.
    """
    if return_type is httpx.Response:
        return response

    response.raise_for_status()

    if return_type is None or return_type is type(None):
        return None
    if return_type is str:
        return response.text
    if return_type is bytes:
        return response.content
    if not response.content:
        return None
    if return_type is Any:
        return response.json()
    return adapter_for(return_type).validate_python(response.json())


@functools.lru_cache(maxsize=256)
def adapter_for(return_type: Any) -> TypeAdapter[Any]:
    """Get the cached pydantic TypeAdapter of a return type."""
    return TypeAdapter(return_type)


__all__ = [
    "Transport",
    "HttpxTransport",
    "convert_response",
    "adapter_for",
]
