"""
restbind

Declarative REST clients: describe a resource as a Python class whose
methods carry HTTP metadata, and get a proxy that builds and sends the
requests.

Example:
    >>> from typing import Annotated
    >>> from restbind import GET, Path, PathParam, build_proxy
    >>>
    >>> @Path("api")
    ... class Foo:
    ...     @GET
    ...     @Path("items/{id}")
    ...     def bar(self, id: Annotated[str, PathParam("id")]) -> dict: ...
    ...
    ...     @Path("children")
    ...     def sub(self) -> Bar: ...
    >>>
    >>> foo = build_proxy(Foo, "http://localhost:8080")
    >>> foo.bar("42")  # GET http://localhost:8080/api/items/42

    >>> # Configured client owning its httpx client
    >>> from restbind import ClientConfig, RestClient
    >>> with RestClient(ClientConfig(base_url="http://localhost:8080")) as client:
    ...     client.proxy(Foo).sub().leaf()
"""

from __future__ import annotations

__version__ = "0.1.0"

from restbind.annotations import (
    DELETE,
    GET,
    HEAD,
    OPTIONS,
    PATCH,
    POST,
    PUT,
    Consumes,
    CookieParam,
    FormParam,
    HeaderParam,
    HttpMethod,
    MatrixParam,
    Path,
    PathParam,
    Produces,
    QueryParam,
    http_method,
)
from restbind.binding import BindingKind, MethodBinding, ParamBinding
from restbind.client import RestClient, build_proxy
from restbind.descriptor import DescriptorRegistry, ResourceDescriptor, describe
from restbind.dispatcher import Dispatcher, ResourceProxy
from restbind.exceptions import (
    BindingConflictWarning,
    ConfigurationError,
    InvocationError,
    RequestConflictError,
    RestBindError,
    TemplateResolutionError,
)
from restbind.logging import (
    log_debug,
    log_error,
    log_info,
    log_trace,
    log_warn,
)
from restbind.resolver import RequestResolver
from restbind.state import InvocationState
from restbind.target import HttpRequest, RequestBuilder, RequestTarget
from restbind.transport import HttpxTransport, Transport
from restbind.types import ClientConfig, LogContext


def version() -> str:
    """Return the package version."""
    return __version__


__all__ = [
    "__version__",
    "version",
    # Annotations
    "Path",
    "Produces",
    "Consumes",
    "HttpMethod",
    "http_method",
    "GET",
    "POST",
    "PUT",
    "DELETE",
    "PATCH",
    "HEAD",
    "OPTIONS",
    "PathParam",
    "QueryParam",
    "MatrixParam",
    "HeaderParam",
    "FormParam",
    "CookieParam",
    # Bindings and descriptors
    "BindingKind",
    "ParamBinding",
    "MethodBinding",
    "ResourceDescriptor",
    "DescriptorRegistry",
    "describe",
    # Invocation
    "InvocationState",
    "RequestResolver",
    "Dispatcher",
    "ResourceProxy",
    "RequestTarget",
    "RequestBuilder",
    "HttpRequest",
    "Transport",
    "HttpxTransport",
    # Client
    "RestClient",
    "build_proxy",
    "ClientConfig",
    "LogContext",
    # Exceptions
    "RestBindError",
    "ConfigurationError",
    "RequestConflictError",
    "InvocationError",
    "TemplateResolutionError",
    "BindingConflictWarning",
    # Logging
    "log_error",
    "log_warn",
    "log_info",
    "log_debug",
    "log_trace",
]
