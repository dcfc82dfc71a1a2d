"""Request targets, request builders and prepared requests.

RequestTarget is the immutable request-target handle threaded through an
invocation chain. Every operation returns a new target, so a target can be
shared between a parent state and its clones.

Example:
    >>> target = RequestTarget("http://localhost:8080").path("api").path("items/{id}")
    >>> target = target.resolve_templates({"id": 42}).query_param("expand", "owner")
    >>> target.url
    'http://localhost:8080/api/items/42?expand=owner'
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any
from urllib.parse import quote

import httpx

from .exceptions import TemplateResolutionError

# Body of a {name} or {name: regex} template; the regex may nest braces
TEMPLATE_VARIABLE = re.compile(r"\s*(?P<name>\w[\w.\-]*)\s*(?::.*)?", re.DOTALL)


def template_spans(segment: str) -> list[tuple[int, int, str]]:
    """Locate template variables in a path segment.

    Returns:
        (start, end, name) for each variable, in order. Braces inside a
        variable's regex (``{id: [0-9]{3}}``) belong to that variable.
    """
    spans: list[tuple[int, int, str]] = []
    depth = 0
    start = 0
    for index, char in enumerate(segment):
        if char == "{":
            if depth == 0:
                start = index
            depth += 1
        elif char == "}" and depth > 0:
            depth -= 1
            if depth == 0:
                match = TEMPLATE_VARIABLE.fullmatch(segment, start + 1, index)
                if match is not None:
                    spans.append((start, index + 1, match.group("name")))
    return spans


def to_text(value: Any) -> str:
    """Render a bound value the way it appears on the wire."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


@dataclass(frozen=True)
class RequestTarget:
    """Immutable request target.

    Attributes:
        base_url: Base address the target was created from.
        segments: Path segments appended to the base address, possibly
            holding template variables.
        query: Ordered (name, value) query pairs.
        matrix: Ordered (name, value) matrix pairs for the last segment.
    """

    base_url: str
    segments: tuple[str, ...] = ()
    query: tuple[tuple[str, str], ...] = ()
    matrix: tuple[tuple[str, str], ...] = ()

    def path(self, segment: str | None) -> RequestTarget:
        """Append a path segment. Empty segments are ignored."""
        if not segment:
            return self
        stripped = segment.strip("/")
        if not stripped:
            return self
        return replace(self, segments=(*self.segments, stripped))

    @property
    def template_variables(self) -> list[str]:
        """Names of unresolved template variables, in path order."""
        return [name for segment in self.segments for _, _, name in template_spans(segment)]

    def resolve_templates(self, values: Mapping[str, Any], *, strict: bool = True) -> RequestTarget:
        """Substitute template variables with percent-encoded values.

        Args:
            values: Variable name to value.
            strict: Raise if a variable has no value.

        Raises:
            TemplateResolutionError: If strict and a variable is unresolved.
        """

        def substitute(segment: str) -> str:
            parts: list[str] = []
            position = 0
            for start, end, name in template_spans(segment):
                parts.append(segment[position:start])
                if name in values:
                    parts.append(quote(to_text(values[name]), safe=""))
                elif strict:
                    raise TemplateResolutionError(
                        f"No value for path template variable '{name}'",
                        metadata={"variable": name, "template": "/".join(self.segments)},
                    )
                else:
                    parts.append(segment[start:end])
                position = end
            parts.append(segment[position:])
            return "".join(parts)

        segments = tuple(substitute(s) for s in self.segments)
        return replace(self, segments=segments)

    def query_param(self, name: str, *values: Any) -> RequestTarget:
        """Add one or more values for a query parameter."""
        pairs = tuple((name, to_text(v)) for v in values)
        return replace(self, query=self.query + pairs)

    def matrix_param(self, name: str, *values: Any) -> RequestTarget:
        """Add one or more values for a matrix parameter."""
        pairs = tuple((name, to_text(v)) for v in values)
        return replace(self, matrix=self.matrix + pairs)

    @property
    def path_url(self) -> str:
        """URL without the query string."""
        url = self.base_url.rstrip("/")
        if self.segments:
            url = f"{url}/{'/'.join(self.segments)}"
        for name, value in self.matrix:
            url = f"{url};{quote(name, safe='')}={quote(value, safe='')}"
        return url

    @property
    def url(self) -> str:
        """Full URL including the query string."""
        return str(httpx.URL(self.path_url, params=list(self.query)))

    def request(self, *media_types: str) -> RequestBuilder:
        """Start a request restricted to the given acceptable media types."""
        return RequestBuilder(target=self, accept=tuple(media_types))

    def __str__(self) -> str:
        return self.url


@dataclass
class RequestBuilder:
    """Mutable builder for a single request against a target."""

    target: RequestTarget
    accept: tuple[str, ...] = ()
    headers: list[tuple[str, str]] = field(default_factory=list)
    cookies: list[tuple[str, str]] = field(default_factory=list)

    def header(self, name: str, value: Any) -> RequestBuilder:
        """Add a header value. Repeated names are sent as repeated headers."""
        self.headers.append((name, to_text(value)))
        return self

    def headers_from(self, values: Mapping[str, Iterable[Any]]) -> RequestBuilder:
        """Add every value of a multi-valued header map."""
        for name, items in values.items():
            for value in items:
                self.header(name, value)
        return self

    def cookie(self, name: str, value: Any) -> RequestBuilder:
        """Add a cookie."""
        self.cookies.append((name, to_text(value)))
        return self

    def build(
        self,
        method: str,
        content: bytes | None = None,
        content_type: str | None = None,
    ) -> HttpRequest:
        """Build the final request."""
        headers = list(self.headers)
        if self.accept:
            headers.append(("Accept", ", ".join(self.accept)))
        if self.cookies:
            headers.append(("Cookie", "; ".join(f"{n}={v}" for n, v in self.cookies)))
        if content is not None and content_type is not None:
            headers.append(("Content-Type", content_type))
        return HttpRequest(
            method=method.upper(),
            url=self.target.path_url,
            params=self.target.query,
            headers=tuple(headers),
            content=content,
        )


@dataclass(frozen=True)
class HttpRequest:
    """A fully resolved request, ready for a transport.

    Attributes:
        method: HTTP verb.
        url: URL without the query string.
        params: Ordered query pairs.
        headers: Ordered header pairs.
        content: Encoded body, if any.
    """

    method: str
    url: str
    params: tuple[tuple[str, str], ...] = ()
    headers: tuple[tuple[str, str], ...] = ()
    content: bytes | None = None

    @property
    def full_url(self) -> str:
        return str(httpx.URL(self.url, params=list(self.params)))

    def header_values(self, name: str) -> list[str]:
        """All values of a header, case-insensitive."""
        lowered = name.lower()
        return [v for n, v in self.headers if n.lower() == lowered]


__all__ = [
    "RequestTarget",
    "RequestBuilder",
    "HttpRequest",
    "to_text",
]
