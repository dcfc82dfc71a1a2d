"""Annotation surface for declaring REST resource interfaces.

Class and method metadata is attached with decorators; parameter bindings
are declared with ``typing.Annotated`` markers.

Example:
    >>> from typing import Annotated
    >>> from restbind import GET, Path, PathParam, Produces, QueryParam
    >>>
    >>> @Path("api")
    ... @Produces("application/json")
    ... class ItemResource:
    ...     @GET
    ...     @Path("items/{id}")
    ...     def get_item(self, id: Annotated[str, PathParam("id")]) -> dict: ...
    ...
    ...     @GET
    ...     @Path("items")
    ...     def search(self, q: Annotated[str, QueryParam("q")]) -> list[dict]: ...
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TypeVar

ANNOTATIONS_ATTR = "__restbind_annotations__"

_T = TypeVar("_T")


class _Decorating:
    """Mixin for annotations applied as decorators.

    The annotation instance is recorded on the decorated object's own
    ``__dict__`` so that class-level metadata is not inherited.
    """

    def __call__(self, target: _T) -> _T:
        existing = target.__dict__.get(ANNOTATIONS_ATTR, ())
        setattr(target, ANNOTATIONS_ATTR, (*existing, self))
        return target


@dataclass(frozen=True)
class Path(_Decorating):
    """Path template segment for a class or method."""

    value: str


@dataclass(frozen=True)
class Produces(_Decorating):
    """Acceptable response media types for a class or method."""

    value: tuple[str, ...]

    def __init__(self, *media_types: str) -> None:
        object.__setattr__(self, "value", tuple(media_types))


@dataclass(frozen=True)
class Consumes(_Decorating):
    """Media type used to encode the request entity."""

    value: tuple[str, ...]

    def __init__(self, *media_types: str) -> None:
        object.__setattr__(self, "value", tuple(media_types))


@dataclass(frozen=True)
class HttpMethod(_Decorating):
    """HTTP verb marker. Its presence makes a method terminal."""

    value: str


def http_method(verb: str) -> HttpMethod:
    """Create a verb marker for methods outside the standard set.

    Example:
        >>> PROPFIND = http_method("PROPFIND")
    """
    return HttpMethod(verb.upper())


GET = http_method("GET")
POST = http_method("POST")
PUT = http_method("PUT")
DELETE = http_method("DELETE")
PATCH = http_method("PATCH")
HEAD = http_method("HEAD")
OPTIONS = http_method("OPTIONS")


@dataclass(frozen=True)
class ParamMarker:
    """Base class for parameter binding markers. Each carries a key name."""

    name: str


class PathParam(ParamMarker):
    """Bind the argument to a path template variable."""


class QueryParam(ParamMarker):
    """Bind the argument to a query parameter."""


class MatrixParam(ParamMarker):
    """Bind the argument to a matrix parameter on the last path segment."""


class HeaderParam(ParamMarker):
    """Bind the argument to a request header."""


class FormParam(ParamMarker):
    """Bind the argument to a form field."""


class CookieParam(ParamMarker):
    """Bind the argument to a request cookie."""


PARAMETER_MARKER_TYPES: tuple[type[ParamMarker], ...] = (
    PathParam,
    QueryParam,
    MatrixParam,
    HeaderParam,
    FormParam,
    CookieParam,
)


def annotations_of(target: Any) -> tuple[Any, ...]:
    """Return the annotations declared directly on a class or function."""
    return getattr(target, "__dict__", {}).get(ANNOTATIONS_ATTR, ())


def find_annotation(target: Any, annotation_type: type[_T]) -> _T | None:
    """Return the first annotation of the given type, or None."""
    for annotation in annotations_of(target):
        if isinstance(annotation, annotation_type):
            return annotation
    return None


__all__ = [
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
    "ParamMarker",
    "PathParam",
    "QueryParam",
    "MatrixParam",
    "HeaderParam",
    "FormParam",
    "CookieParam",
    "PARAMETER_MARKER_TYPES",
    "annotations_of",
    "find_annotation",
]
