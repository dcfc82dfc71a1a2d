"""Parameter and method bindings.

A MethodBinding is built once per interface method. It carries the HTTP
verb (absent for sub-resource locators), the method's own path segment,
media-type overrides, the declared return type and one ParamBinding per
parameter, in signature order.

Classification rules:
- a parameter has at most one binding marker in its ``Annotated`` metadata
- a parameter without any marker is the request entity
- a method has at most one entity parameter
- sub-resource locators cannot take an entity parameter
"""

from __future__ import annotations

import inspect
import types
import typing
from dataclasses import dataclass
from enum import Enum
from typing import Any, get_args, get_origin

from .annotations import (
    PARAMETER_MARKER_TYPES,
    Consumes,
    CookieParam,
    FormParam,
    HeaderParam,
    HttpMethod,
    MatrixParam,
    ParamMarker,
    Path,
    PathParam,
    Produces,
    QueryParam,
    annotations_of,
    find_annotation,
)
from .exceptions import ConfigurationError


class BindingKind(str, Enum):
    """Where a parameter value is routed in the request."""

    PATH = "path"
    QUERY = "query"
    MATRIX = "matrix"
    HEADER = "header"
    FORM = "form"
    COOKIE = "cookie"
    ENTITY = "entity"


_KIND_BY_MARKER: dict[type[ParamMarker], BindingKind] = {
    PathParam: BindingKind.PATH,
    QueryParam: BindingKind.QUERY,
    MatrixParam: BindingKind.MATRIX,
    HeaderParam: BindingKind.HEADER,
    FormParam: BindingKind.FORM,
    CookieParam: BindingKind.COOKIE,
}


@dataclass(frozen=True)
class ParamBinding:
    """Binding of a single method parameter.

    Attributes:
        kind: Binding kind.
        name: Key name in the request part (None for the entity).
        parameter: Python parameter name.
    """

    kind: BindingKind
    name: str | None
    parameter: str

    @property
    def is_entity(self) -> bool:
        return self.kind is BindingKind.ENTITY


@dataclass(frozen=True)
class MethodBinding:
    """Immutable descriptor of one interface method.

    Attributes:
        name: Method name (its identity in the dispatch table).
        http_method: Declared verb, or None for a sub-resource locator.
        path: Method-level path segment.
        params: One binding per parameter, in signature order.
        produces: Method-level produces override.
        consumes: Method-level consumes override.
        return_type: Declared return type.
        signature: Signature used to bind call arguments (without self).
    """

    name: str
    http_method: str | None
    path: str | None
    params: tuple[ParamBinding, ...]
    produces: tuple[str, ...] | None
    consumes: tuple[str, ...] | None
    return_type: Any
    signature: inspect.Signature

    @property
    def is_sub_resource_locator(self) -> bool:
        return self.http_method is None

    @property
    def entity_param(self) -> ParamBinding | None:
        for param in self.params:
            if param.is_entity:
                return param
        return None


def classify_parameter(
    method_name: str,
    parameter: str,
    annotation: Any,
) -> ParamBinding:
    """Classify one parameter into exactly one binding kind.

    Args:
        method_name: Owning method, used in error messages.
        parameter: Python parameter name.
        annotation: Resolved type hint of the parameter (with extras).

    Returns:
        The ParamBinding for the parameter.

    Raises:
        ConfigurationError: If more than one binding marker is present.
    """
    found: ParamMarker | None = None
    for marker in _markers_of(annotation):
        if found is not None:
            raise ConfigurationError(
                f"Method {method_name} has both {found!r} and {marker!r} annotations "
                f"on parameter '{parameter}', and only one is allowed.",
                metadata={"method": method_name, "parameter": parameter},
            )
        found = marker

    if found is None:
        return ParamBinding(kind=BindingKind.ENTITY, name=None, parameter=parameter)
    return ParamBinding(kind=_kind_of(found), name=found.name, parameter=parameter)


def _kind_of(marker: ParamMarker) -> BindingKind:
    for marker_type, kind in _KIND_BY_MARKER.items():
        if isinstance(marker, marker_type):
            return kind
    raise ConfigurationError(f"Unsupported parameter marker {marker!r}")


def build_method_binding(owner: type, function: Any) -> MethodBinding:
    """Build the MethodBinding for one interface method.

    Args:
        owner: Interface the method belongs to, used in error messages.
        function: The plain function object from the interface.

    Raises:
        ConfigurationError: If the method declaration is invalid.
    """
    method_name = f"{owner.__name__}.{function.__name__}"
    verb = _find_http_method(method_name, function)
    is_locator = verb is None

    try:
        hints = typing.get_type_hints(function, include_extras=True)
    except (NameError, TypeError) as e:
        raise ConfigurationError(
            f"Cannot resolve type hints of {method_name}: {e}",
            metadata={"method": method_name},
        ) from e

    signature = inspect.signature(function)
    parameters = list(signature.parameters.values())[1:]  # drop self

    seen_entity = False
    params: list[ParamBinding] = []
    for parameter in parameters:
        if parameter.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
            raise ConfigurationError(
                f"Variadic parameter '{parameter.name}' is not supported on {method_name}",
                metadata={"method": method_name, "parameter": parameter.name},
            )

        binding = classify_parameter(
            method_name, parameter.name, hints.get(parameter.name, parameter.annotation)
        )
        if binding.is_entity:
            if is_locator:
                raise ConfigurationError(
                    f"Entity parameters are not allowed on sub-resource locator {method_name}",
                    metadata={"method": method_name, "parameter": parameter.name},
                )
            if seen_entity:
                raise ConfigurationError(
                    f"Too many entity parameters on method {method_name}",
                    metadata={"method": method_name, "parameter": parameter.name},
                )
            seen_entity = True
        params.append(binding)

    # Unannotated terminal methods return the decoded body
    return_type = hints.get("return", Any)
    if is_locator and (
        "return" not in hints
        or return_type is Any
        or return_type is type(None)
        or not inspect.isclass(return_type)
    ):
        raise ConfigurationError(
            f"Sub-resource locator {method_name} must declare an interface class as return type",
            metadata={"method": method_name},
        )

    path = find_annotation(function, Path)
    produces = find_annotation(function, Produces)
    consumes = find_annotation(function, Consumes)

    return MethodBinding(
        name=function.__name__,
        http_method=verb,
        path=path.value if path else None,
        params=tuple(params),
        produces=produces.value if produces else None,
        consumes=consumes.value if consumes else None,
        return_type=return_type,
        signature=signature.replace(parameters=parameters),
    )


def _find_http_method(method_name: str, function: Any) -> str | None:
    verbs = {a.value for a in annotations_of(function) if isinstance(a, HttpMethod)}
    if len(verbs) > 1:
        raise ConfigurationError(
            f"Method {method_name} declares more than one HTTP method: {sorted(verbs)}",
            metadata={"method": method_name},
        )
    return verbs.pop() if verbs else None


def _markers_of(annotation: Any) -> list[ParamMarker]:
    if get_origin(annotation) in (typing.Union, types.UnionType):
        # Optional[Annotated[...]], as produced for parameters defaulting to None
        return [m for arg in get_args(annotation) for m in _markers_of(arg)]
    if get_origin(annotation) is not typing.Annotated:
        return []
    return [m for m in get_args(annotation)[1:] if isinstance(m, PARAMETER_MARKER_TYPES)]


__all__ = [
    "BindingKind",
    "ParamBinding",
    "MethodBinding",
    "classify_parameter",
    "build_method_binding",
]
