"""Invocation state: the request-building accumulator of a call chain.

A root state is created when the outermost proxy is built. Every proxy call
clones the state it carries, so a locator never shares mutable maps with
its parent and a parent proxy can be reused (even from several threads)
after children were derived from it.
"""

from __future__ import annotations

import warnings
from typing import TYPE_CHECKING, Any

from .binding import BindingKind, ParamBinding
from .exceptions import BindingConflictWarning, InvocationError
from .logging import log_trace, log_warn

if TYPE_CHECKING:
    from .descriptor import ResourceDescriptor
    from .target import RequestTarget

_MULTI_VALUE_TYPES = (list, tuple, set, frozenset)


class InvocationState:
    """Mutable accumulator of request-building data.

    Attributes:
        target: Current request target (immutable, shared by clones).
        paths: Path template values, last write wins.
        queries: Query values per key, in call order.
        matrices: Matrix values per key, in call order.
        headers: Header values per key, in call order.
        cookies: Cookie values per key, in call order.
        forms: Form values per key, as strings, in call order.
        entity: Request body, when has_entity is set.
        accepts_entity: False for states built for locator calls.
    """

    def __init__(self, target: RequestTarget, *, accepts_entity: bool = True) -> None:
        self.target = target
        self.paths: dict[str, Any] = {}
        self.queries: dict[str, list[Any]] = {}
        self.matrices: dict[str, list[Any]] = {}
        self.headers: dict[str, list[Any]] = {}
        self.cookies: dict[str, list[Any]] = {}
        self.forms: dict[str, list[str]] = {}
        self.entity: Any = None
        self.has_entity = False
        self.accepts_entity = accepts_entity

    def clone(self, *, accepts_entity: bool = True) -> InvocationState:
        """Copy the state with independent maps and the same target.

        The entity is not carried over: it belongs to a single terminal call.
        """
        copy = InvocationState(self.target, accepts_entity=accepts_entity)
        copy.paths = dict(self.paths)
        copy.queries = {k: list(v) for k, v in self.queries.items()}
        copy.matrices = {k: list(v) for k, v in self.matrices.items()}
        copy.headers = {k: list(v) for k, v in self.headers.items()}
        copy.cookies = {k: list(v) for k, v in self.cookies.items()}
        copy.forms = {k: list(v) for k, v in self.forms.items()}
        return copy

    def apply_path_template(self, template: str | None) -> None:
        """Append a path segment to the target, if one is given."""
        if template:
            self.target = self.target.path(template)

    def apply_class_path(self, descriptor: ResourceDescriptor) -> None:
        """Append the class-level path of a resource, if it declares one."""
        self.apply_path_template(descriptor.path)

    def apply_path(self, name: str, value: Any) -> None:
        """Set a path template value. A rebinding warns and keeps the new value."""
        if name in self.paths:
            old = self.paths[name]
            message = f"Conflicting values for path parameter '{name}': '{value}' and '{old}'"
            log_warn(message, {"key": name, "old": old, "new": value})
            warnings.warn(message, BindingConflictWarning, stacklevel=2)
        self.paths[name] = value

    def apply_query(self, name: str, value: Any) -> None:
        self.queries.setdefault(name, []).append(value)

    def apply_matrix(self, name: str, value: Any) -> None:
        self.matrices.setdefault(name, []).append(value)

    def apply_header(self, name: str, value: Any) -> None:
        self.headers.setdefault(name, []).append(value)

    def apply_cookie(self, name: str, value: Any) -> None:
        self.cookies.setdefault(name, []).append(value)

    def apply_form(self, name: str, value: Any) -> None:
        self.forms.setdefault(name, []).append(str(value))

    def apply_entity(self, value: Any) -> None:
        """Record the request body.

        Raises:
            InvocationError: If the state belongs to a locator call.
        """
        if not self.accepts_entity:
            raise InvocationError("Entity parameter reached a sub-resource locator call")
        self.entity = value
        self.has_entity = value is not None

    def apply(self, binding: ParamBinding, value: Any) -> None:
        """Route one argument value according to its binding.

        None is skipped for every kind except the entity; collections are
        expanded for the multi-valued kinds.
        """
        log_trace(
            "Applying parameter binding",
            {"kind": binding.kind.value, "name": binding.name, "parameter": binding.parameter},
        )
        kind = binding.kind
        if kind is BindingKind.ENTITY:
            self.apply_entity(value)
            return
        if value is None:
            return

        name = binding.name or binding.parameter
        if kind is BindingKind.PATH:
            self.apply_path(name, value)
            return

        appliers = {
            BindingKind.QUERY: self.apply_query,
            BindingKind.MATRIX: self.apply_matrix,
            BindingKind.HEADER: self.apply_header,
            BindingKind.COOKIE: self.apply_cookie,
            BindingKind.FORM: self.apply_form,
        }
        apply_one = appliers[kind]
        values = value if isinstance(value, _MULTI_VALUE_TYPES) else (value,)
        for item in values:
            if item is not None:
                apply_one(name, item)

    def __repr__(self) -> str:
        return (
            f"InvocationState(target={self.target.path_url!r}, paths={self.paths!r}, "
            f"queries={self.queries!r}, forms={self.forms!r}, has_entity={self.has_entity})"
        )


__all__ = ["InvocationState"]
