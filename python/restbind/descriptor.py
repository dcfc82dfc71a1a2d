"""Resource descriptors.

A ResourceDescriptor is the immutable, per-interface summary of everything
the dispatcher needs: the class-level path and media types and the
MethodBinding of every public method. It is built once per interface and
cached in the DescriptorRegistry.

Example:
    >>> descriptor = describe(ItemResource)
    >>> descriptor.path
    'api'
    >>> descriptor.methods["get_item"].http_method
    'GET'
"""

from __future__ import annotations

import inspect
import threading
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Generic, Protocol

from .annotations import Consumes, Path, Produces, find_annotation
from .binding import MethodBinding, build_method_binding
from .exceptions import ConfigurationError
from .logging import log_debug, log_error

# Bases whose members are never part of a resource interface
_IGNORED_BASES: tuple[type, ...] = (object, Protocol, Generic)


@dataclass(frozen=True)
class ResourceDescriptor:
    """Immutable descriptor of one resource interface.

    Attributes:
        interface: The described interface class.
        path: Class-level path template, if declared.
        produces: Default acceptable media types (empty = unrestricted).
        consumes: Default entity media types (empty = inferred).
        methods: Method name to MethodBinding.
    """

    interface: type
    path: str | None
    produces: tuple[str, ...]
    consumes: tuple[str, ...]
    methods: Mapping[str, MethodBinding]

    def binding_for(self, name: str) -> MethodBinding | None:
        """Get the binding of a method by name."""
        return self.methods.get(name)

    def describe_methods(self) -> list[dict[str, Any]]:
        """Get method info for debugging.

        Returns:
            List of method info dicts.
        """
        return [
            {
                "name": binding.name,
                "http_method": binding.http_method,
                "path": binding.path,
                "locator": binding.is_sub_resource_locator,
                "params": [(p.kind.value, p.name) for p in binding.params],
            }
            for binding in self.methods.values()
        ]


def describe(interface: type) -> ResourceDescriptor:
    """Build the descriptor of an interface.

    Pure function of the interface: no caching, no side effects beyond
    debug logging. Use DescriptorRegistry for memoized access.

    Args:
        interface: Interface class to introspect.

    Returns:
        The ResourceDescriptor.

    Raises:
        ConfigurationError: If the interface or any of its methods is invalid.
    """
    if not inspect.isclass(interface):
        raise ConfigurationError(f"Resource interface must be a class, got {interface!r}")

    methods: dict[str, MethodBinding] = {}
    for name, function in _interface_functions(interface):
        methods[name] = build_method_binding(interface, function)

    path = find_annotation(interface, Path)
    produces = find_annotation(interface, Produces)
    consumes = find_annotation(interface, Consumes)

    descriptor = ResourceDescriptor(
        interface=interface,
        path=path.value if path else None,
        produces=produces.value if produces else (),
        consumes=consumes.value if consumes else (),
        methods=MappingProxyType(methods),
    )
    log_debug(
        f"Described resource interface {interface.__name__}",
        {"path": descriptor.path, "methods": len(methods)},
    )
    return descriptor


def _interface_functions(interface: type) -> list[tuple[str, Any]]:
    """Collect public functions along the MRO, most derived first."""
    functions: dict[str, Any] = {}
    for klass in interface.__mro__:
        if klass in _IGNORED_BASES:
            continue
        for name, member in vars(klass).items():
            if name.startswith("_") or name in functions:
                continue
            if inspect.isfunction(member):
                functions[name] = member
    return list(functions.items())


class DescriptorRegistry:
    """Cache of resource descriptors, one per interface type.

    Implements singleton pattern for process-wide reuse. Descriptors are
    immutable, so cached instances are shared by every proxy of a type.
    Thread-safe for concurrent lookup.

    Example:
        >>> registry = DescriptorRegistry.instance()
        >>> assert registry.get(ItemResource) is registry.get(ItemResource)
    """

    _instance: DescriptorRegistry | None = None
    _instance_lock = threading.Lock()

    def __init__(self) -> None:
        """Initialize an empty registry.

        Prefer DescriptorRegistry.instance() to get the singleton.
        """
        self._descriptors: dict[type, ResourceDescriptor] = {}
        self._lock = threading.RLock()

    @classmethod
    def instance(cls) -> DescriptorRegistry:
        """Get the singleton registry instance."""
        with cls._instance_lock:
            if cls._instance is None:
                cls._instance = cls()
            return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Reset the singleton instance.

        This is primarily for testing to ensure a clean state between tests.
        """
        with cls._instance_lock:
            cls._instance = None

    def get(self, interface: type) -> ResourceDescriptor:
        """Get the descriptor of an interface, building it on first use.

        Raises:
            ConfigurationError: If the interface is invalid. Failures are
                not cached; the error is raised again on the next lookup.
        """
        descriptor = self._descriptors.get(interface)
        if descriptor is not None:
            return descriptor

        with self._lock:
            descriptor = self._descriptors.get(interface)
            if descriptor is None:
                try:
                    descriptor = describe(interface)
                except ConfigurationError as e:
                    log_error(f"Invalid resource interface {interface!r}: {e}", e.to_dict())
                    raise
                self._descriptors[interface] = descriptor
            return descriptor

    def is_described(self, interface: type) -> bool:
        """Check whether a descriptor is cached for the interface."""
        return interface in self._descriptors

    def clear(self) -> None:
        """Drop all cached descriptors."""
        with self._lock:
            self._descriptors.clear()

    def __len__(self) -> int:
        """Return number of cached descriptors."""
        return len(self._descriptors)


__all__ = [
    "ResourceDescriptor",
    "DescriptorRegistry",
    "describe",
]
