"""Dispatcher and generated resource proxies.

For every interface a concrete proxy class is generated once. It subclasses
the interface and implements each public method as a closure that hands the
call to the Dispatcher together with the InvocationState the proxy carries.

Per call the dispatcher:
1. looks up the MethodBinding by method name
2. clones the carried state and appends the method's path
3. binds the call arguments and routes each through its ParamBinding
4. for a locator, appends the child interface's class path and returns a
   proxy of the child interface (no request is made)
5. for a terminal method, resolves the request and executes it
"""

from __future__ import annotations

import functools
import threading
from typing import Any

from .descriptor import DescriptorRegistry, ResourceDescriptor
from .exceptions import InvocationError
from .logging import log_debug
from .resolver import RequestResolver
from .state import InvocationState
from .transport import Transport
from .types import LogContext

DISPATCHER_ATTR = "_restbind_dispatcher"
DESCRIPTOR_ATTR = "_restbind_descriptor"
STATE_ATTR = "_restbind_state"


class ResourceProxy:
    """Base class of every generated proxy."""

    def __init__(
        self,
        dispatcher: Dispatcher,
        descriptor: ResourceDescriptor,
        state: InvocationState,
    ) -> None:
        object.__setattr__(self, DISPATCHER_ATTR, dispatcher)
        object.__setattr__(self, DESCRIPTOR_ATTR, descriptor)
        object.__setattr__(self, STATE_ATTR, state)

    def __repr__(self) -> str:
        descriptor: ResourceDescriptor = getattr(self, DESCRIPTOR_ATTR)
        state: InvocationState = getattr(self, STATE_ATTR)
        return f"<{descriptor.interface.__name__} proxy for {state.target.path_url}>"


def _proxy_method(name: str, original: Any) -> Any:
    @functools.wraps(original)
    def method(self: ResourceProxy, *args: Any, **kwargs: Any) -> Any:
        dispatcher: Dispatcher = getattr(self, DISPATCHER_ATTR)
        return dispatcher.dispatch(
            getattr(self, DESCRIPTOR_ATTR), getattr(self, STATE_ATTR), name, args, kwargs
        )

    # wraps() copies the abstract flag, which would keep the proxy class abstract
    method.__dict__.pop("__isabstractmethod__", None)
    return method


_proxy_classes: dict[type, type] = {}
_proxy_classes_lock = threading.Lock()


def proxy_class_for(descriptor: ResourceDescriptor) -> type:
    """Get the generated proxy class of an interface, creating it once."""
    interface = descriptor.interface
    with _proxy_classes_lock:
        proxy_class = _proxy_classes.get(interface)
        if proxy_class is None:
            namespace: dict[str, Any] = {"__module__": interface.__module__}
            for name in descriptor.methods:
                namespace[name] = _proxy_method(name, getattr(interface, name))
            metaclass = type(interface)
            proxy_class = metaclass(
                f"{interface.__name__}Proxy", (ResourceProxy, interface), namespace
            )
            _proxy_classes[interface] = proxy_class
        return proxy_class


class Dispatcher:
    """Runtime entry point for proxy calls.

    Attributes:
        transport: Transport executing terminal calls.
        registry: Source of cached resource descriptors.
        resolver: Builds requests for terminal calls.
    """

    def __init__(
        self,
        transport: Transport,
        registry: DescriptorRegistry | None = None,
        resolver: RequestResolver | None = None,
    ) -> None:
        self.transport = transport
        self.registry = registry if registry is not None else DescriptorRegistry.instance()
        self.resolver = resolver or RequestResolver()

    def root_proxy(self, interface: type, base_url: str) -> Any:
        """Build the outermost proxy of an interface.

        Every interface reachable through locators is described up front,
        so a malformed interface fails here rather than on some later call.

        Raises:
            ConfigurationError: If any reachable interface is invalid.
        """
        descriptor = self._describe_graph(interface)
        state = InvocationState(self.transport.target(base_url))
        state.apply_class_path(descriptor)
        log_debug(
            f"Created proxy for {interface.__name__}",
            {"base_url": base_url, "target": state.target.path_url},
        )
        return self.proxy(descriptor, state)

    def proxy(self, descriptor: ResourceDescriptor, state: InvocationState) -> Any:
        """Wrap a state in a proxy of the descriptor's interface."""
        return proxy_class_for(descriptor)(self, descriptor, state)

    def dispatch(
        self,
        descriptor: ResourceDescriptor,
        parent: InvocationState,
        name: str,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
    ) -> Any:
        """Handle one proxy method call.

        Raises:
            InvocationError: If the method has no binding or the arguments
                do not fit its signature.
            RequestConflictError: If a terminal call has forms and an entity.
            TemplateResolutionError: If a path variable is unresolved.
        """
        binding = descriptor.binding_for(name)
        if binding is None:
            raise InvocationError(
                f"No binding for method '{name}' on {descriptor.interface.__name__}",
                metadata={"interface": descriptor.interface.__name__, "method": name},
            )

        try:
            bound = binding.signature.bind(*args, **kwargs)
        except TypeError as e:
            raise InvocationError(
                f"Invalid arguments for {descriptor.interface.__name__}.{name}: {e}",
                metadata={"interface": descriptor.interface.__name__, "method": name},
            ) from e
        bound.apply_defaults()

        is_locator = binding.is_sub_resource_locator
        state = parent.clone(accepts_entity=not is_locator)
        state.apply_path_template(binding.path)
        for param in binding.params:
            state.apply(param, bound.arguments[param.parameter])

        context = LogContext(
            interface=descriptor.interface.__name__,
            method=name,
            http_method=binding.http_method,
        )

        if is_locator:
            child = self.registry.get(binding.return_type)
            state.apply_class_path(child)
            log_debug("Entering sub-resource", context)
            return self.proxy(child, state)

        log_debug("Dispatching terminal call", context)
        request = self.resolver.resolve(state, binding, descriptor)
        return self.transport.invoke(request, binding.return_type)

    def _describe_graph(self, interface: type) -> ResourceDescriptor:
        root = self.registry.get(interface)
        pending = [root]
        seen = {interface}
        while pending:
            descriptor = pending.pop()
            for binding in descriptor.methods.values():
                child = binding.return_type
                if binding.is_sub_resource_locator and child not in seen:
                    seen.add(child)
                    pending.append(self.registry.get(child))
        return root


__all__ = [
    "Dispatcher",
    "ResourceProxy",
    "proxy_class_for",
]
