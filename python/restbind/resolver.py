"""Request resolution for terminal methods.

Turns a fully populated InvocationState into an HttpRequest:

1. substitute path values into the target's templates
2. apply query and matrix values, preserving per-key order
3. build a form body from form values (conflicts with an explicit entity)
4. pick the acceptable media types (method, then class, then any)
5. attach headers and cookies
6. pick the verb (declared, else GET)
7. encode the entity
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any
from urllib.parse import urlencode

from pydantic import BaseModel, TypeAdapter

from .exceptions import RequestConflictError
from .logging import log_debug

if TYPE_CHECKING:
    from .binding import MethodBinding
    from .descriptor import ResourceDescriptor
    from .state import InvocationState
    from .target import HttpRequest

ANY_MEDIA_TYPE = "*/*"
DEFAULT_HTTP_METHOD = "GET"
FORM_MEDIA_TYPE = "application/x-www-form-urlencoded"
JSON_MEDIA_TYPE = "application/json"
TEXT_MEDIA_TYPE = "text/plain"
OCTET_STREAM_MEDIA_TYPE = "application/octet-stream"

_ANY_ADAPTER: TypeAdapter[Any] = TypeAdapter(Any)


def effective_produces(binding: MethodBinding, descriptor: ResourceDescriptor) -> tuple[str, ...]:
    """Acceptable media types: method override, class default, or any."""
    if binding.produces:
        return binding.produces
    if descriptor.produces:
        return descriptor.produces
    return (ANY_MEDIA_TYPE,)


def effective_consumes(binding: MethodBinding, descriptor: ResourceDescriptor) -> str | None:
    """Entity media type: method override, class default, or None (inferred)."""
    if binding.consumes:
        return binding.consumes[0]
    if descriptor.consumes:
        return descriptor.consumes[0]
    return None


def effective_http_method(binding: MethodBinding) -> str:
    """Declared verb, falling back to GET."""
    return binding.http_method or DEFAULT_HTTP_METHOD


def encode_form(forms: dict[str, list[str]]) -> bytes:
    """URL-encode form values, keeping key and value order."""
    return urlencode([(k, v) for k, values in forms.items() for v in values]).encode("utf-8")


def encode_entity(entity: Any, content_type: str | None) -> tuple[bytes, str]:
    """Encode a request entity.

    Raw ``bytes`` and ``str`` are sent as-is; everything else is JSON
    encoded, pydantic models through their JSON dump.

    Returns:
        Tuple of (content, content type).
    """
    if isinstance(entity, (bytes, bytearray)):
        return bytes(entity), content_type or OCTET_STREAM_MEDIA_TYPE
    if isinstance(entity, str) and (content_type is None or not _is_json(content_type)):
        return entity.encode("utf-8"), content_type or TEXT_MEDIA_TYPE
    if isinstance(entity, BaseModel):
        return entity.model_dump_json().encode("utf-8"), content_type or JSON_MEDIA_TYPE
    payload = json.dumps(_ANY_ADAPTER.dump_python(entity, mode="json"))
    return payload.encode("utf-8"), content_type or JSON_MEDIA_TYPE


def _is_json(content_type: str) -> bool:
    media = content_type.split(";", 1)[0].strip().lower()
    return media == JSON_MEDIA_TYPE or media.endswith("+json")


class RequestResolver:
    """Builds the HttpRequest of a terminal call."""

    def resolve(
        self,
        state: InvocationState,
        binding: MethodBinding,
        descriptor: ResourceDescriptor,
    ) -> HttpRequest:
        """Resolve a populated state into a request.

        Raises:
            TemplateResolutionError: If a path variable has no value.
            RequestConflictError: If both form values and an entity are present.
        """
        target = state.target.resolve_templates(state.paths)
        for name, values in state.queries.items():
            target = target.query_param(name, *values)
        for name, values in state.matrices.items():
            target = target.matrix_param(name, *values)

        content: bytes | None = None
        content_type: str | None = None
        if state.forms:
            if state.has_entity:
                raise RequestConflictError(
                    f"Can't specify form params and entity param on {binding.name}",
                    metadata={"method": binding.name, "forms": sorted(state.forms)},
                )
            content, content_type = encode_form(state.forms), FORM_MEDIA_TYPE
        elif state.has_entity:
            content, content_type = encode_entity(
                state.entity, effective_consumes(binding, descriptor)
            )

        builder = target.request(*effective_produces(binding, descriptor))
        for name, values in state.cookies.items():
            for value in values:
                builder.cookie(name, value)
        builder.headers_from(state.headers)

        request = builder.build(effective_http_method(binding), content, content_type)
        log_debug(
            "Resolved request",
            {"method": binding.name, "http_method": request.method, "url": request.full_url},
        )
        return request


__all__ = [
    "RequestResolver",
    "effective_produces",
    "effective_consumes",
    "effective_http_method",
    "encode_form",
    "encode_entity",
    "ANY_MEDIA_TYPE",
    "DEFAULT_HTTP_METHOD",
    "FORM_MEDIA_TYPE",
]
