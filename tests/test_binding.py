"""Parameter and method binding tests.

These tests verify:
- Each marker classifies into its binding kind with its key name
- Unannotated parameters are entities
- Two markers on one parameter are rejected
- Entity cardinality and locator rules
- Verb, path and media-type overrides are recorded
"""

from __future__ import annotations

from typing import Annotated, Any, Optional

import pytest

from restbind import (
    BindingKind,
    ConfigurationError,
    CookieParam,
    FormParam,
    HeaderParam,
    MatrixParam,
    PathParam,
    QueryParam,
    describe,
)
from restbind.binding import build_method_binding, classify_parameter
from tests.resources import (
    Bar,
    Catalog,
    DoubleMarker,
    EntityOnLocator,
    Foo,
    Product,
    Tenants,
    TwoEntities,
    UntypedLocator,
    Variadic,
)


class TestClassifyParameter:
    """Test single-parameter classification."""

    @pytest.mark.parametrize(
        ("marker", "kind"),
        [
            (PathParam("k"), BindingKind.PATH),
            (QueryParam("k"), BindingKind.QUERY),
            (MatrixParam("k"), BindingKind.MATRIX),
            (HeaderParam("k"), BindingKind.HEADER),
            (FormParam("k"), BindingKind.FORM),
            (CookieParam("k"), BindingKind.COOKIE),
        ],
    )
    def test_marker_kinds(self, marker, kind):
        """Test every marker maps to its kind and carries its key."""
        binding = classify_parameter("m", "value", Annotated[str, marker])
        assert binding.kind is kind
        assert binding.name == "k"
        assert binding.parameter == "value"
        assert binding.is_entity is False

    def test_plain_annotation_is_entity(self):
        """Test a parameter without markers is the entity."""
        binding = classify_parameter("m", "body", dict)
        assert binding.kind is BindingKind.ENTITY
        assert binding.name is None
        assert binding.is_entity is True

    def test_annotated_without_marker_is_entity(self):
        """Test unrelated Annotated metadata does not count as a marker."""
        binding = classify_parameter("m", "body", Annotated[dict, "doc"])
        assert binding.is_entity is True

    def test_optional_annotated_marker(self):
        """Test markers are found inside Optional[Annotated[...]]."""
        binding = classify_parameter("m", "q", Optional[Annotated[str, QueryParam("q")]])
        assert binding.kind is BindingKind.QUERY

    def test_two_markers_rejected(self):
        """Test two markers on one parameter raise ConfigurationError."""
        with pytest.raises(ConfigurationError) as exc_info:
            classify_parameter("Api.lookup", "key", Annotated[str, QueryParam("a"), HeaderParam("b")])

        message = str(exc_info.value)
        assert "Api.lookup" in message
        assert "QueryParam" in message
        assert "HeaderParam" in message

    def test_marker_subclass(self):
        """Test markers subclassing a built-in marker keep its kind."""

        class TenantPath(PathParam):
            pass

        binding = classify_parameter("m", "tenant", Annotated[str, TenantPath("tenant")])
        assert binding.kind is BindingKind.PATH
        assert binding.name == "tenant"

    def test_marker_subclass_in_interface(self):
        """Test interfaces using subclassed markers can be described."""
        params = describe(Tenants).methods["find"].params
        assert [(p.kind, p.name) for p in params] == [(BindingKind.QUERY, "name")]


class TestBuildMethodBinding:
    """Test method binding construction."""

    def test_terminal_method(self):
        """Test a GET method with a path parameter."""
        binding = build_method_binding(Foo, Foo.bar)

        assert binding.name == "bar"
        assert binding.http_method == "GET"
        assert binding.is_sub_resource_locator is False
        assert binding.path == "items/{id}"
        assert [(p.kind, p.name) for p in binding.params] == [(BindingKind.PATH, "id")]
        assert binding.return_type is type(None)

    def test_locator_method(self):
        """Test a method without a verb is a locator returning its interface."""
        binding = build_method_binding(Foo, Foo.sub)

        assert binding.http_method is None
        assert binding.is_sub_resource_locator is True
        assert binding.return_type is Bar
        assert binding.params == ()

    def test_params_follow_signature_order(self):
        """Test bindings keep parameter order and arity."""
        binding = build_method_binding(Catalog, Catalog.search)

        assert [p.parameter for p in binding.params] == ["q", "tags", "limit"]
        assert [p.name for p in binding.params] == ["q", "tag", "limit"]
        assert len(binding.params) == len(binding.signature.parameters)

    def test_signature_excludes_self(self):
        """Test the stored signature has no self parameter."""
        binding = build_method_binding(Catalog, Catalog.search)
        assert "self" not in binding.signature.parameters

    def test_produces_override(self):
        """Test method-level produces is recorded."""
        binding = build_method_binding(Catalog, Catalog.export)
        assert binding.produces == ("text/csv", "text/plain")

        plain = build_method_binding(Catalog, Catalog.search)
        assert plain.produces is None

    def test_consumes_override(self):
        """Test method-level consumes is recorded."""
        binding = build_method_binding(Product, Product.update_notes)
        assert binding.consumes == ("text/markdown",)

    def test_single_entity(self):
        """Test one entity parameter alongside other bindings."""
        binding = build_method_binding(Product, Product.update)

        assert binding.entity_param is not None
        assert binding.entity_param.parameter == "item"
        assert binding.params[1].kind is BindingKind.HEADER

    def test_entity_param_none(self):
        """Test entity_param is None when there is no entity."""
        binding = build_method_binding(Foo, Foo.bar)
        assert binding.entity_param is None

    def test_two_markers_rejected(self):
        """Test two markers on one parameter fail the method."""
        with pytest.raises(ConfigurationError, match="only one is allowed"):
            build_method_binding(DoubleMarker, DoubleMarker.lookup)

    def test_entity_on_locator_rejected(self):
        """Test locators cannot take an entity."""
        with pytest.raises(ConfigurationError, match="not allowed on sub-resource locator"):
            build_method_binding(EntityOnLocator, EntityOnLocator.child)

    def test_two_entities_rejected(self):
        """Test more than one entity parameter fails."""
        with pytest.raises(ConfigurationError, match="Too many entity parameters"):
            build_method_binding(TwoEntities, TwoEntities.create)

    def test_locator_without_return_class_rejected(self):
        """Test a locator must declare its child interface."""
        with pytest.raises(ConfigurationError, match="must declare an interface class"):
            build_method_binding(UntypedLocator, UntypedLocator.somewhere)

    def test_unannotated_terminal_returns_any(self):
        """Test a terminal method without a return annotation decodes the body."""
        from restbind import GET

        class Loose:
            @GET
            def fetch(self): ...

        assert build_method_binding(Loose, Loose.fetch).return_type is Any

    def test_locator_returning_any_rejected(self):
        """Test Any is not an interface class for a locator."""

        class AnyLocator:
            def child(self) -> Any: ...

        with pytest.raises(ConfigurationError, match="must declare an interface class"):
            build_method_binding(AnyLocator, AnyLocator.child)

    def test_variadic_rejected(self):
        """Test *args parameters are not supported."""
        with pytest.raises(ConfigurationError, match="Variadic parameter"):
            build_method_binding(Variadic, Variadic.many)

    def test_conflicting_verbs_rejected(self):
        """Test a method cannot declare two different verbs."""
        from restbind import GET, POST

        class TwoVerbs:
            @GET
            @POST
            def both(self) -> None: ...

        with pytest.raises(ConfigurationError, match="more than one HTTP method"):
            build_method_binding(TwoVerbs, TwoVerbs.both)

    def test_custom_verb(self):
        """Test http_method() creates usable verb markers."""
        from restbind import http_method

        propfind = http_method("propfind")

        class Dav:
            @propfind
            def props(self) -> Any: ...

        binding = build_method_binding(Dav, Dav.props)
        assert binding.http_method == "PROPFIND"
        assert binding.is_sub_resource_locator is False

    def test_error_metadata(self):
        """Test configuration errors carry the method name."""
        with pytest.raises(ConfigurationError) as exc_info:
            build_method_binding(TwoEntities, TwoEntities.create)

        assert exc_info.value.metadata["method"] == "TwoEntities.create"
        assert exc_info.value.metadata["parameter"] == "second"
