"""Example resource interfaces used across the test suite.

Valid interfaces:
- Foo / Bar: class path, path parameter, locator chaining
- Catalog / Category / Product: every binding kind, produces overrides,
  pydantic entities
- Filtered: cumulative query locators and path rebinding
- Node: locator returning its own interface
- Tenants: a subclassed parameter marker
- Codes: regex path templates with quantifier braces, an unannotated method

Broken interfaces (one ConfigurationError each):
- DoubleMarker, EntityOnLocator, TwoEntities, UntypedLocator, Variadic
- BrokenChild, reachable only through a locator of BrokenParent
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Annotated, Any

import httpx
from pydantic import BaseModel

from restbind import (
    DELETE,
    GET,
    POST,
    PUT,
    Consumes,
    CookieParam,
    FormParam,
    HeaderParam,
    MatrixParam,
    Path,
    PathParam,
    Produces,
    QueryParam,
)


class Item(BaseModel):
    id: str
    name: str
    price: float = 0.0


# =============================================================================
# Scenario interfaces
# =============================================================================


@Path("api")
class Foo:
    @GET
    @Path("items/{id}")
    def bar(self, id: Annotated[str, PathParam("id")]) -> None: ...

    def sub(self) -> Bar: ...


@Path("children")
class Bar:
    @GET
    @Path("leaf")
    def leaf(self) -> None: ...


@Path("catalog")
@Produces("application/json")
class Catalog:
    @Path("categories/{category}")
    def category(self, category: Annotated[str, PathParam("category")]) -> Category: ...

    @GET
    @Path("search")
    def search(
        self,
        q: Annotated[str, QueryParam("q")],
        tags: Annotated[list[str] | None, QueryParam("tag")] = None,
        limit: Annotated[int | None, QueryParam("limit")] = None,
    ) -> list[Item]: ...

    @GET
    @Path("export")
    @Produces("text/csv", "text/plain")
    def export(self) -> str: ...

    @POST
    @Path("login")
    def login(
        self,
        username: Annotated[str, FormParam("username")],
        password: Annotated[str, FormParam("password")],
    ) -> httpx.Response: ...

    @GET
    @Path("raw")
    def raw(self) -> bytes: ...


class Category:
    @GET
    def list_products(
        self,
        page: Annotated[int, MatrixParam("page")],
        session: Annotated[str | None, CookieParam("session")] = None,
    ) -> list[Item]: ...

    @Path("products/{id}")
    def product(self, id: Annotated[str, PathParam("id")]) -> Product: ...


class Product:
    @GET
    def get(self, trace: Annotated[str | None, HeaderParam("X-Trace-Id")] = None) -> Item: ...

    @PUT
    def update(self, item: Item, trace: Annotated[str, HeaderParam("X-Trace-Id")]) -> Item: ...

    @PUT
    @Path("notes")
    @Consumes("text/markdown")
    def update_notes(self, notes: str) -> None: ...

    @POST
    @Path("review")
    def review(
        self,
        rating: Annotated[int, FormParam("rating")],
        body: Any = None,
    ) -> None: ...

    @DELETE
    def delete(self) -> httpx.Response: ...


class Filtered:
    def where(self, x: Annotated[str, QueryParam("x")]) -> Filtered: ...

    @Path("items/{id}")
    def item(self, id: Annotated[str, PathParam("id")]) -> Filtered: ...

    def rebind(self, id: Annotated[str, PathParam("id")]) -> Filtered: ...

    @GET
    @Path("fetch")
    def fetch(self) -> Any: ...


@Path("node")
class Node:
    def child(self) -> Node: ...

    @GET
    def get(self) -> Any: ...


class AbstractStatus(ABC):
    @GET
    @Path("status")
    @abstractmethod
    def status(self) -> dict[str, Any]: ...


class TenantQuery(QueryParam):
    """Application-defined marker refining QueryParam."""


class Tenants:
    @GET
    @Path("tenants")
    def find(self, name: Annotated[str, TenantQuery("name")]) -> Any: ...


@Path("codes")
class Codes:
    @GET
    @Path("{id: [0-9]{3}}/{suffix: [a-z]{2,4}}")
    def get(
        self,
        id: Annotated[str, PathParam("id")],
        suffix: Annotated[str, PathParam("suffix")],
    ) -> Any: ...

    @GET
    @Path("untyped")
    def untyped(self): ...


# =============================================================================
# Broken interfaces
# =============================================================================


class DoubleMarker:
    @GET
    def lookup(self, key: Annotated[str, QueryParam("key"), HeaderParam("X-Key")]) -> None: ...


class EntityOnLocator:
    def child(self, body: dict[str, Any]) -> Bar: ...


class TwoEntities:
    @POST
    def create(self, first: dict[str, Any], second: dict[str, Any]) -> None: ...


class UntypedLocator:
    @Path("somewhere")
    def somewhere(self): ...


class Variadic:
    @GET
    def many(self, *ids: Annotated[str, QueryParam("id")]) -> None: ...


class BrokenParent:
    @GET
    def ping(self) -> None: ...

    def child(self) -> BrokenChild: ...


class BrokenChild:
    @POST
    def create(self, first: dict[str, Any], second: dict[str, Any]) -> None: ...
