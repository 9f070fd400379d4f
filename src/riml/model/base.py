"""Typed entities of a compiled RIML route tree.

Attributes use snake_case; aliases carry the camelCase property names
used in RIML documents, and dumps are meant to be produced with
``by_alias=True``. Every entity keeps non-serialized ``parent`` and
``root`` back-references for downstream lookups of options and traits.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr


class RimlEntity(BaseModel):
    """Common base: alias handling and parent/root back-references."""

    model_config = ConfigDict(populate_by_name=True)

    _parent: Any = PrivateAttr(default=None)
    _root: Any = PrivateAttr(default=None)

    @property
    def parent(self) -> Any:
        return self._parent

    @property
    def root(self) -> Any:
        return self._root

    def attach(self, parent: Any) -> None:
        """Link this entity (and the sub-entities it holds) under ``parent``."""
        self._parent = parent
        self._root = parent.root
        for child in self.children():
            child.attach(self)

    def children(self):
        """Yield the entities held directly in this entity's fields."""
        for name in type(self).model_fields:
            value = getattr(self, name)
            if isinstance(value, RimlEntity):
                yield value
            elif isinstance(value, dict):
                yield from (v for v in value.values() if isinstance(v, RimlEntity))
            elif isinstance(value, list):
                yield from (v for v in value if isinstance(v, RimlEntity))


class Param(RimlEntity):
    """A path, query or header parameter of a route."""

    title: Any = None
    description: Any = None
    param_type: Any = Field(default=None, alias="type")
    required: bool | None = None
    multiple: bool | None = None


class ResponseCode(RimlEntity):
    """One declared status code of a route."""

    description: Any = None
    success: bool | None = None
    body_schema: Any = Field(default=None, alias="bodySchema")


class Request(RimlEntity):
    """Request half of an example or test.

    ``api_type`` and ``auth_type`` force the type used when the request
    is replayed by a test; examples ignore them.
    """

    http: Any = None
    body: Any = None
    path_params: Any = Field(default=None, alias="pathParams")
    query_params: Any = Field(default=None, alias="queryParams")
    headers: Any = None
    api_type: Any = Field(default=None, alias="apiType")
    auth_type: Any = Field(default=None, alias="authType")


class Response(RimlEntity):
    """Response half of an example or test."""

    code: Any = None
    body: Any = None
    content_type: Any = Field(default=None, alias="type")
    class_name: Any = Field(default=None, alias="class")


class Example(RimlEntity):
    """A documented request/response pair."""

    title: Any = None
    description: Any = None
    request: Request | None = None
    response: Response | None = None


class RouteTest(Example):
    """An example that is also replayed as a contract test."""

    validate_request: Any = Field(default=None, alias="validateRequest")
    validate_response: Any = Field(default=None, alias="validateResponse")
    auth_options: Any = Field(default=None, alias="authOptions")


class Route(RimlEntity):
    """One path/handler node of the route tree.

    ``route_name`` is the key the route was declared under; ``name`` is
    the optional explicit ``name`` property. A ``path`` of ``False``
    means the route shares its parent's path.
    """

    route_name: str
    title: Any = None
    description: Any = None
    controller: Any = None
    method: Any = None
    api_type: Any = Field(default=None, alias="apiType")
    auth_type: Any = Field(default=None, alias="authType")

    name: Any = None
    path: Any = None
    http: Any = None
    response_schema: Any = Field(default=None, alias="responseSchema")
    request_schema: Any = Field(default=None, alias="requestSchema")
    response_codes: dict[str, ResponseCode] | None = Field(default=None, alias="responseCodes")
    path_params: dict[str, Param] | None = Field(default=None, alias="pathParams")
    query_params: dict[str, Param] | None = Field(default=None, alias="queryParams")
    headers: dict[str, Param] | None = None
    tests: list[RouteTest] | None = None
    examples: list[Example] | None = None
    default_route: bool = Field(default=False, alias="defaultRoute")
    redirect: Any = None
    redirect_route: Any = Field(default=None, alias="redirectRoute")
    virtual: bool = False
    no_path: bool = Field(default=False, alias="noPath")

    routes: list["Route"] = []
    options: dict[str, Any] = {}

    def has_routes(self) -> bool:
        return len(self.routes) > 0
