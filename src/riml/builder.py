"""Route tree builder.

Turns a fully expanded mapping (includes resolved, traits applied) into
typed entities. The input mapping is never modified: recognized fields
are read through the property tables and whatever is left over becomes
child routes or options.
"""

from collections.abc import Mapping
from typing import Any

from riml.model.base import (
    Example,
    Param,
    Request,
    Response,
    ResponseCode,
    RimlEntity,
    Route,
    RouteTest,
)
from riml.model.props import (
    API_PROPS,
    COMMON_PROPS,
    CONTROLLER_MARKER,
    EXAMPLE_OBJECTS,
    EXAMPLE_PROPS,
    HTTP_PROPS,
    METHOD_MARKER,
    OPTION_PREFIX,
    PARAM_PROPS,
    REQUEST_PROPS,
    RESPONSE_CODE_PROPS,
    RESPONSE_PROPS,
    ROUTE_OBJECT_ARRAY,
    ROUTE_OBJECT_MAP,
    ROUTE_PROPS,
    TEST_PROPS,
)

# kind -> (model class, allowed props, props holding a nested entity)
ENTITIES: dict[str, tuple[type[RimlEntity], tuple[str, ...], dict[str, str]]] = {
    "param": (Param, PARAM_PROPS, {}),
    "response_code": (ResponseCode, RESPONSE_CODE_PROPS, {}),
    "request": (Request, REQUEST_PROPS, {}),
    "response": (Response, RESPONSE_PROPS, {}),
    "example": (Example, EXAMPLE_PROPS, EXAMPLE_OBJECTS),
    "test": (RouteTest, TEST_PROPS, EXAMPLE_OBJECTS),
}

ROUTE_FLAGS = ("virtual", "noPath", "defaultRoute")


def build_entity(kind: str, raw: Any, parent: RimlEntity | None = None) -> RimlEntity:
    """Build a leaf entity (param, response code, example, test, request, response)."""
    cls, props, objects = ENTITIES[kind]
    values = _extract(_as_mapping(raw), props, objects=objects)
    entity = cls.model_validate(values)
    if parent is not None:
        entity.attach(parent)
    return entity


def build_route(route_name: str, raw: Any, parent: RimlEntity) -> Route:
    """Build one route and, recursively, all of its children."""
    rdef = _as_mapping(raw)
    values = _extract(
        rdef,
        COMMON_PROPS + ROUTE_PROPS,
        maps=ROUTE_OBJECT_MAP,
        arrays=ROUTE_OBJECT_ARRAY,
    )
    consumed = set(values)
    for flag in ROUTE_FLAGS:
        if flag in values and values[flag] is None:
            del values[flag]

    if rdef.get(CONTROLLER_MARKER) and "controller" not in values:
        values["controller"] = route_name
    if rdef.get(METHOD_MARKER) and "method" not in values:
        values["method"] = route_name
    if "path" not in values and not values.get("noPath"):
        values["path"] = route_name

    values["route_name"] = route_name
    route = Route.model_validate(values)
    route.attach(parent)

    remaining = {key: value for key, value in rdef.items() if key not in consumed}
    _promote(remaining, HTTP_PROPS, "http")
    _promote(remaining, API_PROPS, "apiType")
    add_routes(route, remaining)
    return route


def add_routes(entity: RimlEntity, rdef: Mapping) -> None:
    """Add every remaining key of ``rdef`` to ``entity`` as an option or child route."""
    for key, value in rdef.items():
        if value is None:
            continue
        key = str(key)
        if key.startswith(OPTION_PREFIX):
            entity.options[key[len(OPTION_PREFIX):]] = value
            continue
        entity.routes.append(build_route(key, value, entity))


def _promote(rdef: dict, keys: tuple[str, ...], field: str) -> None:
    """Turn virtual keys (HTTP verbs, API types) into child routes sharing the parent path."""
    for key in keys:
        if key not in rdef:
            continue
        value = rdef[key]
        value = dict(value) if isinstance(value, Mapping) else {}
        value[field] = key
        value.setdefault("path", False)
        rdef[key] = value


def _extract(
    raw: Mapping,
    props: tuple[str, ...],
    objects: dict[str, str] | None = None,
    maps: dict[str, str] | None = None,
    arrays: dict[str, str] | None = None,
) -> dict[str, Any]:
    """Copy the allowed props out of ``raw``, building sub-entities where the tables say so.

    Sub-entities are built unattached; ``RimlEntity.attach`` links them once
    their owner exists.
    """
    objects = objects or {}
    maps = maps or {}
    arrays = arrays or {}
    values: dict[str, Any] = {}
    for pname in props:
        if pname not in raw:
            continue
        value = raw[pname]
        if pname in maps:
            value = {
                str(key): build_entity(maps[pname], item)
                for key, item in _as_mapping(value).items()
            }
        elif pname in arrays:
            if isinstance(value, Mapping):
                value = list(value.values())
            elif not isinstance(value, list):
                value = []
            value = [build_entity(arrays[pname], item) for item in value]
        elif pname in objects and value is not None:
            value = build_entity(objects[pname], value)
        values[pname] = value
    return values


def _as_mapping(value: Any) -> Mapping:
    return value if isinstance(value, Mapping) else {}
