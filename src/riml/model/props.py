"""Property allow-lists for every RIML entity type.

The tree builder walks these tables (not the input mapping) so the
fields of each entity are always read in the same order.
"""

RIML_VERSION = "1.0-DRAFT-8"

DEFAULT_METHOD_PREFIX = "handle_"

OPTION_PREFIX = "."

# Marker keys understood by the tag handlers and the builder.
CONTROLLER_MARKER = ".controller"
METHOD_MARKER = ".method"
TRAIT_KEY = ".trait"
TRAITS_KEY = ".traits"
VARS_KEY = ".vars"
PLACEHOLDERS_KEY = ".placeholders"
POLY_KEY = ".includePoly"

PLACEHOLDER_SEPARATOR = "|"

# Allowed in the root document and in routes.
COMMON_PROPS = (
    "title", "description", "controller", "method", "apiType", "authType",
)

ROUTE_PROPS = (
    "name", "path", "http", "responseSchema", "requestSchema", "responseCodes",
    "pathParams", "queryParams", "headers", "tests", "examples",
    "defaultRoute", "redirect", "redirectRoute",
    "virtual", "noPath",
)

# Route props holding a map of sub-entities, and the entity kind of each value.
ROUTE_OBJECT_MAP = {
    "pathParams": "param",
    "queryParams": "param",
    "headers": "param",
    "responseCodes": "response_code",
}

# Route props holding an array of sub-entities.
ROUTE_OBJECT_ARRAY = {
    "tests": "test",
    "examples": "example",
}

HTTP_PROPS = ("GET", "PUT", "POST", "DELETE", "PATCH", "HEAD")

API_PROPS = ("json", "xml")

PARAM_PROPS = ("title", "description", "type", "required", "multiple")

EXAMPLE_PROPS = ("title", "description", "request", "response")

TEST_PROPS = EXAMPLE_PROPS + ("validateRequest", "validateResponse", "authOptions")

# Example/test props that are nested objects.
EXAMPLE_OBJECTS = {
    "request": "request",
    "response": "response",
}

RESPONSE_CODE_PROPS = ("description", "success", "bodySchema")

# apiType and authType force the type used by a test; examples ignore them.
REQUEST_PROPS = (
    "http", "body", "pathParams", "queryParams", "headers", "apiType", "authType",
)

RESPONSE_PROPS = ("code", "body", "type", "class")
