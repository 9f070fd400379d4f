import copy

from riml.builder import build_entity, build_route
from riml.document import Document
from riml.model.base import Example, Param, ResponseCode, RouteTest


def _doc(data: dict) -> Document:
    return Document.from_data(data)


class TestRouteCount:
    def test_one_route_per_plain_top_level_key(self):
        doc = _doc({"users": {}, "pets": {"title": "Pets"}, "orders": "anything"})
        assert [r.route_name for r in doc.routes] == ["users", "pets", "orders"]

    def test_null_values_produce_no_route(self):
        doc = _doc({"users": {}, "gone": None})
        assert [r.route_name for r in doc.routes] == ["users"]

    def test_common_props_stay_on_document(self):
        doc = _doc({"title": "API", "apiType": "json", "users": {}})
        assert doc.title == "API"
        assert doc.api_type == "json"
        assert len(doc.routes) == 1


class TestOptions:
    def test_option_keys_never_become_routes(self):
        doc = _doc({".version": 2, ".debug": None, "users": {".cache": "1h"}})
        assert doc.options == {"version": 2}
        assert [r.route_name for r in doc.routes] == ["users"]
        users = doc.routes[0]
        assert users.options == {"cache": "1h"}
        assert users.routes == []


class TestPathInference:
    def test_verb_key_becomes_child_sharing_parent_path(self):
        doc = _doc({"users": {"GET": None}})
        users = doc.routes[0]
        assert users.route_name == "users"
        assert users.path == "users"
        assert len(users.routes) == 1
        get = users.routes[0]
        assert get.route_name == "GET"
        assert get.http == "GET"
        assert get.path is False

    def test_verb_keeps_explicit_path(self):
        doc = _doc({"users": {"POST": {"path": "new", "title": "Create"}}})
        post = doc.routes[0].routes[0]
        assert post.path == "new"
        assert post.http == "POST"
        assert post.title == "Create"

    def test_scalar_verb_value_is_coerced(self):
        doc = _doc({"users": {"DELETE": "remove everything"}})
        delete = doc.routes[0].routes[0]
        assert delete.http == "DELETE"
        assert delete.path is False

    def test_api_type_keys(self):
        doc = _doc({"report": {"json": None, "xml": {"title": "XML report"}}})
        json_route, xml_route = doc.routes[0].routes
        assert json_route.api_type == "json"
        assert json_route.path is False
        assert xml_route.api_type == "xml"
        assert xml_route.title == "XML report"

    def test_no_path_suppresses_default(self):
        doc = _doc({"group": {"noPath": True}})
        assert doc.routes[0].path is None
        assert doc.routes[0].no_path is True

    def test_explicit_path_wins(self):
        doc = _doc({"user": {"path": "{id}"}})
        assert doc.routes[0].path == "{id}"


class TestMarkers:
    def test_controller_marker_names_controller(self):
        doc = _doc({"users": {".controller": True}})
        users = doc.routes[0]
        assert users.controller == "users"
        assert users.method is None
        assert users.options == {"controller": True}

    def test_method_marker_names_method(self):
        doc = _doc({"list": {".method": True}})
        assert doc.routes[0].method == "list"

    def test_null_option_is_skipped(self):
        doc = _doc({".auth": None, "users": {".method": None}})
        assert doc.options == {}
        assert doc.routes[0].options == {}
        assert doc.routes[0].method is None

    def test_explicit_controller_wins(self):
        doc = _doc({"users": {".controller": True, "controller": "UserController"}})
        assert doc.routes[0].controller == "UserController"


class TestSubEntities:
    def test_param_maps(self):
        doc = _doc({
            "user": {
                "pathParams": {"id": {"type": "integer", "required": True, "bogus": 1}},
                "queryParams": {"expand": None},
                "headers": {"X-Token": {"description": "Auth token"}},
            }
        })
        user = doc.routes[0]
        assert isinstance(user.path_params["id"], Param)
        assert user.path_params["id"].param_type == "integer"
        assert user.path_params["id"].required is True
        assert user.query_params["expand"].title is None
        assert user.headers["X-Token"].description == "Auth token"
        assert user.routes == []

    def test_response_codes_keyed_by_string(self):
        doc = _doc({"user": {"responseCodes": {200: {"success": True}, 404: {"description": "Missing"}}}})
        codes = doc.routes[0].response_codes
        assert list(codes) == ["200", "404"]
        assert isinstance(codes["404"], ResponseCode)
        assert codes["200"].success is True

    def test_examples_and_tests(self):
        doc = _doc({
            "users": {
                "examples": [{"title": "List", "response": {"code": 200, "class": "UserList"}}],
                "tests": [{
                    "title": "Create",
                    "request": {"http": "POST", "body": {"name": "a"}, "authType": "token"},
                    "validateRequest": True,
                }],
            }
        })
        users = doc.routes[0]
        example = users.examples[0]
        assert isinstance(example, Example)
        assert example.response.code == 200
        assert example.response.class_name == "UserList"
        assert example.request is None
        test = users.tests[0]
        assert isinstance(test, RouteTest)
        assert test.request.auth_type == "token"
        assert test.validate_request is True

    def test_named_tests_and_examples(self):
        doc = _doc({
            "users": {
                "tests": {"create": {"title": "Create"}, "remove": {"title": "Remove"}},
                "examples": {"listing": {"title": "List"}},
            }
        })
        users = doc.routes[0]
        assert [t.title for t in users.tests] == ["Create", "Remove"]
        assert all(isinstance(t, RouteTest) for t in users.tests)
        assert [e.title for e in users.examples] == ["List"]

    def test_every_entity_points_at_document_root(self):
        doc = _doc({
            "users": {
                "pathParams": {"id": {}},
                "tests": [{"request": {"http": "GET"}}],
                "GET": None,
            }
        })
        users = doc.routes[0]
        assert users.parent is doc
        assert users.root is doc
        assert users.path_params["id"].parent is users
        assert users.path_params["id"].root is doc
        assert users.tests[0].request.parent is users.tests[0]
        assert users.tests[0].request.root is doc
        assert users.routes[0].parent is users
        assert users.routes[0].root is doc


class TestPassThroughValues:
    def test_scalar_props_are_kept_as_written(self):
        doc = _doc({"archive": {"path": 2024, "controller": 7, "GET": {"apiType": 1}}})
        archive = doc.routes[0]
        assert archive.path == 2024
        assert archive.controller == 7
        assert archive.routes[0].api_type == 1

    def test_document_props_are_kept_as_written(self):
        doc = Document.from_text("method: 42\narchive:\n  path: 2024\n")
        assert doc.method == 42
        assert doc.routes[0].path == 2024


class TestSourceUntouched:
    def test_input_mapping_is_not_mutated(self):
        data = {
            "users": {
                ".controller": True,
                "title": "Users",
                "GET": None,
                "json": {"title": "JSON"},
                "pathParams": {"id": {"type": "integer"}},
            },
            ".version": 1,
        }
        before = copy.deepcopy(data)
        _doc(data)
        assert data == before

    def test_unknown_props_on_leaf_entities_are_ignored(self):
        param = build_entity("param", {"type": "string", "typo": "x"})
        assert param.param_type == "string"
        assert not hasattr(param, "typo")


class TestBuildRoute:
    def test_non_mapping_definition_is_empty_route(self):
        doc = Document()
        route = build_route("ping", ["not", "a", "mapping"], doc)
        assert route.path == "ping"
        assert route.routes == []
        assert route.root is doc

    def test_nested_children_keep_source_order(self):
        doc = _doc({"a": {"b": {"c": {}}, "d": {}}})
        assert [r.route_name for r in doc.iter_routes()] == ["a", "b", "c", "d"]
