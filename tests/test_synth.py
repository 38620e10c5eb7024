"""Tests for warble.routes.synth: route descriptors from controllers."""

from pathlib import Path

import pytest

from warble.controllers.loader import ClassActions, FlatActions, discover_controllers, load_controller
from warble.controllers.naming import derive_metadata
from warble.controllers.params import params
from warble.routes.synth import (
    build_path,
    describe_action,
    describe_routes,
    enumerate_actions,
    synthesize_routes,
)

from .conftest import write_controller


def _routes(controller):
    return {(r.verb, r.path) for r in synthesize_routes(controller)}


# ---------------------------------------------------------------------------
# build_path
# ---------------------------------------------------------------------------


class TestBuildPath:
    def test_params_appended_in_order(self) -> None:
        assert build_path("", "search", ("a", "b")) == "/search/:a/:b"

    def test_root_when_everything_empty(self) -> None:
        assert build_path("", "") == "/"

    def test_controller_root(self) -> None:
        assert build_path("home", "") == "/home"

    def test_controller_and_action(self) -> None:
        assert build_path("user", "user", ("userId",)) == "/user/user/:userId"

    def test_params_directly_under_controller(self) -> None:
        assert build_path("user", "", ("id",)) == "/user/:id"

    def test_nested_controller(self) -> None:
        assert build_path("admin/reports", "daily") == "/admin/reports/daily"


# ---------------------------------------------------------------------------
# enumerate_actions
# ---------------------------------------------------------------------------


class TestEnumerateActions:
    def test_class_own_functions_only(self) -> None:
        class Base:
            def inherited(self):
                pass

        class Ctrl(Base):
            def __init__(self):
                pass

            def index(self):
                pass

            def _hidden(self):
                pass

            @staticmethod
            def util():
                pass

            @property
            def prop(self):
                return 1

        names = [name for name, _ in enumerate_actions(ClassActions(cls=Ctrl))]
        assert names == ["index", "_hidden"]

    def test_flat_mapping_functions_only(self) -> None:
        def index(ctx):
            pass

        members = {"index": index, "PAGE_SIZE": 20, "__init__": index}
        names = [name for name, _ in enumerate_actions(FlatActions(members=members, label="m"))]
        assert names == ["index"]

    def test_flat_module_excludes_imported_functions(self, controllers_dir: Path) -> None:
        write_controller(controllers_dir, "home.py", """
            from os.path import join

            def index(ctx):
                return join("a", "b")
        """)
        (controller,) = discover_controllers(controllers_dir)
        names = [name for name, _ in enumerate_actions(controller.definition)]
        assert names == ["index"]


# ---------------------------------------------------------------------------
# describe_action
# ---------------------------------------------------------------------------


class TestDescribeAction:
    def test_full_descriptor(self) -> None:
        def get_user(self, user_id):
            pass

        action = describe_action("get_user", get_user)
        assert action.verb == "get"
        assert action.bare_name == "user"
        assert action.params.names == ("user_id",)
        assert action.hidden is False
        assert action.func is get_user

    def test_hidden_params_not_inspected(self) -> None:
        def _broken():
            pass

        action = describe_action("_broken", _broken)
        assert action.hidden is True
        assert action.params.names == ()

    def test_view_name_falls_back_to_raw(self) -> None:
        def index(self):
            pass

        assert describe_action("index", index).view_name == "index"
        assert describe_action("post", index).view_name == "post"

    def test_view_name_uses_bare_name(self) -> None:
        def get_profile(self):
            pass

        assert describe_action("get_profile", get_profile).view_name == "profile"


# ---------------------------------------------------------------------------
# synthesize_routes
# ---------------------------------------------------------------------------


class TestSynthesizeRoutes:
    """End-to-end naming conventions for both controller forms."""

    def test_flat_home_controller(self, controllers_dir: Path) -> None:
        write_controller(controllers_dir, "homeController.py", """
            def index(ctx):
                pass

            def getSomething(ctx):
                pass
        """)
        (controller,) = discover_controllers(controllers_dir)
        assert _routes(controller) == {("get", "/home"), ("get", "/home/something")}

    def test_class_user_controller(self, controllers_dir: Path) -> None:
        write_controller(controllers_dir, "userController.py", """
            class UserController:
                def getUser(self, userId):
                    pass

            controller = UserController
        """)
        (controller,) = discover_controllers(controllers_dir)
        (route,) = synthesize_routes(controller)
        assert route.verb == "get"
        assert route.path == "/user/user/:userId"
        assert route.router_path == "/user/user/{userId}"
        assert route.view_base == "user"

    def test_default_controller_index_is_root(self, controllers_dir: Path) -> None:
        write_controller(controllers_dir, "default.py", """
            def index(ctx):
                pass
        """)
        (controller,) = discover_controllers(controllers_dir)
        assert _routes(controller) == {("get", "/")}

    def test_explicit_default_name_is_root(self) -> None:
        class Home:
            def index(self):
                pass

        controller = load_controller(ClassActions(cls=Home), derive_metadata("x", name="default"))
        assert _routes(controller) == {("get", "/")}

    def test_hidden_actions_excluded(self) -> None:
        class Ctrl:
            def index(self):
                pass

            def _secret(self):
                pass

        controller = load_controller(ClassActions(cls=Ctrl), derive_metadata("ctrl.py"))
        assert [r.action.raw_name for r in synthesize_routes(controller)] == ["index"]

    def test_rest_style_controller(self) -> None:
        class Items:
            def index(self):
                pass

            def post(self):
                pass

            def get(self, item_id):
                pass

            def put(self, item_id):
                pass

            def delete(self, item_id):
                pass

        controller = load_controller(ClassActions(cls=Items), derive_metadata("items.py"))
        assert _routes(controller) == {
            ("get", "/items"),
            ("post", "/items"),
            ("get", "/items/:item_id"),
            ("put", "/items/:item_id"),
            ("delete", "/items/:item_id"),
        }

    def test_explicit_params_shape_path(self) -> None:
        class Archive:
            @params("year", "month")
            def get_posts(self, *parts):
                pass

        controller = load_controller(ClassActions(cls=Archive), derive_metadata("archive.py"))
        (route,) = synthesize_routes(controller)
        assert route.path == "/archive/posts/:year/:month"

    def test_route_name(self) -> None:
        class Ctrl:
            def getUser(self):
                pass

        controller = load_controller(ClassActions(cls=Ctrl), derive_metadata("userController.py"))
        (route,) = synthesize_routes(controller)
        assert route.name == "user.getUser"

    def test_unnamed_root_controller(self) -> None:
        class Ctrl:
            def index(self):
                pass

        controller = load_controller(ClassActions(cls=Ctrl), derive_metadata("controller.py"))
        (route,) = synthesize_routes(controller)
        assert route.path == "/"
        assert route.name == "index"

    def test_descriptor_frozen(self) -> None:
        class Ctrl:
            def index(self):
                pass

        controller = load_controller(ClassActions(cls=Ctrl), derive_metadata("c.py"))
        (route,) = synthesize_routes(controller)
        with pytest.raises(AttributeError):
            route.path = "/other"  # type: ignore[misc]


class TestDescribeRoutes:
    def test_plain_rows(self) -> None:
        class Ctrl:
            def get_user(self, user_id):
                pass

        controller = load_controller(ClassActions(cls=Ctrl), derive_metadata("users.py"))
        rows = describe_routes(synthesize_routes(controller))
        assert rows == [{
            "verb": "GET",
            "path": "/users/user/:user_id",
            "name": "users.get_user",
            "controller": "users",
            "action": "get_user",
            "params": ["user_id"],
        }]
