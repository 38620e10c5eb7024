"""Tests for warble.controllers.naming: verbs, bare names, controller names."""

from pathlib import PurePath

import pytest

from warble.controllers.naming import (
    ControllerMetadata,
    derive_metadata,
    is_hidden,
    resolve_action_name,
)


# ---------------------------------------------------------------------------
# resolve_action_name
# ---------------------------------------------------------------------------


class TestResolveActionName:
    """Verb inference and prefix stripping."""

    def test_index_maps_to_root(self) -> None:
        assert resolve_action_name("index") == ("get", "")

    def test_verb_only_name_is_collection_action(self) -> None:
        assert resolve_action_name("post") == ("post", "")

    @pytest.mark.parametrize("verb", ["get", "post", "put", "patch", "delete"])
    def test_each_verb_prefix(self, verb: str) -> None:
        assert resolve_action_name(f"{verb}Item") == (verb, "item")

    def test_camel_case_first_char_lowered(self) -> None:
        assert resolve_action_name("getUserProfile") == ("get", "userProfile")

    def test_snake_case_separator_dropped(self) -> None:
        assert resolve_action_name("get_user") == ("get", "user")

    def test_prefix_is_case_insensitive(self) -> None:
        assert resolve_action_name("POSTComment") == ("post", "comment")

    def test_no_prefix_defaults_to_get(self) -> None:
        assert resolve_action_name("search") == ("get", "search")

    def test_name_is_trimmed(self) -> None:
        assert resolve_action_name("  getUser ") == ("get", "user")

    def test_prefixed_index_never_yields_index(self) -> None:
        assert resolve_action_name("getIndex") == ("get", "")

    def test_verb_resolved_from_token_not_whole_word(self) -> None:
        # "getaway" carries the "get" token like any other prefix
        assert resolve_action_name("getaway") == ("get", "away")

    def test_verb_only_uppercase(self) -> None:
        assert resolve_action_name("DELETE") == ("delete", "")


# ---------------------------------------------------------------------------
# is_hidden
# ---------------------------------------------------------------------------


class TestIsHidden:
    def test_underscore_prefix_hidden(self) -> None:
        assert is_hidden("_helper") is True

    def test_dunder_hidden(self) -> None:
        assert is_hidden("__init__") is True

    def test_public_name_visible(self) -> None:
        assert is_hidden("index") is False

    def test_inner_underscore_visible(self) -> None:
        assert is_hidden("get_user") is False


# ---------------------------------------------------------------------------
# derive_metadata
# ---------------------------------------------------------------------------


class TestDeriveMetadata:
    """Controller names come from the relative file path only."""

    def test_controller_suffix_stripped(self) -> None:
        meta = derive_metadata("userController.py")
        assert meta == ControllerMetadata(controller_name="user", view_base="user")

    def test_snake_case_suffix_stripped(self) -> None:
        assert derive_metadata("user_controller.py").controller_name == "user"

    def test_ctrl_suffix_case_insensitive(self) -> None:
        assert derive_metadata("ReportsCTRL.py").controller_name == "Reports"

    def test_plain_name_kept(self) -> None:
        assert derive_metadata("home.py").controller_name == "home"

    def test_nested_path(self) -> None:
        meta = derive_metadata(PurePath("admin") / "reportsController.py")
        assert meta.controller_name == "admin/reports"
        assert meta.view_base == "admin/reports"

    def test_bare_controller_file_mounts_at_root(self) -> None:
        meta = derive_metadata("controller.py")
        assert meta.controller_name == ""
        assert meta.route_segment == ""

    def test_bare_controller_file_in_subdirectory(self) -> None:
        assert derive_metadata("admin/controller.py").controller_name == "admin"

    def test_explicit_name_wins(self) -> None:
        meta = derive_metadata("anything.py", name="default")
        assert meta.controller_name == "default"

    def test_default_maps_to_empty_segment(self) -> None:
        meta = derive_metadata("default.py")
        assert meta.controller_name == "default"
        assert meta.route_segment == ""

    def test_default_controller_suffix(self) -> None:
        assert derive_metadata("defaultController.py").route_segment == ""

    def test_other_names_keep_segment(self) -> None:
        assert derive_metadata("home.py").route_segment == "home"

    def test_frozen(self) -> None:
        meta = derive_metadata("home.py")
        with pytest.raises(AttributeError):
            meta.view_base = "other"  # type: ignore[misc]
