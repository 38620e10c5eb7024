"""Tests for warble.controllers.params: path parameters from signatures."""

import pytest

from warble._errors import ConfigError
from warble.controllers.params import ActionParams, extract_params, params


# ---------------------------------------------------------------------------
# extract_params: signature inference
# ---------------------------------------------------------------------------


class TestExtractParams:
    """The first parameter receives the context; the rest are path captures."""

    def test_no_params(self) -> None:
        def index(self):
            pass

        assert extract_params(index).names == ()

    def test_declaration_order_preserved(self) -> None:
        def search(ctx, a, b):
            pass

        assert extract_params(search).names == ("a", "b")

    def test_bound_method_skips_nothing_extra(self) -> None:
        class C:
            def get_user(self, user_id):
                pass

        assert extract_params(C.get_user).names == ("user_id",)

    def test_var_args_ignored(self) -> None:
        def show(ctx, slug, *rest, **extra):
            pass

        assert extract_params(show).names == ("slug",)

    def test_keyword_only_with_default_ignored(self) -> None:
        def show(ctx, slug, *, preview=False):
            pass

        assert extract_params(show).names == ("slug",)

    def test_required_keyword_only_rejected(self) -> None:
        def show(ctx, *, slug):
            pass

        with pytest.raises(ConfigError, match="keyword-only"):
            extract_params(show)

    def test_missing_context_parameter_rejected(self) -> None:
        def index():
            pass

        with pytest.raises(ConfigError, match="dispatch context"):
            extract_params(index)

    def test_annotations_become_converters(self) -> None:
        def page(ctx, number: int, slug: str, raw):
            pass

        result = extract_params(page)
        assert result.types == (int, None, None)

    def test_string_annotations_evaluated(self) -> None:
        def page(ctx, number: "int"):
            pass

        assert extract_params(page).types == (int,)


# ---------------------------------------------------------------------------
# @params: explicit declaration
# ---------------------------------------------------------------------------


class TestParamsDecorator:
    def test_declaration_used(self) -> None:
        @params("year", "month")
        def archive(ctx, year: int, month: int):
            pass

        result = extract_params(archive)
        assert result.names == ("year", "month")
        assert result.types == (int, int)

    def test_fewer_names_allowed_when_rest_default(self) -> None:
        @params("slug")
        def show(ctx, slug, page=1):
            pass

        assert extract_params(show).names == ("slug",)

    def test_missing_required_parameter_rejected(self) -> None:
        @params("slug")
        def show(ctx, slug, page):
            pass

        with pytest.raises(ConfigError, match="missing from its declared"):
            extract_params(show)

    def test_out_of_order_rejected(self) -> None:
        @params("b", "a")
        def show(ctx, a, b):
            pass

        with pytest.raises(ConfigError, match="position 0"):
            extract_params(show)

    def test_unknown_name_rejected(self) -> None:
        @params("slug", "extra")
        def show(ctx, slug):
            pass

        with pytest.raises(ConfigError, match="does not accept"):
            extract_params(show)

    def test_var_args_accepts_extra_names(self) -> None:
        @params("first", "second")
        def show(ctx, *parts):
            pass

        assert extract_params(show).names == ("first", "second")

    def test_invalid_identifier_rejected(self) -> None:
        with pytest.raises(ConfigError, match="not a valid identifier"):
            params("not-valid")


# ---------------------------------------------------------------------------
# ActionParams.bind
# ---------------------------------------------------------------------------


class TestBind:
    def test_reads_in_declared_order(self) -> None:
        ap = ActionParams(names=("b", "a"), types=(None, None))
        assert ap.bind({"a": "1", "b": "2"}) == ["2", "1"]

    def test_converts_with_annotation(self) -> None:
        ap = ActionParams(names=("n",), types=(int,))
        assert ap.bind({"n": "42"}) == [42]

    def test_failed_conversion_keeps_string(self) -> None:
        ap = ActionParams(names=("n",), types=(int,))
        assert ap.bind({"n": "abc"}) == ["abc"]

    def test_empty(self) -> None:
        assert ActionParams().bind({"ignored": "x"}) == []
