"""Tests for wren.routing.router: ordered per-method route tables."""

import logging

import pytest

from wren.errors import ConfigurationError, ConflictError, NotFound
from wren.routing.route import PathSegment
from wren.routing.router import Router, parse_pattern, split_path


def _handler(ctx: object) -> None:
    return None


def _other(ctx: object) -> None:
    return None


class TestParsePattern:
    def test_root(self) -> None:
        assert parse_pattern("/") == ()

    def test_static(self) -> None:
        assert parse_pattern("/api/v2/users") == (
            PathSegment("api"),
            PathSegment("v2"),
            PathSegment("users"),
        )

    def test_params(self) -> None:
        segments = parse_pattern("/users/:userId/orders/:orderId")
        assert [s.is_param for s in segments] == [False, True, False, True]
        assert segments[1].value == "userId"
        assert segments[3].value == "orderId"

    def test_rejects_brace_syntax(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            parse_pattern("/users/{id}")
        assert ":param" in str(exc_info.value)

    def test_rejects_unnamed_param(self) -> None:
        with pytest.raises(ConfigurationError, match="without a name"):
            parse_pattern("/users/:")

    def test_split_ignores_empty_segments(self) -> None:
        assert split_path("//a///b/") == ["a", "b"]


class TestRouterMatch:
    def test_root(self) -> None:
        router = Router()
        router.register("GET", "/", _handler)
        match = router.match("GET", "/")
        assert match.route.handler is _handler
        assert match.path_params == {}

    def test_static_route(self) -> None:
        router = Router()
        router.register("GET", "/hello", _handler)
        assert router.match("GET", "/hello").route.pattern == "/hello"

    def test_trailing_slash_is_ignored(self) -> None:
        router = Router()
        router.register("GET", "/hello", _handler)
        assert router.match("GET", "/hello/").route.handler is _handler

    def test_binds_params(self) -> None:
        router = Router()
        router.register("GET", "/users/:userId/orders/:orderId", _handler)
        match = router.match("GET", "/users/Jalal/orders/2")
        assert match.path_params == {"userId": "Jalal", "orderId": "2"}

    def test_params_bound_as_is(self) -> None:
        # scope["path"] arrives already percent-decoded
        router = Router()
        router.register("GET", "/users/:name", _handler)
        assert router.match("GET", "/users/jalal akbar").path_params == {"name": "jalal akbar"}
        assert router.match("GET", "/users/a%41").path_params == {"name": "a%41"}

    def test_segment_count_must_match(self) -> None:
        router = Router()
        router.register("GET", "/users/:id", _handler)
        with pytest.raises(NotFound):
            router.match("GET", "/users/1/extra")
        with pytest.raises(NotFound):
            router.match("GET", "/users")

    def test_method_is_part_of_the_key(self) -> None:
        router = Router()
        router.register("POST", "/login", _handler)
        with pytest.raises(NotFound):
            router.match("GET", "/login")

    def test_method_is_case_insensitive(self) -> None:
        router = Router()
        router.register("get", "/x", _handler)
        assert router.match("GET", "/x").route.method == "GET"

    def test_not_found_has_empty_detail(self) -> None:
        router = Router()
        with pytest.raises(NotFound) as exc_info:
            router.match("GET", "/nothing")
        assert exc_info.value.status == 404
        assert exc_info.value.detail == ""

    def test_head_falls_back_to_get(self) -> None:
        router = Router()
        router.register("GET", "/page", _handler)
        assert router.match("HEAD", "/page").route.method == "GET"

    def test_explicit_head_wins(self) -> None:
        router = Router()
        router.register("GET", "/page", _handler)
        router.register("HEAD", "/page", _other)
        assert router.match("HEAD", "/page").route.handler is _other


class TestRouterOrdering:
    def test_literal_beats_param_regardless_of_order(self) -> None:
        router = Router()
        router.register("GET", "/users/:id", _handler)
        router.register("GET", "/users/me", _other)
        assert router.match("GET", "/users/me").route.handler is _other
        assert router.match("GET", "/users/42").route.handler is _handler

    def test_fewer_params_first(self) -> None:
        router = Router()
        router.register("GET", "/:a/:b", _handler)
        router.register("GET", "/:a/edit", _other)
        assert router.match("GET", "/x/edit").route.handler is _other

    def test_equal_specificity_keeps_registration_order(self) -> None:
        router = Router()
        router.register("GET", "/a/:x", _handler)
        router.register("GET", "/:y/b", _other)
        # Both match /a/b with one parameter each; the first registered wins
        assert router.match("GET", "/a/b").route.handler is _handler

    def test_routes_in_registration_order(self) -> None:
        router = Router()
        router.register("GET", "/b/:id", _handler)
        router.register("POST", "/a", _handler)
        router.register("GET", "/c", _handler)
        assert [r.pattern for r in router.routes] == ["/b/:id", "/a", "/c"]


class TestRouterDuplicates:
    def test_same_shape_replaces_and_warns(self, caplog: pytest.LogCaptureFixture) -> None:
        router = Router()
        router.register("GET", "/users/:id", _handler)
        with caplog.at_level(logging.WARNING, logger="wren.routing"):
            router.register("GET", "/users/:name", _other)
        match = router.match("GET", "/users/7")
        assert match.route.handler is _other
        assert match.path_params == {"name": "7"}
        assert len(router.routes) == 1
        assert "replaces" in caplog.text

    def test_replacement_keeps_original_position(self) -> None:
        router = Router()
        router.register("GET", "/a/:x", _handler)
        router.register("GET", "/:y/b", _handler)
        router.register("GET", "/a/:z", _other)
        assert router.match("GET", "/a/b").route.handler is _other
        assert [r.pattern for r in router.routes] == ["/a/:z", "/:y/b"]

    def test_strict_router_raises(self) -> None:
        router = Router(strict=True)
        router.register("GET", "/users/:id", _handler)
        with pytest.raises(ConflictError) as exc_info:
            router.register("GET", "/users/:name", _other)
        assert exc_info.value.existing == "/users/:id"
        assert router.match("GET", "/users/1").route.handler is _handler

    def test_same_pattern_other_method_is_not_a_conflict(self) -> None:
        router = Router(strict=True)
        router.register("GET", "/items", _handler)
        router.register("POST", "/items", _other)
        assert router.match("POST", "/items").route.handler is _other
