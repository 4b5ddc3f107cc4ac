"""Tests for folio.routing: path compilation and first-match-wins lookup."""

import pytest

from folio.errors import NotFound
from folio.routing.route import Route, compile_path
from folio.routing.router import Router


async def _first(ctx):
    return "first"


async def _second(ctx):
    return "second"


class TestCompilePath:
    def test_literal(self) -> None:
        pattern, names = compile_path("/about")
        assert names == ()
        assert pattern.fullmatch("/about")
        assert pattern.fullmatch("/about/") is None

    def test_param_matches_digits_only(self) -> None:
        pattern, names = compile_path("/admin/messages/{id}/delete")
        assert names == ("id",)
        assert pattern.fullmatch("/admin/messages/42/delete")
        assert pattern.fullmatch("/admin/messages/abc/delete") is None
        assert pattern.fullmatch("/admin/messages//delete") is None

    def test_literal_parts_are_escaped(self) -> None:
        pattern, _ = compile_path("/files/a.b")
        assert pattern.fullmatch("/files/a.b")
        assert pattern.fullmatch("/files/axb") is None

    def test_multiple_params_keep_order(self) -> None:
        _, names = compile_path("/a/{first}/b/{second}")
        assert names == ("first", "second")

    def test_duplicate_param_rejected(self) -> None:
        with pytest.raises(ValueError, match="Duplicate"):
            compile_path("/a/{id}/b/{id}")


class TestRoute:
    def test_method_is_upper_cased(self) -> None:
        route = Route(method="post", path="/contact", handler=_first)
        assert route.method == "POST"

    def test_match_returns_params(self) -> None:
        route = Route(method="POST", path="/admin/messages/{id}/toggle-read", handler=_first)
        assert route.match("/admin/messages/7/toggle-read") == {"id": "7"}
        assert route.match("/admin/messages/7") is None


class TestRouterMatch:
    def test_first_registered_wins(self) -> None:
        router = Router()
        router.get("/", _first)
        router.get("/", _second)
        router.compile()

        assert router.match("GET", "/").route.handler is _first

    def test_methods_are_separate(self) -> None:
        router = Router()
        router.get("/contact", _first)
        router.post("/contact", _second)
        router.compile()

        assert router.match("GET", "/contact").route.handler is _first
        assert router.match("POST", "/contact").route.handler is _second

    def test_query_string_is_ignored(self) -> None:
        router = Router()
        router.get("/projects", _first)
        router.compile()

        assert router.match("GET", "/projects?page=2").route.path == "/projects"

    def test_params_and_args(self) -> None:
        router = Router()
        router.post("/admin/messages/{id}/delete", _first)
        router.compile()

        match = router.match("POST", "/admin/messages/12/delete")
        assert match.params == {"id": "12"}
        assert match.args == ("12",)

    def test_no_match_raises_not_found(self) -> None:
        router = Router()
        router.get("/about", _first)
        router.compile()

        with pytest.raises(NotFound) as exc_info:
            router.match("GET", "/nope")
        assert exc_info.value.status == 404
        assert exc_info.value.detail == "404 Not Found"

    def test_wrong_method_is_not_found(self) -> None:
        router = Router()
        router.get("/about", _first)
        router.compile()

        with pytest.raises(NotFound):
            router.match("POST", "/about")

    def test_non_numeric_param_is_not_found(self) -> None:
        router = Router()
        router.post("/admin/messages/{id}/delete", _first)
        router.compile()

        with pytest.raises(NotFound):
            router.match("POST", "/admin/messages/abc/delete")

    def test_cannot_add_after_compile(self) -> None:
        router = Router()
        router.compile()
        with pytest.raises(RuntimeError):
            router.get("/", _first)

    def test_routes_listing(self) -> None:
        router = Router()
        router.get("/", _first)
        router.post("/contact", _second)
        assert router.routes == [("GET", "/"), ("POST", "/contact")]
