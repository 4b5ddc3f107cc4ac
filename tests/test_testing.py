"""Tests for folio.testing: the in-process client and its cookie jar."""

from folio.app import App
from folio.config import AppConfig
from folio.http.response import Response
from folio.testing import TestClient, TestResponse


def _make_app() -> App:
    app = App(AppConfig(), db=None)

    @app.get("/set")
    async def set_cookie(ctx):
        response = Response().text("set")
        response.set_cookie("flavour", "oat")
        return response

    @app.get("/echo")
    async def echo(ctx):
        return Response().text(ctx.request.get_cookie("flavour") or "none")

    @app.post("/form")
    async def form(ctx):
        return Response().text(await ctx.request.get_input("name", "missing"))

    return app


class TestTestResponse:
    def test_header_lookup(self) -> None:
        response = TestResponse(200, (("location", "/x"), ("set-cookie", "a=1; Path=/")), b"")
        assert response.header("Location") == "/x"
        assert response.location == "/x"
        assert response.header("missing", "d") == "d"
        assert response.cookies == {"a": "1"}


class TestTestClient:
    async def test_cookie_jar(self) -> None:
        async with TestClient(_make_app()) as client:
            first = await client.get("/echo")
            await client.get("/set")
            second = await client.get("/echo")
        assert first.text == "none"
        assert second.text == "oat"

    async def test_form_post(self) -> None:
        async with TestClient(_make_app()) as client:
            response = await client.post("/form", form={"name": "Ada"})
        assert response.text == "Ada"

    async def test_json_post(self) -> None:
        async with TestClient(_make_app()) as client:
            response = await client.post("/form", json={"name": "Grace"})
        assert response.text == "Grace"

    async def test_get_on_post_route_is_404(self) -> None:
        async with TestClient(_make_app()) as client:
            response = await client.get("/form?name=Q")
        assert response.status == 404
