"""Tests for folio.app: registration, middleware order, errors and lifespan."""

from typing import Any

import pytest

from folio.app import App
from folio.config import AppConfig
from folio.context import RequestContext
from folio.http.response import Response
from folio.server.handler import build_chain
from folio.testing import TestClient


def _make_app(**overrides) -> App:
    return App(AppConfig(database_url="sqlite:///:memory:", **overrides), db=None)


class TestRegistration:
    def test_route_decorator_defaults_to_get(self) -> None:
        app = _make_app()

        @app.route("/")
        async def index(ctx):
            return Response().text("ok")

        assert app.routes == [("GET", "/")]

    def test_multiple_methods(self) -> None:
        app = _make_app()

        @app.route("/form", methods=["GET", "post"])
        async def form(ctx):
            return Response().text("ok")

        assert app.routes == [("GET", "/form"), ("POST", "/form")]

    async def test_frozen_after_first_request(self) -> None:
        app = _make_app()

        @app.get("/")
        async def index(ctx):
            return Response().text("ok")

        async with TestClient(app) as client:
            await client.get("/")

        with pytest.raises(RuntimeError, match="Cannot modify"):
            app.add_route("GET", "/late", index)


class TestDispatch:
    async def test_path_params_passed_positionally(self) -> None:
        app = _make_app()

        @app.post("/items/{item_id}/notes/{note_id}")
        async def note(ctx, item_id, note_id):
            return Response().text(f"{item_id}:{note_id}:{ctx.params['note_id']}")

        async with TestClient(app) as client:
            response = await client.post("/items/3/notes/9")
        assert response.text == "3:9:9"

    async def test_sync_handler(self) -> None:
        app = _make_app()

        @app.get("/sync")
        def sync(ctx):
            return Response().text("sync")

        async with TestClient(app) as client:
            response = await client.get("/sync")
        assert response.text == "sync"

    async def test_non_response_is_500(self) -> None:
        app = _make_app()

        @app.get("/bad")
        async def bad(ctx):
            return "not a response"

        async with TestClient(app) as client:
            response = await client.get("/bad")
        assert response.status == 500
        assert response.text == "Internal Server Error"

    async def test_exception_is_500(self) -> None:
        app = _make_app()

        @app.get("/boom")
        async def boom(ctx):
            raise RuntimeError("boom")

        async with TestClient(app) as client:
            response = await client.get("/boom")
        assert response.status == 500
        assert "boom" not in response.text

    async def test_debug_includes_traceback(self) -> None:
        app = _make_app(debug=True)

        @app.get("/boom")
        async def boom(ctx):
            raise RuntimeError("kaboom")

        async with TestClient(app) as client:
            response = await client.get("/boom")
        assert "RuntimeError: kaboom" in response.text


class TestMiddleware:
    async def test_first_added_runs_outermost(self) -> None:
        app = _make_app()
        calls: list[str] = []

        def make(name: str):
            async def mw(ctx: RequestContext, next) -> Response:
                calls.append(f"{name}:in")
                response = await next(ctx)
                calls.append(f"{name}:out")
                return response

            return mw

        app.add_middleware(make("outer"))
        app.add_middleware(make("inner"))

        @app.get("/")
        async def index(ctx):
            calls.append("handler")
            return Response().text("ok")

        async with TestClient(app) as client:
            await client.get("/")
        assert calls == ["outer:in", "inner:in", "handler", "inner:out", "outer:out"]

    async def test_short_circuit(self) -> None:
        app = _make_app()

        async def deny(ctx, next):
            return Response(status=403).text("no")

        app.add_middleware(deny)

        @app.get("/")
        async def index(ctx):
            raise AssertionError("not reached")

        async with TestClient(app) as client:
            response = await client.get("/")
        assert response.status == 403

    async def test_build_chain_without_middleware(self) -> None:
        async def endpoint(ctx: Any) -> Response:
            return Response().text("direct")

        chain = build_chain((), endpoint)
        response = await chain(None)
        assert response.text_body == "direct"


class TestLifecycle:
    async def test_hooks_run(self) -> None:
        app = _make_app()
        events: list[str] = []

        @app.on_startup
        async def start():
            events.append("start")

        @app.on_shutdown
        def stop():
            events.append("stop")

        async with TestClient(app):
            assert events == ["start"]
        assert events == ["start", "stop"]

    async def test_database_connected_and_migrated(self, tmp_path) -> None:
        app = App(AppConfig(), db=f"sqlite:///{tmp_path / 'app.sqlite'}")
        async with TestClient(app):
            assert app.db is not None and app.db.is_connected
            tables = await app.db.fetch_val(
                "SELECT COUNT(*) FROM sqlite_master WHERE name = 'messages'"
            )
            assert tables == 1
        assert not app.db.is_connected

    async def test_asgi_lifespan(self) -> None:
        app = _make_app()
        incoming = iter([{"type": "lifespan.startup"}, {"type": "lifespan.shutdown"}])
        sent: list[dict[str, Any]] = []

        async def receive():
            return next(incoming)

        async def send(message):
            sent.append(message)

        await app({"type": "lifespan"}, receive, send)
        assert [m["type"] for m in sent] == [
            "lifespan.startup.complete",
            "lifespan.shutdown.complete",
        ]
