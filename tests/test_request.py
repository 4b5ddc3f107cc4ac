"""Tests for folio.http.request: metadata, body parsing and unified input."""

import json
from typing import Any

import pytest

from folio.http.request import Request


def _make_request(
    method: str = "GET",
    path: str = "/",
    *,
    query: bytes = b"",
    headers: list[tuple[bytes, bytes]] | None = None,
    body: bytes = b"",
    scheme: str = "http",
) -> Request:
    sent = False

    async def receive() -> dict[str, Any]:
        nonlocal sent
        if sent:
            return {"type": "http.disconnect"}
        sent = True
        return {"type": "http.request", "body": body, "more_body": False}

    scope = {
        "type": "http",
        "method": method,
        "path": path,
        "query_string": query,
        "headers": headers or [],
        "scheme": scheme,
        "client": ("127.0.0.1", 5000),
    }
    return Request.from_asgi(scope, receive)


FORM = [(b"content-type", b"application/x-www-form-urlencoded")]
JSON = [(b"content-type", b"application/json")]


class TestRequestMetadata:
    def test_basic_fields(self) -> None:
        request = _make_request("post", "/contact")
        assert request.method == "POST"
        assert request.path == "/contact"
        assert request.is_post()
        assert not request.is_get()

    def test_headers_case_insensitive(self) -> None:
        request = _make_request(headers=[(b"X-CSRF-Token", b"abc")])
        assert request.headers["x-csrf-token"] == "abc"
        assert request.get_header("X-CSRF-TOKEN") == "abc"
        assert request.get_header("missing", "d") == "d"

    def test_headers_are_read_only(self) -> None:
        request = _make_request(headers=[(b"referer", b"/")])
        with pytest.raises(TypeError):
            request.headers["referer"] = "/admin"  # type: ignore[index]

    def test_repeated_cookie_headers_are_joined(self) -> None:
        request = _make_request(headers=[(b"cookie", b"a=1"), (b"cookie", b"b=2")])
        assert request.get_cookie("a") == "1"
        assert request.get_cookie("b") == "2"

    def test_double_slash_path_is_kept_literal(self) -> None:
        assert _make_request(path="//evil/about").path == "//evil/about"

    def test_cookies(self) -> None:
        request = _make_request(headers=[(b"cookie", b"a=1; folio_session=xyz")])
        assert request.get_cookie("folio_session") == "xyz"
        assert request.get_cookie("missing", "d") == "d"

    def test_is_secure(self) -> None:
        assert _make_request(scheme="https").is_secure()
        assert not _make_request().is_secure()

    def test_referer_path(self) -> None:
        request = _make_request(headers=[(b"referer", b"http://example.com/contact?x=1")])
        assert request.referer_path == "/contact"

    def test_referer_path_defaults_to_root(self) -> None:
        assert _make_request().referer_path == "/"

    def test_bearer_token(self) -> None:
        request = _make_request(headers=[(b"authorization", b"Bearer s3cret")])
        assert request.bearer_token == "s3cret"


class TestRequestBody:
    async def test_body_is_cached(self) -> None:
        request = _make_request("POST", body=b"hello")
        assert await request.body() == b"hello"
        assert await request.body() == b"hello"

    async def test_form(self) -> None:
        request = _make_request("POST", headers=FORM, body=b"name=Ada&email=ada%40example.com")
        form = await request.form()
        assert form["name"] == "Ada"
        assert form["email"] == "ada@example.com"

    async def test_form_on_non_form_request_is_empty(self) -> None:
        request = _make_request("POST", body=b"name=Ada")
        assert len(await request.form()) == 0

    async def test_json(self) -> None:
        request = _make_request("POST", headers=JSON, body=json.dumps({"a": 1}).encode())
        assert await request.json() == {"a": 1}

    async def test_invalid_json_reads_as_empty(self) -> None:
        request = _make_request("POST", headers=JSON, body=b"{not json")
        assert await request.json() == {}

    async def test_json_on_non_json_request_is_none(self) -> None:
        assert await _make_request("POST", body=b"{}").json() is None


class TestUnifiedInput:
    async def test_json_wins_over_query(self) -> None:
        request = _make_request(
            "POST", query=b"name=query", headers=JSON, body=b'{"name": "json"}'
        )
        assert await request.get_input("name") == "json"

    async def test_form_wins_over_query(self) -> None:
        request = _make_request("POST", query=b"name=query", headers=FORM, body=b"name=form")
        assert await request.get_input("name") == "form"

    async def test_query_fallback(self) -> None:
        request = _make_request(query=b"page=2")
        assert await request.get_input("page") == "2"

    async def test_default(self) -> None:
        assert await _make_request().get_input("missing", "d") == "d"

    async def test_get_all_merges(self) -> None:
        request = _make_request("POST", query=b"a=1&b=1", headers=FORM, body=b"b=2&c=3")
        assert await request.get_all() == {"a": "1", "b": "2", "c": "3"}

    async def test_path_params_join_query(self) -> None:
        request = _make_request("POST", "/admin/messages/5/delete").with_path_params({"id": "5"})
        assert await request.get_input("id") == "5"
