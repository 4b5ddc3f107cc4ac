"""Tests for CSRF tokens and the token-rotation middleware."""

import pytest

from folio.context import RequestContext
from folio.errors import ConfigurationError
from folio.http.response import Response
from folio.middleware.csrf import CSRFMiddleware
from folio.middleware.sessions import Session
from folio.security.csrf import SESSION_KEY, get_token, rotate_token, tokens_match


class TestTokens:
    def test_token_is_created_lazily(self) -> None:
        session = Session()
        token = get_token(session)
        assert len(token) == 64
        assert session[SESSION_KEY] == token

    def test_token_is_stable(self) -> None:
        session = Session()
        assert get_token(session) == get_token(session)

    def test_rotate_replaces(self) -> None:
        session = Session()
        first = get_token(session)
        second = rotate_token(session)
        assert first != second
        assert get_token(session) == second

    def test_round_trip_matches(self) -> None:
        session = Session()
        token = get_token(session)
        assert tokens_match(session[SESSION_KEY], token)

    def test_mismatch(self) -> None:
        assert not tokens_match("a" * 64, "b" * 64)

    @pytest.mark.parametrize(
        ("expected", "submitted"),
        [(None, "abc"), ("abc", None), ("", ""), ("abc", ""), (123, "123")],
    )
    def test_absent_or_invalid_never_matches(self, expected, submitted) -> None:
        assert not tokens_match(expected, submitted)


class _FakeRequest:
    def __init__(self, method: str) -> None:
        self.method = method

    def is_get(self) -> bool:
        return self.method == "GET"


def _ctx(method: str, session: Session | None) -> RequestContext:
    return RequestContext(
        request=_FakeRequest(method),  # type: ignore[arg-type]
        config=None,  # type: ignore[arg-type]
        settings=None,  # type: ignore[arg-type]
        template=None,  # type: ignore[arg-type]
        session=session,
    )


async def _ok(ctx: RequestContext) -> Response:
    return Response().text("ok")


class TestCSRFMiddleware:
    async def test_rotates_on_get(self) -> None:
        session = Session({SESSION_KEY: "old"})
        await CSRFMiddleware()(_ctx("GET", session), _ok)
        assert session[SESSION_KEY] != "old"

    async def test_keeps_token_on_post(self) -> None:
        session = Session({SESSION_KEY: "old"})
        await CSRFMiddleware()(_ctx("POST", session), _ok)
        assert session[SESSION_KEY] == "old"

    async def test_requires_session(self) -> None:
        with pytest.raises(ConfigurationError, match="SessionMiddleware"):
            await CSRFMiddleware()(_ctx("GET", None), _ok)
