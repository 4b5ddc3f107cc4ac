"""Tests for security audit events."""

import logging

import pytest

from folio.security.audit import SecurityEvent, emit_security_event, set_security_event_sink


class _Req:
    path = "/login"
    method = "POST"


@pytest.fixture
def events():
    captured: list[SecurityEvent] = []
    set_security_event_sink(captured.append)
    yield captured
    set_security_event_sink(None)


class TestSecurityEvents:
    def test_sink_receives_event(self, events) -> None:
        emit_security_event("login.failed", request=_Req(), details={"email": "x@example.com"})
        assert len(events) == 1
        event = events[0]
        assert event.name == "login.failed"
        assert event.path == "/login"
        assert event.method == "POST"
        assert event.details == {"email": "x@example.com"}

    def test_without_request(self, events) -> None:
        emit_security_event("logout", user_id="1")
        assert events[0].path is None
        assert events[0].user_id == "1"

    def test_logged(self, caplog) -> None:
        with caplog.at_level(logging.INFO, logger="folio.security"):
            emit_security_event("auth.required", request=_Req())
        assert "auth.required" in caplog.text

    def test_no_sink_is_fine(self) -> None:
        set_security_event_sink(None)
        emit_security_event("logout")
