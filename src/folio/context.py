"""Explicit per-request context.

Every middleware and handler receives a ``RequestContext`` as its first
argument. It carries the request, the session, configuration, the
database handle and a fresh ``Template``, so nothing request-scoped
lives in module globals. Middleware that needs to change what
downstream code sees passes a ``replace()``-d copy to ``next``.
"""

from dataclasses import dataclass, field, replace
from typing import Any

from folio.config import AppConfig, Settings
from folio.data.database import Database
from folio.errors import ConfigurationError
from folio.http.request import Request
from folio.http.response import Response
from folio.middleware.sessions import Session
from folio.security.csrf import FIELD_NAME, HEADER_NAME, SESSION_KEY, get_token, tokens_match
from folio.templating.views import Template


@dataclass(frozen=True, slots=True)
class RequestContext:
    """Everything a handler needs for one request.

    ``session`` is ``None`` until ``SessionMiddleware`` has run.
    ``params`` holds the matched route parameters in path order.
    """

    request: Request
    config: AppConfig
    settings: Settings
    template: Template
    session: Session | None = None
    db: Database | None = None
    params: dict[str, str] = field(default_factory=dict)

    def with_params(self, params: dict[str, str]) -> "RequestContext":
        """Copy carrying route *params*, also merged into the request query."""
        return replace(self, request=self.request.with_path_params(params), params=dict(params))

    # -- Required collaborators --

    @property
    def sess(self) -> Session:
        """The session, or ``ConfigurationError`` if sessions are not installed."""
        if self.session is None:
            msg = "No active session. Add SessionMiddleware to the app."
            raise ConfigurationError(msg)
        return self.session

    @property
    def database(self) -> Database:
        if self.db is None:
            msg = "No database configured for this app."
            raise ConfigurationError(msg)
        return self.db

    # -- Auth --

    @property
    def is_logged_in(self) -> bool:
        return self.session is not None and "user_id" in self.session

    @property
    def user_email(self) -> str | None:
        if self.session is None:
            return None
        return self.session.get("user_email")

    # -- CSRF --

    def csrf_token(self) -> str:
        """The session's CSRF token, created on first use."""
        return get_token(self.sess)

    async def validate_csrf_token(self) -> bool:
        """Compare the submitted token with the session's.

        The token is read from the ``X-CSRF-Token`` header, else from the
        ``_token`` input. An absent session token never validates.
        """
        expected = self.sess.get(SESSION_KEY)
        submitted = self.request.get_header(HEADER_NAME)
        if submitted is None:
            submitted = await self.request.get_input(FIELD_NAME)
        return tokens_match(expected, submitted)

    # -- Responses --

    def render(self, view: str, **data: Any) -> Response:
        """Render *view* into a new Response.

        Pulls the ``success``, ``errors`` and ``old`` flash entries and adds
        the request, CSRF token and login state to the template data.
        Explicit *data* wins over those defaults.
        """
        session = self.sess
        context: dict[str, Any] = {
            "success": session.pull_flash("success", ""),
            "errors": session.pull_flash("errors", {}),
            "old": session.pull_flash("old", {}),
            "request": self.request,
            "csrf_token": self.csrf_token(),
            "is_logged_in": self.is_logged_in,
            "user_email": self.user_email,
            "current_path": self.request.path,
        }
        context.update(data)

        response = Response()
        response.set_template(self.template, view, context)
        return response

    def redirect(self, url: str, status: int = 302) -> Response:
        return Response().redirect(url, status)
