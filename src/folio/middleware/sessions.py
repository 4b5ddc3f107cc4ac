"""Session middleware: signed cookie sessions.

Session data is serialized as JSON and signed using ``itsdangerous``. The
loaded ``Session`` is threaded into the request context handed to the rest
of the chain, then re-signed onto the response.

The whole session travels in the cookie, so two concurrent requests from
one client each see the session as it was when they started, and the
response that arrives last decides the client's next cookie.
Logging out sends an empty session, but a copy of an earlier cookie stays
valid until it is older than ``max_age``.
"""

import logging
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any

from itsdangerous import BadSignature, URLSafeTimedSerializer

from folio.errors import ConfigurationError
from folio.http.response import Response, cookie_header
from folio.middleware.protocol import Next

if TYPE_CHECKING:
    from folio.context import RequestContext

logger = logging.getLogger("folio.security")

FLASH_KEY = "_flash"

# Browsers drop a Set-Cookie value longer than this
MAX_COOKIE_BYTES = 4096

# Flash entries given up first when the cookie would be too large
DISPOSABLE_FLASH_KEYS = ("old",)


class Session(dict[str, Any]):
    """Session values plus a one-shot flash bag.

    Behaves as a plain dict for ordinary values. Flash entries live under a
    reserved key and are removed the moment they are read.
    """

    def put(self, key: str, value: Any) -> None:
        """Set *key*, or remove it when *value* is None."""
        if value is None:
            self.pop(key, None)
        else:
            self[key] = value

    def regenerate(self) -> None:
        """Discard every value, flash included."""
        self.clear()

    # -- Flash --

    def flash(self, key: str, value: Any) -> None:
        """Store *value* until the next read of *key*."""
        bag = self.get(FLASH_KEY)
        if not isinstance(bag, dict):
            bag = {}
        bag[key] = value
        self[FLASH_KEY] = bag

    def pull_flash(self, key: str, default: Any = None) -> Any:
        """Read and remove a flash entry."""
        bag = self.get(FLASH_KEY)
        if not isinstance(bag, dict) or key not in bag:
            return default
        value = bag.pop(key)
        if not bag:
            del self[FLASH_KEY]
        return value

    def pull_all_flash(self) -> dict[str, Any]:
        """Read and remove every flash entry."""
        bag = self.pop(FLASH_KEY, None)
        return dict(bag) if isinstance(bag, dict) else {}

    def clear_flash(self) -> None:
        self.pop(FLASH_KEY, None)

    def has_flash(self, key: str) -> bool:
        bag = self.get(FLASH_KEY)
        return isinstance(bag, dict) and key in bag


# -- Configuration --


@dataclass(frozen=True, slots=True)
class SessionConfig:
    """Session middleware configuration.

    ``secret_key`` is required: sessions are signed, not encrypted.
    ``secure=None`` marks the cookie Secure only for https requests.
    """

    secret_key: str
    cookie_name: str = "folio_session"
    max_age: int = 86400  # 24 hours
    path: str = "/"
    domain: str | None = None
    secure: bool | None = None
    httponly: bool = True
    samesite: str = "lax"


# -- Middleware --


class SessionMiddleware:
    """Signed cookie session middleware.

    Reads the session cookie, verifies its signature and age, passes the
    ``Session`` down in the context, then writes it back on the response.

    Usage::

        app.add_middleware(SessionMiddleware(SessionConfig(secret_key="...")))

        @app.get("/visits")
        def visits(ctx):
            ctx.session["visits"] = ctx.session.get("visits", 0) + 1
            return Response().text(str(ctx.session["visits"]))
    """

    __slots__ = ("_config", "_serializer")

    def __init__(self, config: SessionConfig) -> None:
        if not config.secret_key:
            msg = "SessionConfig.secret_key must not be empty."
            raise ConfigurationError(msg)

        self._config = config
        self._serializer = URLSafeTimedSerializer(config.secret_key, salt="folio.session")

    def load(self, cookie_value: str | None) -> Session:
        """Deserialize and verify a session cookie value.

        A missing, tampered, expired or malformed cookie yields an empty
        session.
        """
        if not cookie_value:
            return Session()

        try:
            data = self._serializer.loads(cookie_value, max_age=self._config.max_age)
        except BadSignature:
            logger.debug("Discarding session cookie with a bad or expired signature")
            return Session()

        if not isinstance(data, dict):
            return Session()
        return Session(data)

    def dump(self, session: Session) -> str:
        return self._serializer.dumps(dict(session))

    def _cookie_header(self, session: Session, secure: bool) -> str:
        cfg = self._config
        return cookie_header(
            cfg.cookie_name,
            self.dump(session),
            max_age=cfg.max_age,
            path=cfg.path,
            domain=cfg.domain,
            secure=secure,
            httponly=cfg.httponly,
            samesite=cfg.samesite.capitalize(),
        )

    def _save_session(self, ctx: "RequestContext", response: Response, session: Session) -> Response:
        cfg = self._config
        secure = cfg.secure if cfg.secure is not None else ctx.request.is_secure()
        header = self._cookie_header(session, secure)

        if len(header) > MAX_COOKIE_BYTES:
            dropped = [key for key in DISPOSABLE_FLASH_KEYS if session.has_flash(key)]
            for key in dropped:
                session.pull_flash(key)
            if dropped:
                logger.warning(
                    "Session cookie too large (%d bytes); dropped flash %s",
                    len(header),
                    ", ".join(dropped),
                )
                header = self._cookie_header(session, secure)

        if len(header) > MAX_COOKIE_BYTES:
            logger.warning(
                "Session cookie is %d bytes, over the %d browsers keep; keys: %s",
                len(header),
                MAX_COOKIE_BYTES,
                ", ".join(sorted(session)),
            )
        response.cookies.append(header)
        return response

    async def __call__(self, ctx: "RequestContext", next: Next) -> Response:
        """Load session, dispatch, then save session to response."""
        session = self.load(ctx.request.get_cookie(self._config.cookie_name))
        response = await next(replace(ctx, session=session))

        # Always rewrite the cookie so its signature timestamp slides forward
        return self._save_session(ctx, response, session)
