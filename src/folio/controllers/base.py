"""Helpers shared by the site's handlers.

Rejections (bad CSRF token, rate limit, unknown record) flash a
``general`` error plus the submitted input and send the browser back to
the page it came from.
"""

import logging
from collections.abc import Awaitable, Callable, Mapping
from functools import wraps
from typing import Any

from folio.context import RequestContext
from folio.http.response import Response
from folio.middleware.sessions import Session
from folio.security.audit import emit_security_event
from folio.security.csrf import FIELD_NAME
from folio.security.rate_limit import RateLimiter

logger = logging.getLogger("folio.security")

# Rejections answer with this status on the redirect
REJECTED_STATUS = 429

# Never flashed back into a form
_UNECHOED_FIELDS = frozenset({"password", FIELD_NAME})

# Longest value echoed back into a form; the contact message limit
OLD_INPUT_MAX_CHARS = 3000


def flash_errors(session: Session, errors: Mapping[str, list[str]]) -> None:
    session.flash("errors", dict(errors))


def flash_old_input(session: Session, old: Mapping[str, Any]) -> None:
    session.flash(
        "old",
        {
            k: v[:OLD_INPUT_MAX_CHARS] if isinstance(v, str) else v
            for k, v in old.items()
            if k not in _UNECHOED_FIELDS
        },
    )


async def handle_invalid_request(
    ctx: RequestContext,
    error: str,
    old: Mapping[str, Any] | None = None,
) -> Response:
    """Flash *error* and *old*, then redirect to the referring path with 429."""
    if old is None:
        old = await ctx.request.get_all()
    flash_old_input(ctx.sess, old)
    flash_errors(ctx.sess, {"general": [error]})

    logger.warning("Rejected %s %s: %s", ctx.request.method, ctx.request.path, error)
    emit_security_event(
        "request.rejected",
        request=ctx.request,
        user_id=str(ctx.sess.get("user_id")) if ctx.is_logged_in else None,
        details={"reason": error},
    )
    return ctx.redirect(ctx.request.referer_path, REJECTED_STATUS)


def redirect_to_login_with_error(ctx: RequestContext) -> Response:
    flash_errors(ctx.sess, {"general": ["Please login to access this page."]})
    return ctx.redirect("/login")


def is_rate_limited(ctx: RequestContext, limiter: RateLimiter, key: str) -> bool:
    """True if the bucket is full; otherwise record this attempt."""
    if limiter.too_many_attempts(ctx.sess, key):
        emit_security_event(
            "rate_limit.exceeded",
            request=ctx.request,
            details={"bucket": limiter.session_key, "key": key},
        )
        return True
    limiter.hit(ctx.sess, key)
    return False


type Handler = Callable[..., Awaitable[Response]]


def login_required(handler: Handler) -> Handler:
    """Redirect to ``/login`` with a flashed error unless an admin is logged in.

    Usage::

        @login_required
        async def index(ctx: RequestContext) -> Response: ...
    """

    @wraps(handler)
    async def wrapper(ctx: RequestContext, *args: Any) -> Response:
        if not ctx.is_logged_in:
            emit_security_event("auth.required", request=ctx.request)
            return redirect_to_login_with_error(ctx)
        return await handler(ctx, *args)

    return wrapper
