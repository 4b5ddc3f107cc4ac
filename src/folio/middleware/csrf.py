"""Per-request CSRF token rotation.

Tokens are stable per session unless this middleware is installed, which
is what ``AppConfig.csrf_rotate_on_get`` does. With it, every GET issues
a fresh token, so only the most recently rendered form can be submitted.

Validation itself happens in the handlers through
``RequestContext.validate_csrf_token()``, because a rejection there is a
flash-and-redirect rather than an error status.

Requires ``SessionMiddleware`` to run first.
"""

from typing import TYPE_CHECKING

from folio.errors import ConfigurationError
from folio.http.response import Response
from folio.middleware.protocol import Next
from folio.security.csrf import rotate_token

if TYPE_CHECKING:
    from folio.context import RequestContext


class CSRFMiddleware:
    """Rotate the session's CSRF token on every GET request."""

    __slots__ = ()

    async def __call__(self, ctx: "RequestContext", next: Next) -> Response:
        if ctx.session is None:
            msg = (
                "CSRFMiddleware requires SessionMiddleware. "
                "Add SessionMiddleware before CSRFMiddleware."
            )
            raise ConfigurationError(msg)

        if ctx.request.is_get():
            rotate_token(ctx.session)
        return await next(ctx)
