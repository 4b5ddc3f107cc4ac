"""ASGI handler: translates ASGI scope/messages to folio types.

The only component that touches raw HTTP ASGI messages. Builds the
Request and RequestContext, runs the middleware chain around the router,
and sends the resulting Response exactly once.
"""

from collections.abc import Sequence

from jinja2 import Environment

from folio._internal.asgi import Receive, Scope, Send
from folio.config import AppConfig, Settings
from folio.context import RequestContext
from folio.data.database import Database
from folio.errors import HTTPError
from folio.http.request import Request
from folio.http.response import Response
from folio.middleware.protocol import Middleware, Next
from folio.routing.router import Router
from folio.server.errors import handle_http_error, handle_internal_error
from folio.templating.views import Template


def build_chain(middleware: Sequence[Middleware], endpoint: Next) -> Next:
    """Wrap *endpoint* so the first middleware in the sequence runs outermost."""
    handler = endpoint
    for mw in reversed(middleware):

        async def make_next(ctx: RequestContext, _mw: Middleware = mw, _next: Next = handler) -> Response:
            return await _mw(ctx, _next)

        handler = make_next
    return handler


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    router: Router,
    middleware: Sequence[Middleware],
    config: AppConfig,
    settings: Settings,
    env: Environment,
    db: Database | None = None,
) -> None:
    """Process a single HTTP request through the full pipeline."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive)
    ctx = RequestContext(
        request=request,
        config=config,
        settings=settings,
        template=Template(env),
        db=db,
    )

    try:
        response = await build_chain(middleware, router.dispatch)(ctx)
    except HTTPError as exc:
        response = handle_http_error(exc, request)
    except Exception as exc:
        response = handle_internal_error(exc, request, debug=config.debug)

    await response.send(send)
