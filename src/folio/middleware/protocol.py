"""Middleware protocol and Next type alias.

A middleware is any callable matching::

    async def my_mw(ctx: RequestContext, next: Next) -> Response: ...

No base class required. Middleware receives the explicit request context
and passes a (possibly replaced) context down the chain::

    class Timing:
        async def __call__(self, ctx: RequestContext, next: Next) -> Response:
            start = time.monotonic()
            response = await next(ctx)
            response.set_header("x-time", f"{time.monotonic() - start:.3f}")
            return response
"""

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Protocol

from folio.http.response import Response

if TYPE_CHECKING:
    from folio.context import RequestContext

# The next handler in the middleware chain
type Next = Callable[["RequestContext"], Awaitable[Response]]


class Middleware(Protocol):
    """Protocol for folio middleware. Functions and callable objects both fit."""

    async def __call__(self, ctx: "RequestContext", next: Next) -> Response: ...
