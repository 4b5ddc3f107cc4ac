"""Ordered route table.

Routes are kept per method in registration order. Matching scans that list
and the first full match wins, so register specific patterns first.
"""

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from folio._internal.invoke import invoke
from folio.errors import NotFound
from folio.http.response import Response
from folio.routing.route import Route, RouteMatch

if TYPE_CHECKING:
    from folio.context import RequestContext

logger = logging.getLogger("folio.server")


class Router:
    """Method-keyed route table with first-match-wins lookup.

    Usage::

        router = Router()
        router.get("/", home.index)
        router.post("/admin/messages/{id}/delete", messages.delete)
        router.compile()
        match = router.match("POST", "/admin/messages/7/delete")
    """

    __slots__ = ("_compiled", "_routes")

    def __init__(self) -> None:
        self._routes: dict[str, list[Route]] = {}
        self._compiled = False

    def add(self, method: str, path: str, handler: Callable[..., Any]) -> Route:
        """Register *handler* for *method* and *path*. Must precede compile()."""
        if self._compiled:
            msg = "Cannot add routes after compilation."
            raise RuntimeError(msg)
        route = Route(method=method, path=path, handler=handler)
        self._routes.setdefault(route.method, []).append(route)
        return route

    def get(self, path: str, handler: Callable[..., Any]) -> Route:
        return self.add("GET", path, handler)

    def post(self, path: str, handler: Callable[..., Any]) -> Route:
        return self.add("POST", path, handler)

    def compile(self) -> None:
        """Freeze the router. No more routes can be added."""
        self._compiled = True

    @property
    def routes(self) -> list[tuple[str, str]]:
        """``(method, path)`` pairs in registration order, grouped by method."""
        return [(route.method, route.path) for routes in self._routes.values() for route in routes]

    def match(self, method: str, raw_path: str) -> RouteMatch:
        """Find the first route for *method* whose pattern matches the path.

        The query string, if any, is ignored.

        Raises:
            NotFound: If no route for the method matches the path.
        """
        path = raw_path.split("?", 1)[0]
        for route in self._routes.get(method.upper(), ()):
            params = route.match(path)
            if params is not None:
                return RouteMatch(route=route, params=params)
        raise NotFound("404 Not Found")

    async def dispatch(self, ctx: "RequestContext") -> Response:
        """Match the request in *ctx* and call its handler.

        The handler receives the context (carrying the matched params, also
        merged into the request query) followed by each param in path order.

        Raises:
            NotFound: If nothing matches.
            TypeError: If the handler returns something other than a Response.
        """
        request = ctx.request
        found = self.match(request.method, request.path)
        ctx = ctx.with_params(found.params)

        result = await invoke(found.route.handler, ctx, *found.args)
        if not isinstance(result, Response):
            name = getattr(found.route.handler, "__qualname__", repr(found.route.handler))
            msg = f"Handler {name} returned {type(result).__name__}, expected Response"
            raise TypeError(msg)
        return result
