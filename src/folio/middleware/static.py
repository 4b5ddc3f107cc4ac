"""Static file serving middleware.

Serves files from a directory for paths under a URL prefix (``/static``
for the site's stylesheet and project images). Falls through to the next
handler for everything else.
"""

import mimetypes
from pathlib import Path
from typing import TYPE_CHECKING

from folio.http.response import Response
from folio.middleware.protocol import Next

if TYPE_CHECKING:
    from folio.context import RequestContext


class StaticFiles:
    """Middleware that serves static files from a directory.

    Only GET and HEAD are served. Symlinks are resolved and the final path
    must stay inside the directory, otherwise the answer is 403.

    Usage::

        app.add_middleware(StaticFiles(directory="./static", prefix="/static"))
    """

    __slots__ = ("_cache_control", "_directory", "_prefix")

    def __init__(
        self,
        directory: str | Path,
        prefix: str = "/static",
        *,
        cache_control: str = "public, max-age=3600",
    ) -> None:
        self._directory = Path(directory).resolve()
        self._cache_control = cache_control
        self._prefix = "/" + prefix.strip("/")

    @property
    def prefix(self) -> str:
        return self._prefix

    async def __call__(self, ctx: "RequestContext", next: Next) -> Response:
        """Serve a static file or fall through."""
        request = ctx.request
        if request.method not in ("GET", "HEAD"):
            return await next(ctx)

        path = request.path
        if not path.startswith(self._prefix + "/"):
            return await next(ctx)

        relative = path[len(self._prefix) :].lstrip("/")
        if not relative:
            return await next(ctx)

        file_path = (self._directory / relative).resolve()
        if not file_path.is_relative_to(self._directory):
            return Response(status=403).text("Forbidden")

        if not file_path.is_file():
            return await next(ctx)

        return self._serve_file(file_path)

    def _serve_file(self, file_path: Path) -> Response:
        content_type, _ = mimetypes.guess_type(str(file_path))
        response = Response(
            body=file_path.read_bytes(),
            content_type=content_type or "application/octet-stream",
        )
        response.set_header("cache-control", self._cache_control)
        return response
