"""Error responses for the request pipeline.

``HTTPError`` becomes a plain text body with its status. Anything else is
logged with its traceback and answered with a plain 500.
"""

import logging
import traceback

from folio.errors import HTTPError
from folio.http.request import Request
from folio.http.response import Response

logger = logging.getLogger("folio.server")

INTERNAL_ERROR_TEXT = "Internal Server Error"


def handle_http_error(exc: HTTPError, request: Request) -> Response:
    """Map an HTTPError to a text Response."""
    logger.debug("%d %s %s: %s", exc.status, request.method, request.path, exc.detail)

    response = Response(status=exc.status).text(exc.detail or f"Error {exc.status}")
    for name, value in exc.headers:
        response.set_header(name, value)
    return response


def handle_internal_error(exc: Exception, request: Request, *, debug: bool = False) -> Response:
    """Log *exc* and answer 500. With *debug* the traceback is in the body."""
    logger.exception("500 %s %s", request.method, request.path)

    body = INTERNAL_ERROR_TEXT
    if debug:
        body = f"{INTERNAL_ERROR_TEXT}\n\n{''.join(traceback.format_exception(exc))}"
    return Response(status=500).text(body)
