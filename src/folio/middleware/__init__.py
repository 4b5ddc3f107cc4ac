"""Middleware: callables of the shape ``async (ctx, next) -> Response``."""

from folio.middleware.csrf import CSRFMiddleware
from folio.middleware.protocol import Middleware, Next
from folio.middleware.sessions import Session, SessionConfig, SessionMiddleware
from folio.middleware.static import StaticFiles

__all__ = [
    "CSRFMiddleware",
    "Middleware",
    "Next",
    "Session",
    "SessionConfig",
    "SessionMiddleware",
    "StaticFiles",
]
