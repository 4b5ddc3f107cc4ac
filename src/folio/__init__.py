"""folio: a small portfolio site with a contact form and an admin inbox.

Public pages (home, about, projects, contact), a CSRF-protected contact
form stored in SQLite, and a single-admin area to read, toggle and delete
messages.

Basic usage::

    from folio import create_app

    app = create_app()
    app.run()

Or from the command line::

    folio migrate
    folio run --reload
"""

__version__ = "0.1.0"
__all__ = [
    "App",
    "AppConfig",
    "ConfigurationError",
    "FolioError",
    "HTTPError",
    "Middleware",
    "Next",
    "NotFound",
    "Request",
    "RequestContext",
    "Response",
    "Settings",
    "Template",
    "create_app",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import folio`` fast while providing a clean top-level API.
    """
    if name == "App":
        from folio.app import App

        return App

    if name in ("AppConfig", "Settings"):
        from folio import config as _config

        return getattr(_config, name)

    if name == "Request":
        from folio.http.request import Request

        return Request

    if name == "Response":
        from folio.http.response import Response

        return Response

    if name == "RequestContext":
        from folio.context import RequestContext

        return RequestContext

    if name == "Template":
        from folio.templating.views import Template

        return Template

    if name in ("Middleware", "Next"):
        from folio.middleware import protocol as _mw

        return getattr(_mw, name)

    if name == "create_app":
        from folio.site import create_app

        return create_app

    if name in ("FolioError", "ConfigurationError", "HTTPError", "NotFound"):
        from folio import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
