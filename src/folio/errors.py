"""folio exception hierarchy.

Shared across the router, request pipeline, templates, and middleware so
every module raises and catches the same types.
"""

from dataclasses import dataclass


class FolioError(Exception):
    """Base for all folio-specific errors."""


class ConfigurationError(FolioError):
    """Raised when application configuration or settings are invalid."""


@dataclass(frozen=True, slots=True)
class HTTPError(FolioError):
    """An error that maps directly to an HTTP status code.

    Raised by the router or middleware. The ASGI handler catches these and
    answers with a plain text body carrying ``detail``.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818
    """404: no route matched the request method and path."""

    def __init__(self, detail: str = "404 Not Found") -> None:
        super().__init__(status=404, detail=detail)


class ResponseAlreadySentError(FolioError):
    """Raised when a Response is sent a second time."""


class TemplateNotBuiltError(FolioError):
    """Raised when ``Template.render()`` is called before ``build()``."""
