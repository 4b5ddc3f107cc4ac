"""HTTP response accumulated by handlers and sent exactly once.

A Response is mutable until it is sent: handlers set the status, headers,
cookies, and body, then the server calls ``send()``. A second ``send()``
is a programming error and raises ``ResponseAlreadySentError``.
"""

import json as json_module
import mimetypes
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

from folio._internal.asgi import Send
from folio.errors import ResponseAlreadySentError

if TYPE_CHECKING:
    from folio.templating.views import Template


def _body_allowed(status: int) -> bool:
    """Whether an HTTP status code permits a response body."""
    return not (100 <= status < 200 or status in {204, 304})


def cookie_header(
    name: str,
    value: str,
    *,
    max_age: int,
    path: str = "/",
    domain: str | None = None,
    secure: bool = False,
    httponly: bool = True,
    samesite: str = "Lax",
) -> str:
    """Serialize one ``Set-Cookie`` header value."""
    parts = [f"{name}={value}", f"Max-Age={max_age}", f"Path={path}"]
    if domain:
        parts.append(f"Domain={domain}")
    if secure:
        parts.append("Secure")
    if httponly:
        parts.append("HttpOnly")
    parts.append(f"SameSite={samesite}")
    return "; ".join(parts)


@dataclass(slots=True)
class Response:
    """An HTTP response under construction.

    Header names are stored lower-cased; setting a header again replaces it.
    Cookies are kept as serialized ``Set-Cookie`` values so several can be set.
    """

    body: str | bytes = ""
    status: int = 200
    content_type: str = "text/html; charset=utf-8"
    headers: dict[str, str] = field(default_factory=dict)
    cookies: list[str] = field(default_factory=list)
    _sent: bool = field(default=False, repr=False)

    # -- Setters --

    def set_status(self, status: int) -> None:
        self.status = status

    def set_header(self, name: str, value: str) -> None:
        self.headers[name.lower()] = value

    def set_body(self, body: str | bytes) -> None:
        self.body = body

    def set_cookie(
        self,
        name: str,
        value: str,
        minutes: int = 60,
        *,
        secure: bool = False,
        path: str = "/",
    ) -> None:
        """Attach an HttpOnly, ``SameSite=Lax`` cookie living *minutes* minutes."""
        self.cookies.append(
            cookie_header(name, value, max_age=minutes * 60, path=path, secure=secure)
        )

    def set_template(self, template: "Template", view: str, data: dict[str, Any] | None = None) -> None:
        """Build *view* with *template* and store the composed page as the body."""
        template.build(view, data or {})
        self.body = template.render()

    # -- Body shortcuts --

    def json(self, data: Any) -> "Response":
        self.content_type = "application/json"
        self.body = json_module.dumps(data, ensure_ascii=False, indent=4)
        return self

    def text(self, text: str) -> "Response":
        self.content_type = "text/plain; charset=utf-8"
        self.body = text
        return self

    def redirect(self, url: str, status: int = 302) -> "Response":
        """Point the client at *url*. The body is emptied."""
        self.status = status
        self.set_header("location", url)
        self.body = ""
        return self

    def download(self, filepath: str | Path, filename: str | None = None) -> "Response":
        """Send a file as an attachment, or 404 with a text body if it is absent."""
        path = Path(filepath)
        if not path.is_file():
            self.status = 404
            return self.text("File not found.")

        content = path.read_bytes()
        content_type, _ = mimetypes.guess_type(path.name)
        self.content_type = content_type or "application/octet-stream"
        self.set_header("content-description", "File Transfer")
        self.set_header("content-disposition", f'attachment; filename="{filename or path.name}"')
        self.set_header("cache-control", "must-revalidate")
        self.set_header("pragma", "public")
        self.set_header("expires", "0")
        self.body = content
        return self

    # -- Inspection --

    @property
    def headers_sent(self) -> bool:
        return self._sent

    @property
    def body_bytes(self) -> bytes:
        if isinstance(self.body, str):
            return self.body.encode("utf-8")
        return self.body

    @property
    def text_body(self) -> str:
        if isinstance(self.body, bytes):
            return self.body.decode("utf-8")
        return self.body

    # -- Sending --

    async def send(self, send: Send) -> None:
        """Emit the response as ASGI messages.

        Raises:
            ResponseAlreadySentError: If this response was already sent.
        """
        if self._sent:
            msg = "Response has already been sent."
            raise ResponseAlreadySentError(msg)
        self._sent = True

        body = self.body_bytes if _body_allowed(self.status) else b""

        raw_headers: list[tuple[bytes, bytes]] = [
            (b"content-type", self.content_type.encode("latin-1")),
        ]
        raw_headers.extend(
            (name.encode("latin-1"), value.encode("latin-1"))
            for name, value in self.headers.items()
            if name != "content-length"
        )
        raw_headers.extend(
            (b"set-cookie", cookie.encode("latin-1")) for cookie in self.cookies
        )
        raw_headers.append((b"content-length", str(len(body)).encode("latin-1")))

        await send(
            {
                "type": "http.response.start",
                "status": self.status,
                "headers": raw_headers,
            }
        )
        await send(
            {
                "type": "http.response.body",
                "body": body,
            }
        )
