"""Immutable HTTP request.

Frozen metadata with async body access. Input lookups that need the body
(``get_input``, ``get_form``, ``get_json``, ``get_all``) are async and parse
the body once.
"""

import json as json_module
import re
from collections.abc import AsyncIterator, Iterable, Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any
from urllib.parse import urlsplit

from folio._internal.asgi import Receive, Scope
from folio.http.forms import FormData, is_form_content_type, parse_form_data
from folio.http.query import QueryParams

_BEARER_RE = re.compile(r"Bearer\s(\S+)")


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    Metadata (method, path, headers, query, cookies) is frozen at creation.
    The body is read lazily through ``body()``, ``json()`` and ``form()``
    and cached in ``_cache``.
    """

    method: str
    path: str
    headers: Mapping[str, str]
    query: QueryParams
    cookies: Mapping[str, str]
    scheme: str = "http"
    server: tuple[str, int] | None = None
    client: tuple[str, int] | None = None

    # ASGI receive callable for body streaming
    _receive: Receive | None = field(default=None, repr=False, compare=False)

    # Body and parsed payload cache (the dict is shared by copies)
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    # -- Predicates --

    def is_get(self) -> bool:
        return self.method == "GET"

    def is_post(self) -> bool:
        return self.method == "POST"

    def is_json(self) -> bool:
        """True if the Content-Type names a JSON payload."""
        return "application/json" in (self.content_type or "")

    def is_secure(self) -> bool:
        return self.scheme in ("https", "wss")

    # -- Header helpers --

    @property
    def content_type(self) -> str | None:
        return self.get_header("content-type")

    def get_header(self, name: str, default: str | None = None) -> str | None:
        """Value of header *name*, matched case-insensitively."""
        return self.headers.get(name.lower(), default)

    def get_headers(self) -> dict[str, str]:
        """All headers keyed by lower-cased name."""
        return dict(self.headers)

    @property
    def bearer_token(self) -> str | None:
        """The token from an ``Authorization: Bearer`` header, if present."""
        header = self.get_header("authorization")
        if not header:
            return None
        match = _BEARER_RE.search(header)
        return match.group(1) if match else None

    @property
    def referer_path(self) -> str:
        """Path component of the Referer header, or ``/``."""
        referer = self.get_header("referer") or ""
        return urlsplit(referer).path or "/"

    def get_cookie(self, key: str, default: str | None = None) -> str | None:
        return self.cookies.get(key, default)

    def get_query(self, key: str, default: Any = None) -> Any:
        return self.query.get(key, default)

    # -- Async body access --

    async def body(self) -> bytes:
        """Read the full request body, consuming ASGI receive at most once."""
        if "_body" in self._cache:
            return self._cache["_body"]
        chunks = [chunk async for chunk in self.stream()]
        result = b"".join(chunks)
        self._cache["_body"] = result
        return result

    async def stream(self) -> AsyncIterator[bytes]:
        """Stream the request body in chunks."""
        if self._receive is None:
            return
        while True:
            message = await self._receive()
            chunk = message.get("body", b"")
            if chunk:
                yield chunk
            if not message.get("more_body", False):
                break

    async def json(self) -> dict[str, Any] | None:
        """Decode a JSON object body.

        Returns ``None`` for non-JSON requests. A JSON body that fails to
        decode, or is not an object, reads as an empty dict.
        """
        if "_json" in self._cache:
            return self._cache["_json"]
        result: dict[str, Any] | None = None
        if self.is_json():
            raw = await self.body()
            try:
                decoded = json_module.loads(raw or b"null")
            except ValueError:
                decoded = None
            result = decoded if isinstance(decoded, dict) else {}
        self._cache["_json"] = result
        return result

    async def form(self) -> FormData:
        """Parse a form body. Non-form requests read as an empty FormData."""
        if "_form" in self._cache:
            return self._cache["_form"]
        result = FormData()
        if is_form_content_type(self.content_type):
            raw = await self.body()
            result = parse_form_data(raw, self.content_type or "")
        self._cache["_form"] = result
        return result

    # -- Unified input --

    async def get_input(self, key: str, default: Any = None) -> Any:
        """Look *key* up in the JSON body, then the form body, then the query.

        Returns the first value found, or *default*.
        """
        payload = await self.json()
        if payload is not None and payload.get(key) is not None:
            return payload[key]
        form = await self.form()
        if key in form:
            return form[key]
        if key in self.query:
            return self.query[key]
        return default

    async def get_form(self, key: str, default: Any = None) -> Any:
        form = await self.form()
        return form.get(key, default)

    async def get_json(self, key: str, default: Any = None) -> Any:
        payload = await self.json()
        if payload is None:
            return default
        return payload.get(key, default)

    async def get_all(self) -> dict[str, Any]:
        """Query, form, and JSON input merged (later sources win)."""
        merged: dict[str, Any] = dict(self.query.items())
        merged.update((await self.form()).items())
        merged.update(await self.json() or {})
        return merged

    # -- Factories --

    def with_path_params(self, params: Mapping[str, str]) -> "Request":
        """Return a copy whose query carries the route parameters."""
        if not params:
            return self
        return replace(self, query=self.query.merged(params))

    @classmethod
    def from_asgi(cls, scope: Scope, receive: Receive | None = None) -> "Request":
        """Create a Request from an ASGI scope and receive callable."""
        headers = _collect_headers(scope.get("headers", ()))
        server = scope.get("server")
        client = scope.get("client")
        return cls(
            method=str(scope["method"]).upper(),
            path=scope.get("path") or "/",
            headers=MappingProxyType(headers),
            query=QueryParams(scope.get("query_string", b"")),
            cookies=_parse_cookie_header(headers.get("cookie", "")),
            scheme=scope.get("scheme", "http"),
            server=tuple(server) if server else None,
            client=tuple(client) if client else None,
            _receive=receive,
        )


def _collect_headers(raw: Iterable[tuple[bytes, bytes]]) -> dict[str, str]:
    """Decode ASGI header pairs, keyed by lower-cased name.

    The first value of a repeated header wins, except ``cookie``, whose
    values are joined the way a single header would carry them.
    """
    headers: dict[str, str] = {}
    for raw_name, raw_value in raw:
        name = raw_name.decode("latin-1").lower()
        value = raw_value.decode("latin-1")
        if name not in headers:
            headers[name] = value
        elif name == "cookie":
            headers[name] = f"{headers[name]}; {value}"
    return headers


def _parse_cookie_header(header: str) -> dict[str, str]:
    cookies: dict[str, str] = {}
    for pair in header.split(";"):
        name, sep, value = pair.strip().partition("=")
        if sep and name:
            cookies.setdefault(name, value)
    return cookies
