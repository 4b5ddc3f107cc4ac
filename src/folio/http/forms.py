"""Form body parsing: URL-encoded and multipart.

URL-encoded bodies use stdlib ``urllib.parse``; ``multipart/form-data``
bodies are parsed with ``python-multipart``. File parts are skipped, the
site's forms only carry text fields.
"""

from collections.abc import Iterator, Mapping
from typing import Any
from urllib.parse import parse_qs

from python_multipart.multipart import MultipartParser, parse_options_header


class FormData(Mapping[str, str]):
    """Parsed form fields.

    ``__getitem__`` returns the first value for a key and ``get_list``
    returns all values (checkboxes, multi-selects).
    """

    __slots__ = ("_data",)

    def __init__(self, data: dict[str, list[str]] | None = None) -> None:
        object.__setattr__(self, "_data", data or {})

    def __getitem__(self, key: str) -> str:
        return self._data[key][0]

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        items = ", ".join(f"{k!r}: {self[k]!r}" for k in self)
        return f"FormData({{{items}}})"

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        """Return the first value for *key*, or *default* if missing."""
        values = self._data.get(key)
        if values:
            return values[0]
        return default

    def get_list(self, key: str) -> list[str]:
        """Return all values for *key*."""
        return list(self._data.get(key, []))


def is_form_content_type(content_type: str | None) -> bool:
    """Whether *content_type* is one of the form encodings we parse."""
    if not content_type:
        return False
    media = content_type.lower().split(";")[0].strip()
    return media in ("application/x-www-form-urlencoded", "multipart/form-data")


def parse_form_data(body: bytes, content_type: str) -> FormData:
    """Parse a form body into FormData.

    Raises:
        ValueError: If the content type is not a form encoding, or a
            multipart body has no boundary.
    """
    media = content_type.lower().split(";")[0].strip()

    if media == "application/x-www-form-urlencoded":
        return _parse_urlencoded(body)

    if media == "multipart/form-data":
        return _parse_multipart(body, content_type)

    msg = f"Unsupported form content type: {content_type!r}"
    raise ValueError(msg)


def _parse_urlencoded(body: bytes) -> FormData:
    return FormData(parse_qs(body.decode("utf-8"), keep_blank_values=True))


def _parse_multipart(body: bytes, content_type: str) -> FormData:
    _, options = parse_options_header(content_type.encode("latin-1"))
    boundary = options.get(b"boundary")
    if boundary is None:
        msg = "Multipart form data missing boundary parameter"
        raise ValueError(msg)

    data: dict[str, list[str]] = {}

    current_data = bytearray()
    current_header = ""
    current_field_name: str | None = None
    current_is_file = False

    def on_part_begin() -> None:
        nonlocal current_data, current_field_name, current_is_file
        current_data = bytearray()
        current_field_name = None
        current_is_file = False

    def on_part_data(chunk: bytes, start: int, end: int) -> None:
        current_data.extend(chunk[start:end])

    def on_part_end() -> None:
        if current_field_name is None or current_is_file:
            return
        value = current_data.decode("utf-8", errors="replace")
        data.setdefault(current_field_name, []).append(value)

    def on_header_field(chunk: bytes, start: int, end: int) -> None:
        nonlocal current_header
        current_header = chunk[start:end].decode("latin-1").lower()

    def on_header_value(chunk: bytes, start: int, end: int) -> None:
        nonlocal current_field_name, current_is_file
        if current_header != "content-disposition":
            return
        _, params = parse_options_header(chunk[start:end])
        name = params.get(b"name")
        if name is not None:
            current_field_name = name.decode("utf-8")
        current_is_file = b"filename" in params

    callbacks: dict[str, Any] = {
        "on_part_begin": on_part_begin,
        "on_part_data": on_part_data,
        "on_part_end": on_part_end,
        "on_header_field": on_header_field,
        "on_header_value": on_header_value,
    }

    parser = MultipartParser(boundary, callbacks)
    parser.write(body)
    parser.finalize()

    return FormData(data)
