"""Row-to-dataclass mapping with type coercion.

Converts dict rows into frozen dataclasses using field introspection.
SQLite hands back integers for booleans and sometimes strings for numbers,
so fields annotated ``int``, ``float``, ``bool`` or ``str`` are coerced.
"""

import dataclasses
import types
from typing import Any, get_args, get_origin, get_type_hints

# Scalar types we know how to coerce from driver values.
_COERCIBLE: dict[type, Any] = {
    int: lambda v: int(v) if v != "" else 0,
    float: lambda v: float(v) if v != "" else 0.0,
    bool: lambda v: bool(int(v)) if isinstance(v, str) else bool(v),
    str: str,
}


def _build_coercion_map(cls: type) -> dict[str, type | None]:
    """Build a {field_name: target_type} map; ``None`` means pass through."""
    hints = get_type_hints(cls)
    result: dict[str, type | None] = {}
    for f in dataclasses.fields(cls):
        annotation = hints.get(f.name, f.type)
        # Unwrap Optional (X | None): coerce to the non-None branch
        if get_origin(annotation) is types.UnionType:
            args = [a for a in get_args(annotation) if a is not type(None)]
            annotation = args[0] if len(args) == 1 else None
        result[f.name] = annotation if annotation in _COERCIBLE else None
    return result


def _coerce(value: Any, target: type | None) -> Any:
    if target is None or value is None:
        return value
    # bool is an int subclass; only skip coercion on an exact type match
    if type(value) is target:
        return value
    return _COERCIBLE[target](value)


def _require_dataclass(cls: type) -> None:
    if not dataclasses.is_dataclass(cls):
        msg = f"{cls.__name__} is not a dataclass; folio.data maps rows to frozen dataclasses"
        raise TypeError(msg)


def map_row[T](cls: type[T], row: dict[str, Any]) -> T:
    """Map a dict row to a dataclass instance.

    Columns without a matching field are ignored, so ``SELECT *`` is fine.

    Raises:
        TypeError: If *cls* is not a dataclass or a required field is missing.
    """
    _require_dataclass(cls)
    coercion = _build_coercion_map(cls)
    return cls(**{k: _coerce(v, coercion[k]) for k, v in row.items() if k in coercion})


def map_rows[T](cls: type[T], rows: list[dict[str, Any]]) -> list[T]:
    _require_dataclass(cls)
    coercion = _build_coercion_map(cls)
    return [
        cls(**{k: _coerce(v, coercion[k]) for k, v in row.items() if k in coercion})
        for row in rows
    ]
