"""Route and RouteMatch frozen dataclasses."""

import re
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

_PARAM_RE = re.compile(r"\{([A-Za-z_][A-Za-z0-9_]*)\}")


def compile_path(path: str) -> tuple[re.Pattern[str], tuple[str, ...]]:
    """Compile a route path into a full-match regex.

    Each ``{name}`` placeholder matches one or more digits and is captured
    as a named group. Everything else is matched literally::

        "/admin/messages/{id}/toggle-read"
        -> ^/admin/messages/(?P<id>\\d+)/toggle\\-read$

    Returns the pattern and the parameter names in path order.
    """
    parts: list[str] = []
    names: list[str] = []
    last = 0
    for match in _PARAM_RE.finditer(path):
        parts.append(re.escape(path[last : match.start()]))
        name = match.group(1)
        if name in names:
            msg = f"Duplicate route parameter {name!r} in {path!r}"
            raise ValueError(msg)
        names.append(name)
        parts.append(rf"(?P<{name}>\d+)")
        last = match.end()
    parts.append(re.escape(path[last:]))
    return re.compile("".join(parts)), tuple(names)


@dataclass(frozen=True, slots=True)
class Route:
    """A frozen route definition.

    The handler is stored as a callable, never as a name to resolve later.
    """

    method: str
    path: str
    handler: Callable[..., Any]
    pattern: re.Pattern[str] = field(init=False, repr=False, compare=False)
    param_names: tuple[str, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        pattern, names = compile_path(self.path)
        object.__setattr__(self, "method", self.method.upper())
        object.__setattr__(self, "pattern", pattern)
        object.__setattr__(self, "param_names", names)

    def match(self, path: str) -> dict[str, str] | None:
        """Return captured params if *path* fully matches, else None."""
        found = self.pattern.fullmatch(path)
        if found is None:
            return None
        return {name: found.group(name) for name in self.param_names}


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match.

    ``params`` keeps the order the placeholders appear in the path.
    """

    route: Route
    params: dict[str, str]

    @property
    def args(self) -> tuple[str, ...]:
        return tuple(self.params.values())
