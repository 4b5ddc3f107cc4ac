"""Built-in template filters and globals.

Registered on every folio jinja2 Environment. They cover the small
patterns the site's forms repeat: per-field errors, optional CSS classes,
and the hidden CSRF input.
"""

import html
from typing import Any

from markupsafe import Markup


def field_errors(errors: Any, field_name: str) -> list[str]:
    """Validation errors for one form field.

    Safely navigates a ``{field: [messages]}`` dict, returning an empty
    list when *errors* is None, missing, or the field has no errors.

    Example:
        {% for msg in errors | field_errors("email") %}
          <div class="field-error">{{ msg }}</div>
        {% endfor %}

    """
    if isinstance(errors, dict):
        value = errors.get(field_name) or []
        return list(value)
    return []


def first_error(errors: Any, field_name: str) -> str:
    """The first error for *field_name*, or an empty string."""
    messages = field_errors(errors, field_name)
    return messages[0] if messages else ""


def error_class(errors: Any, field_name: str, cls: str = "has-error") -> str:
    """*cls* when the field has errors, else an empty string."""
    return cls if field_errors(errors, field_name) else ""


def pluralize(count: int, singular: str, plural: str | None = None) -> str:
    """Pluralize a word based on count.

    Example:
        {{ count | pluralize("message") }}  → "5 messages"

    """
    if plural is None:
        plural = singular + "s"
    word = singular if count == 1 else plural
    return f"{count} {word}"


def csrf_field(token: str, name: str = "_token") -> Markup:
    """Hidden form input carrying the CSRF token."""
    return Markup(
        f'<input type="hidden" name="{html.escape(name)}" value="{html.escape(token)}">'
    )


BUILTIN_GLOBALS: dict[str, Any] = {
    "csrf_field": csrf_field,
}

BUILTIN_FILTERS: dict[str, Any] = {
    "error_class": error_class,
    "field_errors": field_errors,
    "first_error": first_error,
    "pluralize": pluralize,
}
