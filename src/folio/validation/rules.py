"""Built-in validation rules for folio forms.

Each validator is a callable with the signature::

    def rule(value: str) -> str | None:
        '''Return error message, or None if valid.'''

Parameterized validators are factories. Every factory takes an optional
``message`` so a form can phrase its errors per field::

    rules = {"name": [required("Name is required."), max_length(100)]}
"""

import re
from collections.abc import Callable

# Type alias for a validator function
type Validator = Callable[[str], str | None]


# ---------------------------------------------------------------------------
# Presence
# ---------------------------------------------------------------------------


def required(message: str = "This field is required") -> Validator:
    """Field must be present and non-blank."""

    def check(value: str) -> str | None:
        if not value or not value.strip():
            return message
        return None

    return check


# ---------------------------------------------------------------------------
# Length
# ---------------------------------------------------------------------------


def max_length(n: int, message: str | None = None) -> Validator:
    """String must be at most *n* characters."""

    def check(value: str) -> str | None:
        if len(value) > n:
            return message or f"Must be at most {n} characters"
        return None

    return check


def min_length(n: int, message: str | None = None) -> Validator:
    """String must be at least *n* characters."""

    def check(value: str) -> str | None:
        if len(value) < n:
            return message or f"Must be at least {n} characters"
        return None

    return check


# ---------------------------------------------------------------------------
# Format
# ---------------------------------------------------------------------------

# Structure only, not deliverability
_EMAIL_RE = re.compile(r"^[a-zA-Z0-9._%+\-]+@[a-zA-Z0-9\-]+(\.[a-zA-Z0-9\-]+)*\.[a-zA-Z]{2,}$")


def is_email(value: str) -> bool:
    return "@" in value and _EMAIL_RE.match(value) is not None


def email(message: str = "Must be a valid email address") -> Validator:
    """Value must look like an email address."""

    def check(value: str) -> str | None:
        if not is_email(value):
            return message
        return None

    return check
