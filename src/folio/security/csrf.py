"""Session-backed CSRF tokens.

The token is 32 random bytes, hex-encoded, stored in the session under
``_token`` and submitted in the ``_token`` form field (or the
``X-CSRF-Token`` header). It is created lazily and then stays stable for
the session; ``rotate_token`` replaces it.
"""

import secrets
from collections.abc import MutableMapping
from typing import Any

SESSION_KEY = "_token"
FIELD_NAME = "_token"
HEADER_NAME = "X-CSRF-Token"
TOKEN_BYTES = 32


def get_token(session: MutableMapping[str, Any]) -> str:
    """Return the session's token, creating it on first use."""
    token = session.get(SESSION_KEY)
    if not isinstance(token, str) or not token:
        token = secrets.token_hex(TOKEN_BYTES)
        session[SESSION_KEY] = token
    return token


def rotate_token(session: MutableMapping[str, Any]) -> str:
    """Replace the session's token with a fresh one."""
    token = secrets.token_hex(TOKEN_BYTES)
    session[SESSION_KEY] = token
    return token


def tokens_match(expected: Any, submitted: Any) -> bool:
    """Constant-time comparison. Both tokens must be non-empty strings."""
    if not isinstance(expected, str) or not isinstance(submitted, str):
        return False
    if not expected or not submitted:
        return False
    return secrets.compare_digest(expected.encode("utf-8"), submitted.encode("utf-8"))
