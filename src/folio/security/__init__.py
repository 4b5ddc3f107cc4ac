"""Security primitives: CSRF tokens, rate limiting, passwords, audit events."""

from folio.security.audit import SecurityEvent, emit_security_event, set_security_event_sink
from folio.security.csrf import get_token, rotate_token, tokens_match
from folio.security.passwords import check_admin_password, hash_password, verify_password
from folio.security.rate_limit import CONTACT_LIMITER, LOGIN_LIMITER, RateLimiter

__all__ = [
    "CONTACT_LIMITER",
    "LOGIN_LIMITER",
    "RateLimiter",
    "SecurityEvent",
    "check_admin_password",
    "emit_security_event",
    "get_token",
    "hash_password",
    "rotate_token",
    "set_security_event_sink",
    "tokens_match",
    "verify_password",
]
