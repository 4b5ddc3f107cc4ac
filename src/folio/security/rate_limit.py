"""Session-backed sliding-window rate limiter.

Attempt timestamps for each key live in the session under
``session[session_key][key]``. Timestamps older than the decay window are
dropped whenever the bucket is read, so nothing needs sweeping.

Because the state is in the client's session, this slows down form spam
from an ordinary browser; a client that discards cookies starts over.
"""

import time
from collections.abc import Callable, MutableMapping
from typing import Any


class RateLimiter:
    """Allow at most ``max_attempts`` hits per key within ``decay_minutes``.

    Usage::

        limiter = RateLimiter(max_attempts=5, decay_minutes=5, session_key="contact_attempts")
        if limiter.too_many_attempts(session, "contact"):
            ...
        limiter.hit(session, "contact")
    """

    __slots__ = ("_clock", "decay_minutes", "max_attempts", "session_key")

    def __init__(
        self,
        max_attempts: int = 10,
        decay_minutes: int = 60,
        session_key: str = "rate_limit",
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.max_attempts = max_attempts
        self.decay_minutes = decay_minutes
        self.session_key = session_key
        self._clock = clock

    @property
    def window(self) -> float:
        return self.decay_minutes * 60

    def _buckets(self, session: MutableMapping[str, Any]) -> dict[str, list[float]]:
        buckets = session.get(self.session_key)
        if not isinstance(buckets, dict):
            buckets = {}
            session[self.session_key] = buckets
        return buckets

    def _attempts(self, session: MutableMapping[str, Any], key: str) -> list[float]:
        """Live timestamps for *key*, pruning expired ones in place."""
        buckets = self._buckets(session)
        cutoff = self._clock() - self.window
        live = [stamp for stamp in buckets.get(key, []) if stamp > cutoff]
        buckets[key] = live
        # Reassign so dict-tracking sessions see the change
        session[self.session_key] = buckets
        return live

    def hit(self, session: MutableMapping[str, Any], key: str) -> int:
        """Record an attempt and return the live attempt count."""
        attempts = self._attempts(session, key)
        attempts.append(self._clock())
        self._buckets(session)[key] = attempts
        return len(attempts)

    def too_many_attempts(self, session: MutableMapping[str, Any], key: str) -> bool:
        return len(self._attempts(session, key)) >= self.max_attempts

    def remaining(self, session: MutableMapping[str, Any], key: str) -> int:
        return max(0, self.max_attempts - len(self._attempts(session, key)))

    def reset_time(self, session: MutableMapping[str, Any], key: str) -> float:
        """When the oldest live attempt expires, or now if there are none."""
        attempts = self._attempts(session, key)
        if not attempts:
            return self._clock()
        return min(attempts) + self.window

    def clear(self, session: MutableMapping[str, Any], key: str) -> None:
        buckets = self._buckets(session)
        buckets.pop(key, None)
        session[self.session_key] = buckets


CONTACT_LIMITER = RateLimiter(max_attempts=5, decay_minutes=5, session_key="contact_attempts")
LOGIN_LIMITER = RateLimiter(max_attempts=5, decay_minutes=5, session_key="login_attempts")
