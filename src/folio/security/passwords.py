"""Password hashing utilities: argon2id, with scrypt hashes also accepted.

New hashes use argon2id via ``argon2-cffi``. ``verify_password`` detects
the algorithm from the PHC prefix, so settings files holding a stdlib
scrypt hash keep working.

The admin password in the settings file may be either a PHC hash (as
printed by ``folio hash-password``) or plaintext; ``check_admin_password``
handles both.

Usage::

    from folio.security.passwords import hash_password, verify_password

    hashed = hash_password("my-password")
    ok = verify_password("my-password", hashed)
"""

import base64
import hashlib
import hmac
import os

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

# PHC format prefixes
_ARGON2_PREFIX = "$argon2"
_SCRYPT_PREFIX = "$scrypt$"

# Scrypt parameters
_SCRYPT_N = 2**14  # CPU/memory cost
_SCRYPT_R = 8  # Block size
_SCRYPT_P = 1  # Parallelism
_SCRYPT_DKLEN = 64  # Derived key length
_SALT_LENGTH = 16  # Salt length in bytes

_hasher = PasswordHasher()


# ---------------------------------------------------------------------------
# Scrypt
# ---------------------------------------------------------------------------


def _hash_scrypt(password: str) -> str:
    """Hash password with scrypt, returning a PHC-format string."""
    salt = os.urandom(_SALT_LENGTH)
    dk = hashlib.scrypt(
        password.encode("utf-8"),
        salt=salt,
        n=_SCRYPT_N,
        r=_SCRYPT_R,
        p=_SCRYPT_P,
        dklen=_SCRYPT_DKLEN,
    )
    salt_b64 = base64.b64encode(salt).decode("ascii")
    dk_b64 = base64.b64encode(dk).decode("ascii")
    return f"$scrypt$n={_SCRYPT_N},r={_SCRYPT_R},p={_SCRYPT_P}${salt_b64}${dk_b64}"


def _verify_scrypt(password: str, phc_hash: str) -> bool:
    # Format: $scrypt$n=N,r=R,p=P$salt_b64$dk_b64
    parts = phc_hash.split("$")
    if len(parts) != 5 or parts[1] != "scrypt":
        return False

    try:
        params = {}
        for param in parts[2].split(","):
            key, _, value = param.partition("=")
            params[key] = int(value)

        salt = base64.b64decode(parts[3])
        expected_dk = base64.b64decode(parts[4])
    except ValueError:
        return False

    dk = hashlib.scrypt(
        password.encode("utf-8"),
        salt=salt,
        n=params.get("n", _SCRYPT_N),
        r=params.get("r", _SCRYPT_R),
        p=params.get("p", _SCRYPT_P),
        dklen=len(expected_dk),
    )

    return hmac.compare_digest(dk, expected_dk)


# ---------------------------------------------------------------------------
# Argon2
# ---------------------------------------------------------------------------


def _verify_argon2(password: str, phc_hash: str) -> bool:
    try:
        return _hasher.verify(phc_hash, password)
    except (VerificationError, InvalidHashError):
        return False


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def hash_password(password: str, *, algorithm: str = "argon2") -> str:
    """Hash a password, returning a PHC-format string.

    Args:
        password: The plaintext password to hash.
        algorithm: ``"argon2"`` (argon2id, the default) or ``"scrypt"``.

    Raises:
        ValueError: If the password is empty or the algorithm is unknown.
    """
    if not password:
        msg = "Password must not be empty."
        raise ValueError(msg)

    if algorithm == "argon2":
        return _hasher.hash(password)
    if algorithm == "scrypt":
        return _hash_scrypt(password)

    msg = f"Unknown password algorithm: {algorithm!r}"
    raise ValueError(msg)


def verify_password(password: str, phc_hash: str) -> bool:
    """Verify a password against a PHC-format hash.

    Raises:
        ValueError: If the hash prefix names neither argon2 nor scrypt.
    """
    if not password or not phc_hash:
        return False

    if phc_hash.startswith(_ARGON2_PREFIX):
        return _verify_argon2(password, phc_hash)

    if phc_hash.startswith(_SCRYPT_PREFIX):
        return _verify_scrypt(password, phc_hash)

    msg = f"Unknown hash format: {phc_hash[:20]}..."
    raise ValueError(msg)


def is_password_hash(value: str) -> bool:
    return value.startswith((_ARGON2_PREFIX, _SCRYPT_PREFIX))


def check_admin_password(candidate: str, configured: str | None) -> bool:
    """Check a submitted password against the configured admin password.

    *configured* may be a PHC hash or plaintext. Plaintext is compared in
    constant time. An unset or empty configured password never matches.
    """
    if not candidate or not configured:
        return False
    if is_password_hash(configured):
        return verify_password(candidate, configured)
    return hmac.compare_digest(candidate.encode("utf-8"), configured.encode("utf-8"))
