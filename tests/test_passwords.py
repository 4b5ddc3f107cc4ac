"""Tests for password hashing: argon2id by default, scrypt accepted."""

import pytest

from folio.security.passwords import (
    _SCRYPT_PREFIX,
    _hash_scrypt,
    _verify_scrypt,
    check_admin_password,
    hash_password,
    is_password_hash,
    verify_password,
)

# ---------------------------------------------------------------------------
# Scrypt
# ---------------------------------------------------------------------------


class TestScryptHash:
    def test_produces_phc_format(self) -> None:
        hashed = _hash_scrypt("password123")
        parts = hashed.split("$")
        assert len(parts) == 5
        assert parts[1] == "scrypt"
        assert "n=" in parts[2]

    def test_verify(self) -> None:
        hashed = _hash_scrypt("my-secret")
        assert _verify_scrypt("my-secret", hashed) is True
        assert _verify_scrypt("wrong-password", hashed) is False

    def test_malformed_returns_false(self) -> None:
        assert _verify_scrypt("password", "not-a-hash") is False
        assert _verify_scrypt("password", "$scrypt$n=x$bad$bad") is False


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


class TestHashPassword:
    def test_argon2_default(self) -> None:
        hashed = hash_password("secret-password")
        assert hashed.startswith("$argon2id$")
        assert verify_password("secret-password", hashed)
        assert not verify_password("wrong-password", hashed)

    def test_scrypt_algorithm(self) -> None:
        hashed = hash_password("secret-password", algorithm="scrypt")
        assert hashed.startswith(_SCRYPT_PREFIX)
        assert verify_password("secret-password", hashed)

    def test_salted(self) -> None:
        assert hash_password("same") != hash_password("same")

    def test_empty_rejected(self) -> None:
        with pytest.raises(ValueError, match="empty"):
            hash_password("")

    def test_unknown_algorithm(self) -> None:
        with pytest.raises(ValueError, match="Unknown password algorithm"):
            hash_password("secret", algorithm="md5")


class TestVerifyPassword:
    def test_empty_inputs(self) -> None:
        assert not verify_password("", "$argon2id$whatever")
        assert not verify_password("secret", "")

    def test_unknown_format_raises(self) -> None:
        with pytest.raises(ValueError, match="Unknown hash format"):
            verify_password("secret", "$bcrypt$something")

    def test_invalid_argon2_hash_is_false(self) -> None:
        assert not verify_password("secret", "$argon2id$garbage")


class TestAdminPassword:
    def test_plaintext(self) -> None:
        assert check_admin_password("secret-password", "secret-password")
        assert not check_admin_password("secret-passwor", "secret-password")

    def test_hashed(self) -> None:
        hashed = hash_password("secret-password")
        assert is_password_hash(hashed)
        assert check_admin_password("secret-password", hashed)
        assert not check_admin_password("other-password", hashed)

    def test_unset_never_matches(self) -> None:
        assert not check_admin_password("anything", None)
        assert not check_admin_password("anything", "")
        assert not check_admin_password("", "secret-password")
