"""
Tests for password hashing and verification.
"""
import pytest

from gymo.app.core.exceptions import AuthError, PasswordMismatchError
from gymo.app.security import hashing


def test_hash_is_not_plaintext():
    digest = hashing.get_password_hash("pw1")
    assert digest != "pw1"
    assert "pw1" not in digest


def test_hash_is_salted():
    assert hashing.get_password_hash("pw1") != hashing.get_password_hash("pw1")


def test_check_password_hash_accepts_matching_password():
    digest = hashing.get_password_hash("pw1")
    hashing.check_password_hash("pw1", digest)
    assert hashing.verify_password("pw1", digest)


def test_check_password_hash_rejects_other_password():
    digest = hashing.get_password_hash("pw1")
    with pytest.raises(PasswordMismatchError) as exc_info:
        hashing.check_password_hash("pw2", digest)
    assert exc_info.value.message == "password not correct"
    assert isinstance(exc_info.value, AuthError)


def test_damaged_hash_is_reported_as_mismatch():
    with pytest.raises(PasswordMismatchError):
        hashing.check_password_hash("pw1", "not-a-bcrypt-hash")
    assert hashing.verify_password("pw1", "") is False
