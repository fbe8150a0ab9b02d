# gymo/app/security/hashing.py
"""
Password hashing with passlib/bcrypt.

Stored passwords are salted bcrypt digests; plaintext is never compared
against the stored column directly.
"""
from passlib.context import CryptContext

from gymo.app.core.exceptions import PasswordMismatchError

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """True on match. A malformed or unknown stored hash counts as no match."""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        return False


def check_password_hash(plain_password: str, hashed_password: str) -> None:
    """
    Raise PasswordMismatchError unless plain_password matches the digest.

    Every failure reason collapses into the same error so callers cannot
    tell a wrong password from a damaged hash.
    """
    if not verify_password(plain_password, hashed_password):
        raise PasswordMismatchError()
