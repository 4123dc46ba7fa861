from __future__ import annotations

from argon2 import PasswordHasher
from argon2.exceptions import HashingError, InvalidHashError, VerificationError, VerifyMismatchError

_hasher = PasswordHasher()


def encode_password(raw: str) -> str:
    if not raw:
        raise ValueError("password is required")
    try:
        return _hasher.hash(raw)
    except HashingError as exc:
        raise ValueError("failed to hash password") from exc


def password_matches(raw: str, encoded: str) -> bool:
    if not raw or not encoded:
        return False
    try:
        return _hasher.verify(encoded, raw)
    except (VerifyMismatchError, VerificationError, InvalidHashError):
        return False


def needs_rehash(encoded: str) -> bool:
    return _hasher.check_needs_rehash(encoded)
