"""bcrypt password hashing and checking."""

from __future__ import annotations

import re

import bcrypt

__all__ = ["DEFAULT_COST", "hash_password", "password_ok", "is_hashed_password"]

DEFAULT_COST = 10
_MIN_COST = 4
_MAX_COST = 31
_MAX_PASSWORD_BYTES = 72
_MIN_HASH_SIZE = 59
_ATOI = re.compile(rb"[+-]?[0-9]+")


def hash_password(password: str) -> str:
    """Hash ``password`` at the default cost; passwords over 72 bytes raise ValueError."""
    raw = password.encode()
    if len(raw) > _MAX_PASSWORD_BYTES:
        raise ValueError("bcrypt: password length exceeds 72 bytes")
    return bcrypt.hashpw(raw, bcrypt.gensalt(rounds=DEFAULT_COST)).decode()


def password_ok(hashed_password: str, password: str) -> bool:
    """Whether ``password`` matches ``hashed_password``."""
    try:
        return bcrypt.checkpw(password.encode()[:_MAX_PASSWORD_BYTES], hashed_password.encode())
    except ValueError:
        return False


def is_hashed_password(password: str) -> bool:
    """Whether ``password`` has the shape of a bcrypt hash with a valid cost."""
    raw = password.encode()
    if len(raw) < _MIN_HASH_SIZE:
        return False
    if raw[0:1] != b"$" or raw[1] > ord("2"):
        return False
    start = 3 if raw[2:3] == b"$" else 4
    cost_text = raw[start : start + 2]
    if not _ATOI.fullmatch(cost_text):
        return False
    return _MIN_COST <= int(cost_text) <= _MAX_COST