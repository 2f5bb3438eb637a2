"""Generation of login session tokens."""

from __future__ import annotations

import base64
import hashlib
import hmac
import secrets
import time

__all__ = ["generate_token"]


def generate_token(username: str) -> str:
    """Return a base64 HMAC-SHA256 of the user name and time under a random key."""
    key = str(secrets.randbits(64)).encode()
    message = f"{username}{int(time.time())}".encode()
    return base64.b64encode(hmac.new(key, message, hashlib.sha256).digest()).decode()