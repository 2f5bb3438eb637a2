"""HMAC request signing for the Aliyun RPC-style API."""

from __future__ import annotations

import base64
import hashlib
import hmac
import re
import time
from collections.abc import Iterable, Mapping
from datetime import datetime, timezone
from urllib.parse import quote_plus

__all__ = ["hmac_sign", "hmac_sign_to_b64", "aliyun_signer"]

_SIGN_METHODS = {
    "HMAC-SHA1": hashlib.sha1,
    "HMAC-SHA256": hashlib.sha256,
    "HMAC-MD5": hashlib.md5,
}

_SPECIAL = re.compile(r"%7E|[%*/&=+]")

Values = Mapping[str, "str | Iterable[str]"]


def _encode_values(vals: Values) -> str:
    """Form-encode ``vals`` sorted by key, values in their given order."""
    parts = []
    for key in sorted(vals):
        values = vals[key]
        if isinstance(values, str):
            values = [values]
        parts.extend(f"{quote_plus(key)}={quote_plus(value)}" for value in values)
    return "&".join(parts)


def _special_replace(match: re.Match) -> str:
    token = match.group(0)
    if token == "%7E":
        return "~"
    if token == "+":
        return "%20"
    return f"%{ord(token):02X}"


def _special_url_encode(text: str) -> str:
    return _SPECIAL.sub(_special_replace, text)


def _string_to_sign(http_method: str, vals: Values) -> str:
    return "&".join(
        (http_method, _special_url_encode("/"), _special_url_encode(_encode_values(vals)))
    )


def hmac_sign(sign_method: str, http_method: str, app_key_secret: str, vals: Values) -> bytes:
    """Return the raw HMAC of the canonical string; unknown methods use SHA-1."""
    digest = _SIGN_METHODS.get(sign_method, hashlib.sha1)
    key = (app_key_secret + "&").encode()
    return hmac.new(key, _string_to_sign(http_method, vals).encode(), digest).digest()


def hmac_sign_to_b64(sign_method: str, http_method: str, app_key_secret: str, vals: Values) -> str:
    """Return the HMAC signature in standard base64."""
    return base64.b64encode(hmac_sign(sign_method, http_method, app_key_secret, vals)).decode()


def aliyun_signer(access_key_id: str, access_secret: str, params: Values) -> dict:
    """Return a copy of ``params`` with the common parameters and signature added."""
    signed = dict(params)
    signed.update(
        SignatureMethod="HMAC-SHA1",
        SignatureNonce=str(time.time_ns()),
        AccessKeyId=access_key_id,
        SignatureVersion="1.0",
        Timestamp=datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
        Format="JSON",
        Version="2015-01-09",
    )
    signed["Signature"] = hmac_sign_to_b64("HMAC-SHA1", "GET", access_secret, signed)
    return signed