"""bce-auth-v1 request signing for the Baidu Cloud DNS API."""

from __future__ import annotations

import hashlib
import hmac
from datetime import datetime, timezone
from urllib.parse import unquote, urlsplit

from ddnskit.http import Request
from ddnskit.huawei import HEADER_AUTHORIZATION
from ddnskit.strings import escape

__all__ = ["BAIDU_DATE_FORMAT", "hmac_sha256_hex", "baidu_canonical_uri", "baidu_signer"]

BAIDU_DATE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"
_EXPIRATION_PERIOD = "1800"
_CANONICAL_HOST = "host:bcd.baidubce.com"


def hmac_sha256_hex(secret: str, message: str) -> str:
    """Return the hex HMAC-SHA256 of ``message`` keyed with ``secret``."""
    return hmac.new(secret.encode(), message.encode(), hashlib.sha256).hexdigest()


def baidu_canonical_uri(request: Request) -> str:
    """Return the escaped request path without a trailing "/"."""
    path = unquote(urlsplit(request.url).path)
    uri = "/".join(escape(part) for part in path.split("/"))
    if not uri.endswith("/"):
        uri += "/"
    return uri[:-1]


def baidu_signer(access_key_id: str, access_secret: str, request: Request) -> None:
    """Set the Authorization header of ``request``."""
    timestamp = datetime.now(timezone.utc).strftime(BAIDU_DATE_FORMAT)
    auth_prefix = f"bce-auth-v1/{access_key_id}/{timestamp}/{_EXPIRATION_PERIOD}"
    canonical = f"{request.method}\n{baidu_canonical_uri(request)}\n\n{_CANONICAL_HOST}"
    signing_key = hmac_sha256_hex(access_secret, auth_prefix)
    signature = hmac_sha256_hex(signing_key, canonical)
    request.headers[HEADER_AUTHORIZATION] = f"{auth_prefix}/host/{signature}"