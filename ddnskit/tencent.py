"""TC3-HMAC-SHA256 (v3) request signing for the Tencent Cloud DNSPod API."""

from __future__ import annotations

import hashlib
import hmac
import time
from datetime import datetime, timezone

from ddnskit.http import Request

__all__ = ["tencent_cloud_signer"]

_ALGORITHM = "TC3-HMAC-SHA256"
_SERVICE = "dnspod"
_HOST = f"{_SERVICE}.tencentcloudapi.com"
_SIGNED_HEADERS = "content-type;host;x-tc-action"


def _sha256_hex(text: str) -> str:
    return hashlib.sha256(text.encode()).hexdigest()


def _hmac_sha256(key: bytes, message: str) -> bytes:
    return hmac.new(key, message.encode(), hashlib.sha256).digest()


def tencent_cloud_signer(
    secret_id: str, secret_key: str, request: Request, action: str, payload: str
) -> None:
    """Sign a POST of ``payload`` for ``action`` and set the TC3 headers on ``request``."""
    timestamp = int(time.time())
    timestamp_str = str(timestamp)

    canonical_headers = (
        f"content-type:application/json\nhost:{_HOST}\nx-tc-action:{action.lower()}\n"
    )
    canonical_request = (
        f"POST\n/\n\n{canonical_headers}\n{_SIGNED_HEADERS}\n{_sha256_hex(payload)}"
    )

    date = datetime.fromtimestamp(timestamp, timezone.utc).strftime("%Y-%m-%d")
    credential_scope = f"{date}/{_SERVICE}/tc3_request"
    string_to_sign = (
        f"{_ALGORITHM}\n{timestamp_str}\n{credential_scope}\n{_sha256_hex(canonical_request)}"
    )

    secret_date = _hmac_sha256(("TC3" + secret_key).encode(), date)
    secret_service = _hmac_sha256(secret_date, _SERVICE)
    secret_signing = _hmac_sha256(secret_service, "tc3_request")
    signature = _hmac_sha256(secret_signing, string_to_sign).hex()

    request.headers["Authorization"] = (
        f"{_ALGORITHM} Credential={secret_id}/{credential_scope}, "
        f"SignedHeaders={_SIGNED_HEADERS}, Signature={signature}"
    )
    request.headers["Host"] = _HOST
    request.headers["X-TC-Action"] = action
    request.headers["X-TC-Timestamp"] = timestamp_str