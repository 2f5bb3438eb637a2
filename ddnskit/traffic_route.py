"""HMAC-SHA256 request signing for the Volcengine TrafficRoute DNS API."""

from __future__ import annotations

import hashlib
import hmac
import time
from collections.abc import Iterable, Mapping
from datetime import datetime, timezone
from urllib.parse import quote_plus

from requests.structures import CaseInsensitiveDict

from ddnskit.http import Request

__all__ = ["VERSION", "SERVICE", "REGION", "HOST", "traffic_route_signer"]

VERSION = "2018-08-01"
SERVICE = "DNS"
REGION = "cn-north-1"
HOST = "open.volcengineapi.com"

_CONTENT_TYPE = "application/json"
_SIGNED_HEADERS = "content-type;host;x-content-sha256;x-date"


def _hmac_sha256(key: bytes, content: str) -> bytes:
    return hmac.new(key, content.encode(), hashlib.sha256).digest()


def _hash_sha256(content: bytes) -> str:
    return hashlib.sha256(content).hexdigest()


def _encode_query(query: Mapping[str, list[str]]) -> str:
    return "&".join(
        f"{quote_plus(key)}={quote_plus(value)}"
        for key in sorted(query)
        for value in query[key]
    )


def traffic_route_signer(
    method: str,
    query: Mapping[str, "str | Iterable[str]"] | None,
    header: Mapping[str, str] | None,
    ak: str,
    sk: str,
    action: str,
    body: bytes | None,
) -> Request:
    """Build a signed request for ``action`` against the TrafficRoute endpoint."""
    body = body or b""
    merged: dict[str, list[str]] = {}
    for key, values in (query or {}).items():
        merged[key] = [values] if isinstance(values, str) else list(values)
    merged["Action"] = [action]
    merged["Version"] = [VERSION]
    raw_query = _encode_query(merged)

    headers = CaseInsensitiveDict()
    for key, value in (header or {}).items():
        headers[key] = value

    x_date = datetime.fromtimestamp(time.time(), timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    short_date = x_date[:8]
    content_sha256 = _hash_sha256(body)

    canonical_request = "\n".join(
        (
            method,
            "/",
            raw_query,
            "\n".join(
                (
                    f"content-type:{_CONTENT_TYPE}",
                    f"host:{HOST}",
                    f"x-content-sha256:{content_sha256}",
                    f"x-date:{x_date}",
                )
            ),
            "",
            _SIGNED_HEADERS,
            content_sha256,
        )
    )
    credential_scope = "/".join((short_date, REGION, SERVICE, "request"))
    string_to_sign = "\n".join(
        ("HMAC-SHA256", x_date, credential_scope, _hash_sha256(canonical_request.encode()))
    )

    k_date = _hmac_sha256(sk.encode(), short_date)
    k_region = _hmac_sha256(k_date, REGION)
    k_service = _hmac_sha256(k_region, SERVICE)
    k_signing = _hmac_sha256(k_service, "request")
    signature = _hmac_sha256(k_signing, string_to_sign).hex()

    headers["Host"] = HOST
    headers["Content-Type"] = _CONTENT_TYPE
    headers["X-Date"] = x_date
    headers["X-Content-Sha256"] = content_sha256
    headers["Authorization"] = (
        f"HMAC-SHA256 Credential={ak}/{credential_scope}, "
        f"SignedHeaders={_SIGNED_HEADERS}, Signature={signature}"
    )
    return Request(method, f"https://{HOST}/?{raw_query}", headers, body, HOST)