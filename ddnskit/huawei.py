"""SDK-HMAC-SHA256 request signing for the Huawei Cloud API gateway."""

from __future__ import annotations

import hashlib
import hmac
from dataclasses import dataclass
from datetime import datetime, timezone
from urllib.parse import parse_qs, unquote, urlsplit, urlunsplit

from ddnskit.http import Request
from ddnskit.strings import escape

__all__ = [
    "BASIC_DATE_FORMAT",
    "ALGORITHM",
    "HEADER_X_DATE",
    "HEADER_HOST",
    "HEADER_AUTHORIZATION",
    "HEADER_CONTENT_SHA256",
    "Signer",
    "canonical_request",
    "canonical_uri",
    "canonical_query_string",
    "canonical_headers",
    "signed_headers",
    "request_payload",
    "string_to_sign",
    "sign_string_to_sign",
    "hex_encode_sha256_hash",
    "auth_header_value",
]

BASIC_DATE_FORMAT = "%Y%m%dT%H%M%SZ"
ALGORITHM = "SDK-HMAC-SHA256"
HEADER_X_DATE = "X-Sdk-Date"
HEADER_HOST = "host"
HEADER_AUTHORIZATION = "Authorization"
HEADER_CONTENT_SHA256 = "X-Sdk-Content-Sha256"


def _as_utc(t: datetime) -> datetime:
    """Convert to UTC; a naive datetime is taken to be UTC already."""
    if t.tzinfo is None:
        return t.replace(tzinfo=timezone.utc)
    return t.astimezone(timezone.utc)


def canonical_request(request: Request, signed_headers: list[str]) -> str:
    """Build the canonical request string that the signature covers."""
    payload_hash = request.headers.get(HEADER_CONTENT_SHA256) or hex_encode_sha256_hash(
        request_payload(request)
    )
    return "\n".join(
        (
            request.method,
            canonical_uri(request),
            canonical_query_string(request),
            canonical_headers(request, signed_headers),
            ";".join(signed_headers),
            payload_hash,
        )
    )


def canonical_uri(request: Request) -> str:
    """Return the escaped request path, always ending in "/"."""
    path = unquote(urlsplit(request.url).path)
    uri = "/".join(escape(part) for part in path.split("/"))
    return uri if uri.endswith("/") else uri + "/"


def canonical_query_string(request: Request) -> str:
    """Sort and escape the query, write it back into the request URL and return it."""
    query = parse_qs(urlsplit(request.url).query, keep_blank_values=True)
    pairs = [
        f"{escape(key)}={escape(value)}"
        for key in sorted(query)
        for value in sorted(query[key])
    ]
    query_str = "&".join(pairs)
    request.url = urlunsplit(urlsplit(request.url)._replace(query=query_str))
    return query_str


def canonical_headers(request: Request, signer_headers: list[str]) -> str:
    """Return "name:value" lines for the signed headers, newline-terminated."""
    lowered = {name.lower(): value for name, value in request.headers.items()}
    lines = []
    for key in signer_headers:
        if key.lower() == HEADER_HOST:
            values = [request.host]
        else:
            values = [lowered[key]] if key in lowered else []
        lines.extend(f"{key}:{value.strip()}" for value in sorted(values))
    return "\n".join(lines) + "\n"


def signed_headers(request: Request) -> list[str]:
    """Return the request's header names, lower-cased and sorted."""
    return sorted(name.lower() for name in request.headers)


def request_payload(request: Request) -> bytes:
    """Return the request body, or empty bytes when there is none."""
    return request.body if request.body is not None else b""


def string_to_sign(canonical_request: str, t: datetime) -> str:
    """Build the string to sign from the canonical request and the signing time."""
    digest = hashlib.sha256(canonical_request.encode()).hexdigest()
    return f"{ALGORITHM}\n{_as_utc(t).strftime(BASIC_DATE_FORMAT)}\n{digest}"


def sign_string_to_sign(string_to_sign: str, signing_key: bytes) -> str:
    """Return the hex HMAC-SHA256 of the string to sign."""
    return hmac.new(signing_key, string_to_sign.encode(), hashlib.sha256).hexdigest()


def hex_encode_sha256_hash(body: bytes | None) -> str:
    """Return the hex SHA-256 of ``body`` (None counts as empty)."""
    return hashlib.sha256(body or b"").hexdigest()


def auth_header_value(signature: str, access_key: str, signed_headers: list[str]) -> str:
    """Return the value for the Authorization header."""
    return (
        f"{ALGORITHM} Access={access_key}, "
        f"SignedHeaders={';'.join(signed_headers)}, Signature={signature}"
    )


@dataclass
class Signer:
    """Access key and secret used to sign requests."""

    key: str
    secret: str

    def sign(self, request: Request) -> None:
        """Set the date header if missing or invalid, then the Authorization header."""
        t = None
        date_text = request.headers.get(HEADER_X_DATE)
        if date_text:
            try:
                t = datetime.strptime(date_text, BASIC_DATE_FORMAT).replace(tzinfo=timezone.utc)
            except ValueError:
                t = None
        if t is None:
            t = datetime.now(timezone.utc)
            request.headers[HEADER_X_DATE] = t.strftime(BASIC_DATE_FORMAT)
        headers = signed_headers(request)
        canonical = canonical_request(request, headers)
        signature = sign_string_to_sign(string_to_sign(canonical, t), self.secret.encode())
        request.headers[HEADER_AUTHORIZATION] = auth_header_value(signature, self.key, headers)