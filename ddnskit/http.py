"""HTTP client factories, a signable request type and response helpers."""

from __future__ import annotations

import json
import weakref
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlsplit

import requests
from requests.adapters import HTTPAdapter
from requests.structures import CaseInsensitiveDict

from ddnskit.messages import log_str

__all__ = [
    "Request",
    "HttpStatusError",
    "create_http_client",
    "create_no_proxy_http_client",
    "set_insecure_skip_verify",
    "get_http_response_org",
    "get_http_response",
]

_TIMEOUT = 30
_BODY_LIMIT = 1024000
_CHUNK_SIZE = 64 * 1024

_tls_verify = True
_sessions: weakref.WeakSet = weakref.WeakSet()


@dataclass
class Request:
    """An outgoing HTTP request that signers inspect and decorate with headers."""

    method: str
    url: str
    headers: CaseInsensitiveDict = field(default_factory=CaseInsensitiveDict)
    body: bytes | None = None
    host: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.headers, CaseInsensitiveDict):
            self.headers = CaseInsensitiveDict(self.headers)
        if not self.host:
            self.host = urlsplit(self.url).netloc.rpartition("@")[2]


class HttpStatusError(Exception):
    """Raised when a response carries a status code of 300 or above."""

    def __init__(self, status_code: int, body: bytes) -> None:
        self.status_code = status_code
        self.body = body
        text = body.decode("utf-8", errors="replace")
        super().__init__(log_str("返回内容: %s ,返回状态码: %d", text, status_code))


class _Session(requests.Session):
    """A session with a default timeout that honours the global TLS setting."""

    def __init__(self) -> None:
        super().__init__()
        if not _tls_verify:
            self.verify = False
        _sessions.add(self)

    def request(self, method, url, *args, **kwargs):
        kwargs.setdefault("timeout", _TIMEOUT)
        return super().request(method, url, *args, **kwargs)

    def merge_environment_settings(self, url, proxies, stream, verify, cert):
        settings = super().merge_environment_settings(url, proxies, stream, verify, cert)
        if not _tls_verify:
            settings["verify"] = False
        return settings


class _SourceAddressAdapter(HTTPAdapter):
    """Binds outgoing sockets to a wildcard address of one family."""

    def __init__(self, source_address: tuple[str, int], **kwargs: Any) -> None:
        self._source_address = source_address
        super().__init__(**kwargs)

    def init_poolmanager(self, *args, **kwargs):
        kwargs["source_address"] = self._source_address
        super().init_poolmanager(*args, **kwargs)


def create_http_client() -> requests.Session:
    """Return a session that uses proxies from the environment."""
    return _Session()


def create_no_proxy_http_client(network: str) -> requests.Session:
    """Return a proxy-free session without keep-alive, bound to IPv6 for "tcp6", else IPv4."""
    session = _Session()
    session.trust_env = False
    session.headers["Connection"] = "close"
    source = ("::", 0) if network == "tcp6" else ("0.0.0.0", 0)
    adapter = _SourceAddressAdapter(source)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    return session


def set_insecure_skip_verify() -> int:
    """Turn off TLS certificate verification for every session, existing and future.

    Returns the number of existing sessions that were changed.
    """
    global _tls_verify
    _tls_verify = False
    changed = 0
    for session in list(_sessions):
        session.verify = False
        changed += 1
    return changed


def get_http_response_org(response: requests.Response) -> bytes:
    """Read at most 1,024,000 bytes of the body; raise HttpStatusError on status >= 300."""
    chunks: list[bytes] = []
    remaining = _BODY_LIMIT
    try:
        for chunk in response.iter_content(chunk_size=_CHUNK_SIZE):
            piece = chunk[:remaining]
            chunks.append(piece)
            remaining -= len(piece)
            if remaining <= 0:
                break
    finally:
        response.close()
    body = b"".join(chunks)
    if response.status_code >= 300:
        raise HttpStatusError(response.status_code, body)
    return body


def get_http_response(response: requests.Response) -> Any:
    """Return the decoded JSON body, or None when the body is empty."""
    body = get_http_response_org(response)
    if not body:
        return None
    return json.loads(body)