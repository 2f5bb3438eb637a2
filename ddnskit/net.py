"""Classification of client addresses and description of request origins."""

from __future__ import annotations

import ipaddress
from collections.abc import Mapping
from typing import Any

__all__ = ["is_private_network", "get_request_ip_str"]

_PRIVATE_V4 = tuple(
    ipaddress.ip_network(n)
    for n in ("127.0.0.0/8", "10.0.0.0/8", "172.16.0.0/12", "192.168.0.0/16", "169.254.0.0/16")
)
_PRIVATE_V6 = tuple(ipaddress.ip_network(n) for n in ("::1/128", "fc00::/7", "fe80::/10"))


def _parse_ip(text: str) -> ipaddress.IPv4Address | ipaddress.IPv6Address | None:
    if "%" in text:
        return None
    try:
        ip = ipaddress.ip_address(text)
    except ValueError:
        return None
    if isinstance(ip, ipaddress.IPv6Address) and ip.ipv4_mapped is not None:
        return ip.ipv4_mapped
    return ip


def is_private_network(remote_addr: str) -> bool:
    """Whether the address (port optional) is loopback, private or link-local."""
    if remote_addr.startswith("["):
        end = remote_addr.rfind("]")
        if end == -1:
            return False
        remote_addr = remote_addr[1:end]
    else:
        colon = remote_addr.rfind(":")
        if colon != -1:
            remote_addr = remote_addr[:colon]

    ip = _parse_ip(remote_addr)
    if ip is None:
        return False
    networks = _PRIVATE_V4 if ip.version == 4 else _PRIVATE_V6
    return any(ip in network for network in networks)


def _header(headers: Mapping[str, str], name: str) -> str:
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() == wanted:
            return value
    return ""


def get_request_ip_str(request: Any) -> str:
    """Describe a request's origin from ``remote_addr`` and its proxy headers."""
    addr = "Remote: " + request.remote_addr
    real_ip = _header(request.headers, "X-Real-IP")
    if real_ip:
        addr += " ,Real-IP: " + real_ip
    forwarded = _header(request.headers, "X-Forwarded-For")
    if forwarded:
        addr += " ,Forwarded-For: " + forwarded
    return addr