"""Host lookups through a configurable DNS server, and waiting for connectivity."""

from __future__ import annotations

import ipaddress
import socket
import time
from dataclasses import dataclass
from urllib.parse import urlsplit

import dns.exception
import dns.resolver

from ddnskit.messages import CHINESE, log
from ddnskit.strings import to_hostname

__all__ = [
    "backup_dns",
    "init_backup_dns",
    "set_dns",
    "lookup_host",
    "wait_internet",
    "is_dns_err",
]

# Used in turn when the local DNS fails.
backup_dns: list[str] = ["1.1.1.1", "8.8.8.8", "9.9.9.9", "223.5.5.5"]

_CHINESE_BACKUP_DNS = ["223.5.5.5", "114.114.114.114", "119.29.29.29"]
_DEFAULT_DNS_PORT = 53
_RETRY_DELAY_SECONDS = 5
_DNS_ERROR_MARKER = "[::1]:53: read: connection refused"


@dataclass(frozen=True)
class _DnsServer:
    network: str
    host: str
    port: int

    @property
    def address(self) -> str:
        if ":" in self.host:
            return f"[{self.host}]:{self.port}"
        return f"{self.host}:{self.port}"


# None means the system resolver.
_server: _DnsServer | None = None


def init_backup_dns(custom_dns: str, lang: str) -> list[str]:
    """Use ``custom_dns`` as the only backup, or servers suited to Chinese users.

    Returns a copy of the backup servers now in use.
    """
    global backup_dns
    if custom_dns:
        backup_dns = [custom_dns]
    elif lang == CHINESE:
        backup_dns = list(_CHINESE_BACKUP_DNS)
    return list(backup_dns)


def set_dns(dns: str) -> tuple[str, str]:
    """Route lookups to ``dns`` ("host", "host:port", "tcp://host:port").

    Returns the network ("udp" or "tcp") and the server address used.
    """
    global _server
    if "://" not in dns:
        dns = "udp://" + dns
    parsed = urlsplit(dns)
    network = "tcp" if parsed.scheme.lower() == "tcp" else "udp"
    host = parsed.hostname or ""
    try:
        port = parsed.port
    except ValueError:
        port = None
    _server = _DnsServer(network, host, port or _DEFAULT_DNS_PORT)
    return _server.network, _server.address


def _is_ip(text: str) -> bool:
    try:
        ipaddress.ip_address(text)
    except ValueError:
        return False
    return True


def _system_lookup(name: str) -> list[str]:
    try:
        infos = socket.getaddrinfo(name, None)
    except OSError as exc:
        raise OSError(f"lookup {name}: {exc}") from exc
    return list(dict.fromkeys(info[4][0] for info in infos))


def _server_ip(host: str) -> str:
    if _is_ip(host):
        return host
    return socket.getaddrinfo(host, None)[0][4][0]


def _server_lookup(server: _DnsServer, name: str) -> list[str]:
    if _is_ip(name):
        return [name]
    resolver = dns.resolver.Resolver(configure=False)
    resolver.nameservers = [_server_ip(server.host)]
    resolver.port = server.port
    addresses: list[str] = []
    errors: list[Exception] = []
    for rdtype in ("A", "AAAA"):
        try:
            answer = resolver.resolve(name, rdtype, tcp=server.network == "tcp")
        except dns.exception.DNSException as exc:
            errors.append(exc)
            continue
        addresses.extend(record.address for record in answer)
    if not addresses:
        reason = errors[0] if errors else "no such host"
        raise OSError(f"lookup {name} on {server.address}: {reason}")
    return list(dict.fromkeys(addresses))


def lookup_host(url: str) -> list[str]:
    """Resolve the host of ``url``; raise OSError when it cannot be resolved."""
    name = to_hostname(url)
    if _server is None:
        return _system_lookup(name)
    return _server_lookup(_server, name)


def is_dns_err(error: BaseException) -> bool:
    """Whether ``error`` comes from an unreachable local DNS server."""
    return _DNS_ERROR_MARKER in str(error)


def wait_internet(addresses: list[str]) -> str:
    """Block until one of ``addresses`` resolves, switching to backup DNS on failure.

    Returns the address that resolved.
    """
    retry_times = 0
    failed = False
    while True:
        for addr in addresses:
            try:
                lookup_host(addr)
            except OSError as err:
                failed = True
                log("等待网络连接: %s", err)
                log("%s 后重试...", f"{_RETRY_DELAY_SECONDS}s")
                if is_dns_err(err) or retry_times > 0:
                    server = backup_dns[retry_times % len(backup_dns)]
                    log("本机DNS异常! 将默认使用 %s, 可参考文档通过 -dns 自定义 DNS 服务器", server)
                    set_dns(server)
                    retry_times += 1
                time.sleep(_RETRY_DELAY_SECONDS)
                continue
            if failed:
                log("网络已连接")
            return addr