import socket
from types import SimpleNamespace
from unittest import mock

import dns.resolver
import pytest

from ddnskit import resolver

TEST_DNS = "1.1.1.1"
TEST_URL = "https://cloudflare.com"


@pytest.fixture(autouse=True)
def _fresh_state(monkeypatch):
    monkeypatch.setattr(resolver, "_server", None)
    monkeypatch.setattr(resolver, "backup_dns", list(resolver.backup_dns))


def _addrinfo(ip):
    return [(socket.AF_INET, socket.SOCK_STREAM, 6, "", (ip, 0))]


def _fake_resolve(calls):
    def resolve(self, name, rdtype, tcp=False):
        calls.append((list(self.nameservers), self.port, name, rdtype, tcp))
        if rdtype == "A":
            return [SimpleNamespace(address="104.16.132.229")]
        raise dns.resolver.NoAnswer()

    return resolve


def test_set_dns_defaults_to_udp_port_53():
    assert resolver.set_dns(TEST_DNS) == ("udp", "1.1.1.1:53")


def test_set_dns_tcp_with_port():
    assert resolver.set_dns("TCP://8.8.8.8:5353") == ("tcp", "8.8.8.8:5353")


def test_set_dns_ipv6():
    assert resolver.set_dns("[2001:db8::1]:5353") == ("udp", "[2001:db8::1]:5353")


def test_lookup_host_valid_url():
    with mock.patch("socket.getaddrinfo", return_value=_addrinfo("104.16.132.229")) as gai:
        assert resolver.lookup_host(TEST_URL) == ["104.16.132.229"]
    assert gai.call_args[0][0] == "cloudflare.com"


def test_lookup_host_invalid_url():
    with mock.patch("socket.getaddrinfo", side_effect=socket.gaierror("no such host")):
        with pytest.raises(OSError):
            resolver.lookup_host("invalidurl")


def test_lookup_host_after_set_dns():
    resolver.set_dns(TEST_DNS)
    calls = []
    with mock.patch.object(
        dns.resolver.Resolver, "resolve", autospec=True, side_effect=_fake_resolve(calls)
    ):
        assert resolver.lookup_host(TEST_URL) == ["104.16.132.229"]
    assert calls[0] == (["1.1.1.1"], 53, "cloudflare.com", "A", False)


def test_lookup_host_after_set_dns_invalid():
    resolver.set_dns(TEST_DNS)
    with mock.patch.object(
        dns.resolver.Resolver, "resolve", autospec=True, side_effect=dns.resolver.NXDOMAIN()
    ):
        with pytest.raises(OSError):
            resolver.lookup_host("invalidurl")


def test_lookup_host_ip_literal_with_custom_server():
    resolver.set_dns(TEST_DNS)
    assert resolver.lookup_host("192.0.2.7") == ["192.0.2.7"]


def test_init_backup_dns_custom():
    assert resolver.init_backup_dns("9.9.9.9", "en") == ["9.9.9.9"]
    assert resolver.backup_dns == ["9.9.9.9"]


def test_init_backup_dns_chinese():
    expected = ["223.5.5.5", "114.114.114.114", "119.29.29.29"]
    assert resolver.init_backup_dns("", "zh") == expected
    assert resolver.backup_dns == expected


def test_init_backup_dns_english_keeps_defaults():
    assert resolver.init_backup_dns("", "en") == ["1.1.1.1", "8.8.8.8", "9.9.9.9", "223.5.5.5"]


def test_is_dns_err():
    assert resolver.is_dns_err(OSError("dial udp [::1]:53: read: connection refused"))
    assert not resolver.is_dns_err(OSError("i/o timeout"))


def test_wait_internet_retries_next_address():
    results = [socket.gaierror("temporary failure"), _addrinfo("192.0.2.1")]
    with mock.patch("socket.getaddrinfo", side_effect=results) as gai, mock.patch(
        "time.sleep"
    ) as sleep:
        reached = resolver.wait_internet(["a.example.com", "b.example.com"])
    assert reached == "b.example.com"
    assert gai.call_count == 2
    sleep.assert_called_once_with(5)
    assert resolver._server is None


def test_wait_internet_switches_to_backup_dns():
    calls = []
    error = OSError("dial udp [::1]:53: read: connection refused")
    with mock.patch("socket.getaddrinfo", side_effect=error), mock.patch(
        "time.sleep"
    ), mock.patch.object(
        dns.resolver.Resolver, "resolve", autospec=True, side_effect=_fake_resolve(calls)
    ):
        reached = resolver.wait_internet(["example.com"])
    assert reached == "example.com"
    assert calls[0][0] == [resolver.backup_dns[0]]