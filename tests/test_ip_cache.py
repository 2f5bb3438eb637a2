from ddnskit.ip_cache import IpCache


def test_empty_address_always_due():
    cache = IpCache()
    assert cache.check("") is True
    assert cache == IpCache()


def test_new_address_is_due(monkeypatch):
    monkeypatch.delenv("DDNS_IP_CACHE_TIMES", raising=False)
    cache = IpCache()
    assert cache.check("1.2.3.4") is True
    assert cache.addr == "1.2.3.4"
    assert cache.times == 6


def test_same_address_counts_down(monkeypatch):
    monkeypatch.setenv("DDNS_IP_CACHE_TIMES", "2")
    cache = IpCache()
    assert cache.check("1.2.3.4") is True
    start = cache.times
    assert cache.check("1.2.3.4") is False
    assert cache.times == start - 1


def test_cache_exhaustion_forces_check(monkeypatch):
    monkeypatch.setenv("DDNS_IP_CACHE_TIMES", "2")
    cache = IpCache()
    results = [cache.check("1.2.3.4") for _ in range(5)]
    assert results[0] is True
    assert results[1] is False
    assert True in results[2:]


def test_changed_address_is_due(monkeypatch):
    monkeypatch.setenv("DDNS_IP_CACHE_TIMES", "2")
    cache = IpCache()
    cache.check("1.2.3.4")
    assert cache.check("1.2.3.4") is False
    assert cache.check("5.6.7.8") is True
    assert cache.addr == "5.6.7.8"


def test_invalid_env_falls_back(monkeypatch):
    monkeypatch.setenv("DDNS_IP_CACHE_TIMES", "many")
    invalid = IpCache()
    invalid.check("1.2.3.4")
    monkeypatch.delenv("DDNS_IP_CACHE_TIMES")
    default = IpCache()
    default.check("1.2.3.4")
    assert invalid.times == default.times