# ddnskit

The pieces a dynamic DNS client is built from, as a plain Python library.

## What is in it

- **Request signers** for the APIs of several DNS providers:
  - `ddnskit.aliyun`: `hmac_sign`, `hmac_sign_to_b64` and `aliyun_signer`,
    which returns a copy of the query parameters with the common parameters
    and the `Signature` added.
  - `ddnskit.huawei`: the `Signer` class (`key`, `secret`) whose `sign`
    method sets the `X-Sdk-Date` header when it is missing or invalid and
    then the `Authorization` header, plus the helpers it is made of
    (`canonical_request`, `canonical_uri`, `canonical_query_string`,
    `canonical_headers`, `signed_headers`, `string_to_sign`, ...).
  - `ddnskit.baidu`: `baidu_signer`, `baidu_canonical_uri`, `hmac_sha256_hex`.
  - `ddnskit.tencent`: `tencent_cloud_signer` sets the TC3 `Authorization`,
    `Host`, `X-TC-Action` and `X-TC-Timestamp` headers.
  - `ddnskit.traffic_route`: `traffic_route_signer` builds and returns a
    signed `Request` for the Volcengine endpoint.

  The signers that work on a request take a `ddnskit.http.Request`: a
  dataclass holding `method`, `url`, case-insensitive `headers`, `body` and
  `host`.
- **HTTP** (`ddnskit.http`): `create_http_client` gives a `requests`
  session with a 30 second default timeout that uses proxies from the
  environment; `create_no_proxy_http_client("tcp4" | "tcp6")` gives one
  without proxies or keep-alive, bound to IPv4 or IPv6;
  `set_insecure_skip_verify` turns off certificate checks for every session.
  `get_http_response_org` reads at most 1,024,000 bytes of a response body
  and raises `HttpStatusError` for status codes of 300 and above;
  `get_http_response` decodes that body as JSON (`None` when empty).
- **IP change tracking** (`ddnskit.ip_cache.IpCache`): says when a new
  address has to be pushed to the provider.
- **Network helpers**: `ddnskit.net.is_private_network` and
  `get_request_ip_str`; `ddnskit.resolver` with `lookup_host`, `set_dns`
  (route lookups to a given DNS server over UDP or TCP), `init_backup_dns`
  and `wait_internet`, which blocks until a host resolves and falls back to
  backup DNS servers on failure.
- **Login support**: bcrypt hashing in `ddnskit.passwords` (`hash_password`,
  `password_ok`, `is_hashed_password`) and `ddnskit.token.generate_token`.
- **Self-update**: `ddnskit.release` finds the newest release and the asset
  built for the running system and architecture; `ddnskit.decompress`
  extracts the executable from `.zip` and `.tar.gz` assets;
  `ddnskit.apply.apply_update` swaps a file in place via `<target>.new` and
  `<target>.old`, moving the old one back if the swap fails;
  `ddnskit.selfupdate.self_update(version)` ties these together and returns
  the installed `Version`, or `None` when nothing was updated.
- **Small utilities**: log messages keyed by their Chinese text with English
  translations (`ddnskit.messages`), string helpers (`ddnskit.strings`),
  X.Y.Z version parsing (`ddnskit.semver`), an in-memory log buffer and JSON
  result bodies (`ddnskit.memory_logs`), and environment detection
  (`ddnskit.environment`: Docker, Termux, config file path, Android time
  zone).

It needs Python 3.10 or newer and depends on `requests`, `bcrypt` and
`dnspython`.

## Examples

### Versions

```python
from ddnskit.semver import Version

current = Version.parse("v1.2")
latest = Version.parse("1.5.1")

str(current)                          # "1.2.0"
latest.greater_than(current)          # True
current.greater_than_or_equal(latest) # False
```

Pre-release and build parts are accepted and ignored. `Version.parse`
raises `ddnskit.semver.SemverError` when the text is not a semantic
version, for example `"1.2.3.4"`.

### Deciding when to update a record

```python
from ddnskit.ip_cache import IpCache

cache = IpCache()
cache.check("203.0.113.7")   # True: first address seen, update the record
cache.check("203.0.113.7")   # False: unchanged, nothing to do
```

An unchanged address is still reported for update after a number of checks.
The environment variable `DDNS_IP_CACHE_TIMES` sets that number; it is 5
when the variable is unset or not an integer.

### Signing a request

```python
from ddnskit.http import Request
from ddnskit.huawei import Signer

request = Request("GET", "https://dns.example.com/v2/zones?limit=10")
Signer(key="placeholder", secret="secret").sign(request)
sorted(request.headers)   # ['Authorization', 'X-Sdk-Date']
```

### Private addresses

```python
from ddnskit.net import is_private_network

is_private_network("192.168.1.18:9876")  # True
is_private_network("[fe80::1]:9876")     # True
is_private_network("223.5.5.5:9876")     # False
```

### Passwords

```python
from ddnskit.passwords import hash_password, password_ok, is_hashed_password

password = "password"
hashed = hash_password(password)

is_hashed_password(hashed)        # True
password_ok(hashed, password)     # True
```

### Messages and ordinals

```python
from ddnskit.messages import init_log_lang, log_str
from ddnskit.strings import ordinal

init_log_lang("en")          # "en"
log_str("监听 %s", ":9876")   # "Listening on :9876"
ordinal(21, "en")            # "21st"
ordinal(12, "en")            # "12th"
```

`ddnskit.messages.log` writes the same text through the standard `logging`
module at INFO level.

### Keeping logs in memory

```python
from ddnskit.memory_logs import MemoryLogs

logs = MemoryLogs()
logs.write("started\n")
logs.to_json()   # '["started\\n"]'
logs.clear()
```

`MemoryLogs` keeps the last `max_num` writes (50 by default) and can be
given to `logging.StreamHandler` as its stream.

## What it does not do

This is a library only. It has no command-line program, no web server or
configuration pages, no stored configuration, and no clients that create or
update records with a DNS provider: it signs requests for those providers,
and sending them and reading the replies is left to the caller.

## Running the tests

Install the `test` extra and run `pytest` from the project directory.