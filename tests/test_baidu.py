import re

from ddnskit.baidu import baidu_canonical_uri, baidu_signer, hmac_sha256_hex
from ddnskit.http import Request


def test_hmac_sha256_hex_known_vector():
    assert (
        hmac_sha256_hex("Jefe", "what do ya want for nothing?")
        == "5bdcc146bf60754e6a042426089575c75a003f089d2739839dec58b964ec3843"
    )


def test_canonical_uri_keeps_path():
    request = Request("POST", "https://bcd.baidubce.com/v1/domain/resolve/list")
    assert baidu_canonical_uri(request) == "/v1/domain/resolve/list"


def test_canonical_uri_drops_trailing_slash():
    request = Request("POST", "https://bcd.baidubce.com/v1/domain/")
    assert baidu_canonical_uri(request) == "/v1/domain"


def test_canonical_uri_empty_path():
    assert baidu_canonical_uri(Request("POST", "https://bcd.baidubce.com")) == ""


def test_canonical_uri_escapes_segments():
    request = Request("POST", "https://bcd.baidubce.com/a%20b")
    assert baidu_canonical_uri(request) == "/a%20b"


def test_baidu_signer_sets_authorization():
    request = Request("POST", "https://bcd.baidubce.com/v1/domain/resolve/add")
    baidu_signer("testid", "secret", request)
    auth = request.headers["Authorization"]
    parts = auth.split("/")
    assert parts[0] == "bce-auth-v1"
    assert parts[1] == "testid"
    assert re.fullmatch(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}Z", parts[2])
    assert parts[3] == "1800"
    assert parts[4] == "host"
    assert re.fullmatch(r"[0-9a-f]{64}", parts[5])


def test_baidu_signer_signature_verifies():
    request = Request("POST", "https://bcd.baidubce.com/v1/domain/resolve/edit")
    baidu_signer("testid", "secret", request)
    prefix, _, signature = request.headers["Authorization"].rpartition("/host/")
    canonical = "POST\n/v1/domain/resolve/edit\n\nhost:bcd.baidubce.com"
    assert signature == hmac_sha256_hex(hmac_sha256_hex("secret", prefix), canonical)