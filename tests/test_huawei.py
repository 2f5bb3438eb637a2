import re
from datetime import datetime, timezone
from urllib.parse import urlsplit

from ddnskit import huawei
from ddnskit.http import Request


def _request(**headers):
    return Request(
        "GET",
        "https://dns.example.com/v2/zones?b=2&a=3&a=1",
        headers=headers,
    )


def test_canonical_uri_ends_with_slash():
    uri = huawei.canonical_uri(Request("GET", "https://example.com/v2/zones"))
    assert uri.endswith("/")
    assert uri.rstrip("/") == "/v2/zones"


def test_canonical_uri_keeps_existing_slash():
    assert huawei.canonical_uri(Request("GET", "https://example.com/v2/zones/")) == "/v2/zones/"


def test_canonical_query_string_sorts_and_rewrites_url():
    request = _request()
    query = huawei.canonical_query_string(request)
    assert query == "a=1&a=3&b=2"
    assert urlsplit(request.url).query == query


def test_signed_headers_sorted_lowercase():
    request = _request(**{"X-Sdk-Date": "20240101T000000Z", "Content-Type": "application/json"})
    assert huawei.signed_headers(request) == ["content-type", "x-sdk-date"]


def test_canonical_headers_uses_request_host_and_strips():
    request = _request(**{"Content-Type": "  application/json "})
    text = huawei.canonical_headers(request, ["content-type", "host"])
    assert text == "content-type:application/json\nhost:dns.example.com\n"


def test_request_payload():
    assert huawei.request_payload(_request()) == b""
    request = Request("POST", "https://example.com/", body=b"abc")
    assert huawei.request_payload(request) == b"abc"


def test_hex_encode_sha256_of_empty():
    empty = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
    assert huawei.hex_encode_sha256_hash(b"") == empty
    assert huawei.hex_encode_sha256_hash(None) == empty


def test_canonical_request_uses_content_sha_header():
    request = _request(**{huawei.HEADER_CONTENT_SHA256: "UNSIGNED-PAYLOAD"})
    lines = huawei.canonical_request(request, huawei.signed_headers(request)).split("\n")
    assert lines[0] == "GET"
    assert lines[-1] == "UNSIGNED-PAYLOAD"
    assert lines[-2] == "x-sdk-content-sha256"


def test_canonical_request_hashes_body():
    request = Request("POST", "https://example.com/v2/zones", body=b"{}")
    lines = huawei.canonical_request(request, []).split("\n")
    assert lines[-1] == huawei.hex_encode_sha256_hash(b"{}")


def test_string_to_sign_layout():
    t = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    lines = huawei.string_to_sign("cr", t).split("\n")
    assert lines == [huawei.ALGORITHM, "20240102T030405Z", huawei.hex_encode_sha256_hash(b"cr")]
    naive = datetime(2024, 1, 2, 3, 4, 5)
    assert huawei.string_to_sign("cr", naive) == huawei.string_to_sign("cr", t)


def test_sign_string_to_sign_depends_on_key():
    first = huawei.sign_string_to_sign("text", b"one")
    assert re.fullmatch(r"[0-9a-f]{64}", first)
    assert first == huawei.sign_string_to_sign("text", b"one")
    assert first != huawei.sign_string_to_sign("text", b"two")


def test_auth_header_value_fields():
    value = huawei.auth_header_value("sig", "placeholder", ["a", "b"])
    assert value.startswith(huawei.ALGORITHM + " ")
    assert "Access=placeholder" in value
    assert "SignedHeaders=a;b" in value
    assert value.endswith("Signature=sig")


def test_signer_sign_matches_components():
    date = "20240102T030405Z"
    request = _request(**{"X-Sdk-Date": date, "Content-Type": "application/json"})
    huawei.Signer(key="placeholder", secret="secret").sign(request)

    reference = _request(**{"X-Sdk-Date": date, "Content-Type": "application/json"})
    headers = huawei.signed_headers(reference)
    t = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    signature = huawei.sign_string_to_sign(
        huawei.string_to_sign(huawei.canonical_request(reference, headers), t), b"secret"
    )
    assert request.headers["Authorization"] == huawei.auth_header_value(
        signature, "placeholder", headers
    )
    assert request.headers["X-Sdk-Date"] == date


def test_signer_sets_date_when_missing_or_invalid():
    for request in (_request(), _request(**{"X-Sdk-Date": "not-a-date"})):
        huawei.Signer(key="placeholder", secret="secret").sign(request)
        assert re.fullmatch(r"\d{8}T\d{6}Z", request.headers["X-Sdk-Date"])
        assert "SignedHeaders=x-sdk-date," in request.headers["Authorization"]