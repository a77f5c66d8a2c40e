import pytest

from core.errors import InvalidInputError
from core.normalizer import normalize_url


@pytest.mark.parametrize("raw, expected", [
    ("example.com", "https://example.com"),
    (" http://foo.com ", "http://foo.com"),
    ("https://example.com/path?q=1", "https://example.com/path?q=1"),
    ("www.example.com/about", "https://www.example.com/about"),
    ("HTTPS://Example.com", "HTTPS://Example.com"),
    ("//example.com", "https://example.com"),
])
def test_normalized_url(raw, expected):
    assert normalize_url(raw).normalized_url == expected


def test_missing_scheme_defaults_to_https():
    target = normalize_url("example.com")
    assert target.scheme == "https"
    assert target.port == 443
    assert target.domain == "example.com"
    assert target.raw_url == "example.com"


def test_http_default_port():
    target = normalize_url("http://example.com/")
    assert target.scheme == "http"
    assert target.port == 80
    assert target.origin == "http://example.com"


def test_explicit_port_is_kept():
    target = normalize_url("https://example.com:8443/admin")
    assert target.port == 8443
    assert target.domain == "example.com"
    assert target.origin == "https://example.com:8443"


def test_domain_is_lowercased_and_credentials_dropped():
    target = normalize_url("https://user:pw@WWW.Example.COM/")
    assert target.domain == "www.example.com"


def test_invalid_port_falls_back_to_default():
    target = normalize_url("https://example.com:99999/")
    assert target.domain == "example.com"
    assert target.port == 443


def test_unparseable_url_uses_fallback_domain():
    # An unbalanced IPv6 bracket makes urlsplit raise
    target = normalize_url("http://[::1/path")
    assert target.scheme == "http"
    assert target.domain == "::1"
    assert target.port == 80


@pytest.mark.parametrize("raw", [None, "", "   ", "\t\n"])
def test_empty_input_is_rejected(raw):
    with pytest.raises(InvalidInputError, match="URL is required"):
        normalize_url(raw)


def test_scheme_without_host_is_rejected():
    with pytest.raises(InvalidInputError):
        normalize_url("https://")


def test_protocol_relative_url_keeps_its_host():
    target = normalize_url("//Example.com/docs")
    assert target.normalized_url == "https://Example.com/docs"
    assert target.domain == "example.com"
    assert target.port == 443
