import pytest

from resizer.errors import BlockedHost, InvalidRequest
from resizer.services.allowlist import extract_host, validate_source

ALLOWED = {"images.example.com", "cdn.test"}


class TestValidateSource:
    @pytest.mark.parametrize(
        "url",
        [
            "https://images.example.com/a.jpg",
            "http://cdn.test/path/to/b.png?v=2",
            "https://cdn.test:8443/c.gif",
            "https://user:pw@cdn.test/d.webp",
        ],
    )
    def test_allowed(self, url):
        assert validate_source(url, ALLOWED) in ALLOWED

    @pytest.mark.parametrize(
        "url",
        [
            "https://content.com/test.jpg",
            "https://IMAGES.example.com/a.jpg",
            "https://sub.images.example.com/a.jpg",
            "https://example.com/a.jpg",
            "https://cdn.test.evil.com/a.jpg",
        ],
    )
    def test_blocked(self, url):
        with pytest.raises(BlockedHost):
            validate_source(url, ALLOWED)

    @pytest.mark.parametrize(
        "url",
        ["img.jpg", "", "ftp://cdn.test/a.jpg", "https:///a.jpg", "https://cdn.test:notaport/a.jpg", "https://[::1/a"],
    )
    def test_unparsable(self, url):
        with pytest.raises(InvalidRequest):
            validate_source(url, ALLOWED)

    def test_empty_allowlist_blocks_everything(self):
        with pytest.raises(BlockedHost):
            validate_source("https://images.example.com/a.jpg", set())

    def test_blocked_host_message(self):
        with pytest.raises(BlockedHost) as exc_info:
            validate_source("https://content.com/test.jpg", ALLOWED)
        assert str(exc_info.value) == "Image Host Is Not Allowed"


class TestExtractHost:
    def test_keeps_case(self):
        assert extract_host("https://Images.Example.com/x") == "Images.Example.com"

    def test_ipv6(self):
        assert extract_host("http://[::1]:8080/x") == "[::1]"
