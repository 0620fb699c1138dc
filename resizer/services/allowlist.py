from collections.abc import Collection
from urllib.parse import urlsplit

from resizer.errors import BlockedHost, InvalidRequest

_SCHEMES = {"http", "https"}


def extract_host(url: str) -> str:
    """Return the host component of `url` exactly as written (no case folding)."""
    try:
        parts = urlsplit(url)
        parts.port  # raises ValueError on a malformed port
    except ValueError:
        raise InvalidRequest()

    if parts.scheme not in _SCHEMES:
        raise InvalidRequest()

    host = parts.netloc.rpartition("@")[2]
    if host.startswith("["):
        host = host[: host.find("]") + 1]
    else:
        host = host.partition(":")[0]

    if not host or host == "[]":
        raise InvalidRequest()
    return host


def validate_source(url: str, allowed_hosts: Collection[str]) -> str:
    """Check `url` against the allowlist before any network call is made.

    Matching is exact: `Example.com` and `cdn.example.com` do not match an
    allowlist containing `example.com`.
    """
    host = extract_host(url)
    if host not in allowed_hosts:
        raise BlockedHost()
    return host
