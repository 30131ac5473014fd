from __future__ import annotations

import re
from typing import FrozenSet, Iterable, Tuple
from urllib.parse import urlsplit

from .errors import InvalidHeader, InvalidUrl
from .types import HttpHeader

ALLOWED_SCHEMES: FrozenSet[str] = frozenset({"http", "https"})

# RFC 7230 token
_HEADER_NAME = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")
_FORBIDDEN_VALUE_CHARS = ("\r", "\n", "\x00")


def _has_control_or_space(s: str) -> bool:
    return any(ord(ch) <= 0x20 or ord(ch) == 0x7F for ch in s)


def validate_url(url: str) -> str:
    """Check that `url` is a well-formed http(s) URL and return it unchanged.

    This is the guard against `file://` and other local-resource schemes. It is
    purely syntactic: no DNS lookups, no redirect following.

    Raises
    - InvalidUrl: malformed URL, missing host, bad port, disallowed scheme or
      curl glob syntax.
    """

    if not isinstance(url, str) or not url:
        raise InvalidUrl("url must be a non-empty string")

    if _has_control_or_space(url):
        raise InvalidUrl("url must not contain whitespace or control characters")

    try:
        parts = urlsplit(url)
        # .port parses lazily and raises on garbage like ":99999" or ":abc"
        _ = parts.port
    except ValueError as e:
        raise InvalidUrl(f"url is malformed: {e}") from e

    scheme = parts.scheme.lower()
    if not scheme:
        raise InvalidUrl("url has no scheme")
    if scheme not in ALLOWED_SCHEMES:
        raise InvalidUrl(f"url scheme {scheme!r} is not allowed (allowed: http, https)")

    if not parts.netloc or not parts.hostname:
        raise InvalidUrl("url has no host")

    _reject_glob_syntax(url, parts.netloc)

    return url


def _reject_glob_syntax(url: str, netloc: str) -> None:
    """curl treats `{a,b}` and `[1-9]` in a URL as globs; only an IPv6 host may use brackets."""

    if "{" in url or "}" in url:
        raise InvalidUrl("url must not contain '{' or '}'")

    hostport = netloc.rpartition("@")[2]
    outside_host = url.replace(hostport, "", 1)
    if "[" in outside_host or "]" in outside_host:
        raise InvalidUrl("url may only use '[' and ']' around an IPv6 host")
    if ("[" in hostport or "]" in hostport) and not (
        hostport.startswith("[") and hostport.count("[") == 1 and hostport.count("]") == 1
    ):
        raise InvalidUrl("url may only use '[' and ']' around an IPv6 host")


def validate_headers(headers: Iterable[HttpHeader]) -> Tuple[HttpHeader, ...]:
    """Reject headers curl could misinterpret; keep order and duplicates.

    A name starting with `@` would make curl read headers from a local file,
    so names are restricted to RFC 7230 tokens. Values may not smuggle extra
    header lines.
    """

    out = tuple(headers)
    for idx, h in enumerate(out):
        if not _HEADER_NAME.match(h.name):
            raise InvalidHeader(f"header #{idx} has an invalid name: {h.name!r}")
        if any(ch in h.value for ch in _FORBIDDEN_VALUE_CHARS):
            raise InvalidHeader(f"header {h.name!r} value contains CR, LF or NUL")
    return out
