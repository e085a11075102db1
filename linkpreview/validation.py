"""URL checks shared by the provider and the tag extractor."""

from __future__ import annotations

import re
from urllib.parse import urlsplit

from .errors import InvalidURL

ALLOWED_SCHEMES = ("http", "https")

_INVALID_URL_CHARS = re.compile(r"[\s<>\"{}|\\^`\x00-\x1f\x7f]")


def validate_url(url: str | None) -> str:
    """Return ``url`` without surrounding whitespace if it is an absolute http(s) URL with a host.

    Raises InvalidURL otherwise. Runs before any network I/O.
    """
    if not url or not isinstance(url, str):
        raise InvalidURL("URL is empty.")
    try:
        parsed = urlsplit(url.strip())
        hostname = parsed.hostname
    except ValueError as e:
        raise InvalidURL(f"Malformed URL: {url!r}", underlying=e) from e

    scheme = parsed.scheme.lower()
    if not scheme:
        raise InvalidURL(f"URL has no scheme: {url!r}")
    if scheme not in ALLOWED_SCHEMES:
        raise InvalidURL(f"Unsupported URL scheme {parsed.scheme!r}: {url!r}")
    if not hostname:
        raise InvalidURL(f"URL has no host: {url!r}")
    return url.strip()


def parse_url_candidate(value: str | None) -> str | None:
    """Return a tag attribute value if it reads as a URL reference, else None.

    Relative references are accepted as-is; they are not resolved here.
    """
    if value is None:
        return None
    candidate = value.strip()
    if not candidate or _INVALID_URL_CHARS.search(candidate):
        return None
    try:
        parsed = urlsplit(candidate)
        # Forces port parsing, which raises for junk like "http://host:abc"
        parsed.port
    except ValueError:
        return None
    if parsed.scheme and not (parsed.netloc or parsed.path):
        return None
    return candidate
