"""Resolve relative URLs found in scraped markdown against the queried page."""

import re
from urllib.parse import urljoin, urlsplit

ABSOLUTE_HTTP_RE = re.compile(r"^https?://", re.IGNORECASE)


def parse_base(url: str | None) -> str | None:
    """Return ``url`` if it can serve as a base URL, else None.

    A usable base needs both a scheme and a network location.
    """
    if not url:
        return None
    try:
        parts = urlsplit(url.strip())
    except ValueError:
        return None
    if not parts.scheme or not parts.netloc:
        return None
    return url.strip()


def resolve(candidate: str, base: str | None) -> str:
    """Make ``candidate`` absolute against ``base`` when possible.

    Absolute http(s) URLs pass through unchanged, as does everything when
    there is no base.
    """
    if not candidate or ABSOLUTE_HTTP_RE.match(candidate):
        return candidate
    if base is None:
        return candidate
    return urljoin(base, candidate)
