"""URL admission control and SSRF filtering.

Rules are applied in a fixed order and the first failure wins:

1. length cap
2. ``http://`` / ``https://`` prefix
3. loopback host literals
4. private IPv4 host literals
5. well-formed URL with an http(s) scheme and a host, free of control
   characters and whitespace

The host is read with ``httpx.URL``, the same parser the fetcher connects
with, so userinfo tricks such as ``http://example.com\\@127.0.0.1/`` are
judged by the host that would actually be contacted.

The checks look at the literal host in the URL only.  No DNS lookup is
performed, so a public hostname that resolves to an internal address is
*not* caught here.
"""

from __future__ import annotations

import ipaddress
import re
from functools import lru_cache
from typing import Any, Tuple

import httpx

from adbrief.config import DEFAULT_CONFIG, ScraperConfig
from adbrief.errors import ValidationError
from adbrief.scraper.models import TrustedURL

_HTTP_PREFIX = re.compile(r"^https?://", re.IGNORECASE)
_CONTROL_OR_SPACE = re.compile(r"[\x00-\x20\x7f]")


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _host_literal(url: str) -> str:
    """Return the lower-cased host httpx would connect to, or ``""``."""
    try:
        host = httpx.URL(url).host
    except httpx.InvalidURL:
        return ""
    return host.rstrip(".").lower()


@lru_cache(maxsize=8)
def _networks(cidrs: Tuple[str, ...]) -> Tuple[ipaddress.IPv4Network, ...]:
    return tuple(ipaddress.IPv4Network(c) for c in cidrs)


def _is_private_ipv4(host: str, cidrs: Tuple[str, ...]) -> bool:
    try:
        addr = ipaddress.IPv4Address(host)
    except ValueError:
        return False
    return any(addr in net for net in _networks(cidrs))


def _is_well_formed(url: str) -> bool:
    if _CONTROL_OR_SPACE.search(url):
        return False
    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.host)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def validate(candidate: Any, config: ScraperConfig = DEFAULT_CONFIG) -> TrustedURL:
    """Admit *candidate* or raise :class:`~adbrief.errors.ValidationError`.

    Returns:
        A :class:`TrustedURL` wrapping the unchanged candidate string.
    """
    if not isinstance(candidate, str):
        raise ValidationError("not_a_string")
    if len(candidate) > config.max_url_length:
        raise ValidationError("too_long", candidate[:100])
    if not _HTTP_PREFIX.match(candidate):
        raise ValidationError("bad_scheme", candidate)

    host = _host_literal(candidate)
    if host in config.blocked_hosts:
        raise ValidationError("loopback", candidate)
    if _is_private_ipv4(host, config.private_networks):
        raise ValidationError("private_ip", candidate)

    # httpx lower-cases the scheme, so "HTTP://" passes here as "http".
    if not _is_well_formed(candidate):
        raise ValidationError("malformed", candidate)

    return TrustedURL(candidate)


def is_valid_url(candidate: Any, config: ScraperConfig = DEFAULT_CONFIG) -> bool:
    """Boolean form of :func:`validate`."""
    try:
        validate(candidate, config)
    except ValidationError:
        return False
    return True
