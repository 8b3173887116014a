"""Bounded HTTP fetcher.

One GET per call, with a wall-clock budget, a content-type allow-list and a
hard byte cap.  The response is streamed so oversized or non-HTML bodies are
abandoned without being read in full, and the stream is always closed so a
timed-out request never leaks its connection.

Redirects are followed hop by hop rather than by httpx itself so that every
hop runs with whatever is left of the budget and the deadline is checked as
soon as each set of headers arrives.  httpx timeouts apply per operation, so
a single slow operation can still overrun the budget by up to its own
timeout before the next check fires.

The body is requested with ``Accept-Encoding: identity`` and any other
content encoding is refused, so the bytes counted against the cap are the
bytes on the wire and a compressed body cannot expand past it in memory.
"""

from __future__ import annotations

import logging
import time
from typing import Iterator, Optional

import httpx

from adbrief.config import DEFAULT_CONFIG, ScraperConfig
from adbrief.errors import FetchTimeout, NetworkError, TooLarge, UnsupportedContentType
from adbrief.scraper.models import RawDocument, TrustedURL

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _media_type(content_type: str) -> str:
    """Strip parameters from a Content-Type header: ``text/html; charset=x`` → ``text/html``."""
    return content_type.split(";", 1)[0].strip().lower()


def _declared_length(response: httpx.Response) -> Optional[int]:
    raw = response.headers.get("content-length")
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        return None


def _remaining(deadline: float, url: str) -> float:
    """Seconds left before *deadline*; raises :class:`FetchTimeout` once spent."""
    left = deadline - time.monotonic()
    if left <= 0:
        raise FetchTimeout(f"Timed out fetching {url}", url)
    return left


def _read_bounded(
    chunks: Iterator[bytes], limit: int, deadline: float, url: str
) -> bytes:
    """Accumulate *chunks* until exhausted, aborting past *limit* or *deadline*."""
    buf = bytearray()
    for chunk in chunks:
        buf.extend(chunk)
        if len(buf) > limit:
            raise TooLarge(limit, url)
        if time.monotonic() > deadline:
            raise FetchTimeout("Timed out reading response body", url)
    return bytes(buf)


def _make_client(config: ScraperConfig) -> httpx.Client:
    return httpx.Client(
        headers={"User-Agent": config.user_agent},
        timeout=httpx.Timeout(config.fetch_timeout),
    )


def _open(
    client: httpx.Client, target: str, config: ScraperConfig, deadline: float
) -> httpx.Response:
    """Send the GET and follow redirects, returning the final streamed response.

    Each hop gets a timeout no larger than the remaining budget, and the
    deadline is re-checked once the hop's headers are in.
    """
    request = client.build_request(
        "GET",
        target,
        headers={"User-Agent": config.user_agent, "Accept-Encoding": "identity"},
    )
    for _ in range(client.max_redirects + 1):
        request.extensions["timeout"] = httpx.Timeout(_remaining(deadline, target)).as_dict()
        response = client.send(request, stream=True, follow_redirects=False)
        try:
            _remaining(deadline, target)
        except FetchTimeout:
            response.close()
            raise
        if not response.is_redirect or response.next_request is None:
            return response
        logger.debug("Redirect %s -> %s", response.url, response.next_request.url)
        request = response.next_request
        response.close()
    raise NetworkError(f"fetch failed: more than {client.max_redirects} redirects", target)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def fetch_url(
    url: TrustedURL,
    config: ScraperConfig = DEFAULT_CONFIG,
    client: Optional[httpx.Client] = None,
) -> RawDocument:
    """Fetch *url* and return its decoded body as a :class:`RawDocument`.

    Redirects are followed.  HTTP error statuses are not treated as failures;
    the status code is recorded and the body is returned like any other.

    Args:
        url: An admitted URL.
        config: Limits to enforce.
        client: Optional pre-built ``httpx.Client``.  When omitted a client
            is created for this call and closed afterwards.

    Raises:
        FetchTimeout: The wall-clock budget ran out.
        UnsupportedContentType: The Content-Type is not in the allow-list.
        TooLarge: The body is larger than ``config.max_body_bytes``.
        NetworkError: Any other transport failure, including a URL httpx
            refuses to parse and a body sent with a content encoding.
    """
    target = str(url)
    deadline = time.monotonic() + config.fetch_timeout
    owns_client = client is None
    if client is None:
        client = _make_client(config)

    try:
        response = _open(client, target, config, deadline)
        try:
            content_type = response.headers.get("content-type", "")
            if _media_type(content_type) not in config.allowed_content_types:
                logger.warning("Rejected %s: content type %r", target, content_type)
                raise UnsupportedContentType(content_type, target)

            encoding = response.headers.get("content-encoding", "identity").strip().lower()
            if encoding not in ("", "identity"):
                logger.warning("Rejected %s: content encoding %r", target, encoding)
                raise NetworkError(
                    f"fetch failed: unsupported content encoding {encoding!r}", target
                )

            declared = _declared_length(response)
            if declared is not None and declared > config.max_body_bytes:
                logger.warning("Rejected %s: declared length %d", target, declared)
                raise TooLarge(config.max_body_bytes, target)

            body = _read_bounded(
                response.iter_bytes(), config.max_body_bytes, deadline, target
            )
            _remaining(deadline, target)
            status_code = response.status_code
            final_url = str(response.url)
        finally:
            response.close()
    except httpx.TimeoutException as exc:
        raise FetchTimeout(f"Timed out fetching {target}", target) from exc
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        raise NetworkError(f"fetch failed: {exc}", target) from exc
    finally:
        if owns_client:
            client.close()

    logger.debug(
        "Fetched %s -> %s (status=%d, %d bytes)", target, final_url, status_code, len(body)
    )
    return RawDocument(
        url=target,
        final_url=final_url,
        status_code=status_code,
        content_type=content_type,
        text=body.decode("utf-8", errors="replace"),
        byte_length=len(body),
    )
