"""HTML reduction: turns markup into a bounded :class:`ExtractionRecord`.

Every field has its own cap (see :class:`~adbrief.config.ScraperConfig`), so
the record size is bounded regardless of how large or deeply nested the input
document is.  Nothing here raises for malformed markup: missing elements
simply produce empty defaults.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from typing import List, Union
from urllib.parse import urljoin, urlsplit

from adbrief.config import DEFAULT_CONFIG, ScraperConfig
from adbrief.scraper.dom import DomNode, parse_html
from adbrief.scraper.models import ExtractionRecord, TrustedURL

logger = logging.getLogger(__name__)

ELLIPSIS = "…"

_WHITESPACE = re.compile(r"\s+")


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _extract_title(root: DomNode) -> str:
    """Return the text of the first ``<title>`` element, or empty string."""
    el = root.find_first("title")
    return el.text_content().strip() if el is not None else ""


def _extract_meta_description(root: DomNode) -> str:
    for el in root.find_all("meta"):
        if (el.get("name") or "").strip().lower() == "description":
            return (el.get("content") or "").strip()
    return ""


def _extract_headings(root: DomNode, config: ScraperConfig) -> List[str]:
    """Collect h1s, then h2s, then h3s, stopping at ``config.max_headings``."""
    out: List[str] = []
    if config.max_headings <= 0:
        return out
    for tag in config.heading_tags:
        for el in root.find_all(tag):
            text = el.text_content().strip()
            if text:
                out.append(text)
                if len(out) >= config.max_headings:
                    return out
    return out


def _extract_visible_text(root: DomNode, config: ScraperConfig) -> str:
    """Depth-first text walk that skips non-content subtrees.

    ``<img alt>`` contributes its alt text.  The joined result is
    whitespace-collapsed and, when longer than ``config.max_visible_text``,
    cut so that the text plus a trailing ellipsis fits the cap exactly.
    """
    parts: List[str] = []
    stack: List[DomNode] = [root]
    while stack:
        node = stack.pop()
        if node.is_text:
            text = node.text.strip()
            if text:
                parts.append(text)
            continue
        if node.tag in config.skip_tags:
            continue
        if node.tag == "img" and node.get("alt"):
            parts.append(node.get("alt") or "")
            continue
        stack.extend(reversed(node.children))

    joined = _WHITESPACE.sub(" ", " ".join(parts)).strip()
    limit = config.max_visible_text
    if len(joined) > limit:
        joined = joined[: max(limit - 1, 0)] + ELLIPSIS
    return joined


def _extract_image_urls(root: DomNode, base_url: str, config: ScraperConfig) -> List[str]:
    seen: set[str] = set()
    out: List[str] = []
    if config.max_images <= 0:
        return out
    for el in root.find_all("img"):
        src = (el.get("src") or "").strip()
        if not src:
            continue
        try:
            absolute = urljoin(base_url, src)
            scheme = urlsplit(absolute).scheme
        except ValueError:
            continue
        if scheme not in ("http", "https") or absolute in seen:
            continue
        seen.add(absolute)
        out.append(absolute)
        if len(out) >= config.max_images:
            break
    return out


def _extract_social_links(root: DomNode, config: ScraperConfig) -> List[str]:
    """Return deduplicated ``<a href>`` values pointing at known social hosts."""
    patterns = [p.lower() for p in config.social_patterns]
    seen: set[str] = set()
    out: List[str] = []
    if config.max_social_links <= 0:
        return out
    for el in root.find_all("a"):
        href = el.get("href") or ""
        if not href or href in seen:
            continue
        lowered = href.lower()
        if any(p in lowered for p in patterns):
            seen.add(href)
            out.append(href)
            if len(out) >= config.max_social_links:
                break
    return out


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def reduce_tree(
    root: DomNode,
    base_url: Union[TrustedURL, str],
    config: ScraperConfig = DEFAULT_CONFIG,
) -> ExtractionRecord:
    """Reduce an already-parsed document tree to an :class:`ExtractionRecord`."""
    base = str(base_url)
    record = ExtractionRecord(
        title=_extract_title(root),
        meta_description=_extract_meta_description(root),
        headings=tuple(_extract_headings(root, config)),
        visible_text=_extract_visible_text(root, config),
        image_urls=tuple(_extract_image_urls(root, base, config)),
        social_links=tuple(_extract_social_links(root, config)),
        fetched_at=datetime.now(timezone.utc).isoformat(),
    )
    logger.debug(
        "Reduced %s: %d headings, %d chars, %d images, %d social links",
        base,
        len(record.headings),
        len(record.visible_text),
        len(record.image_urls),
        len(record.social_links),
    )
    return record


def reduce_html(
    html: str,
    base_url: Union[TrustedURL, str],
    config: ScraperConfig = DEFAULT_CONFIG,
) -> ExtractionRecord:
    """Parse *html* and reduce it.  Never raises for malformed markup."""
    return reduce_tree(parse_html(html), base_url, config)
