"""Data models for the scraper pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Tuple


@dataclass(frozen=True)
class TrustedURL:
    """A URL that passed admission control.

    Only :func:`adbrief.scraper.validator.validate` should construct these.
    """

    value: str

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class RawDocument:
    """The decoded body of a single bounded fetch."""

    url: str
    final_url: str
    status_code: int
    content_type: str
    text: str
    byte_length: int


@dataclass(frozen=True)
class ExtractionRecord:
    """Bounded summary of an HTML document.

    Every sequence is capped by :class:`~adbrief.config.ScraperConfig`, so
    the record stays small no matter how large the source page was.
    """

    title: str = ""
    meta_description: str = ""
    headings: Tuple[str, ...] = ()
    visible_text: str = ""
    image_urls: Tuple[str, ...] = ()
    social_links: Tuple[str, ...] = ()
    fetched_at: str = field(default="")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "metaDescription": self.meta_description,
            "headings": list(self.headings),
            "visibleText": self.visible_text,
            "imageUrls": list(self.image_urls),
            "socialLinks": list(self.social_links),
            "fetchedAt": self.fetched_at,
        }
