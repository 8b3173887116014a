"""Deterministic business-profile heuristic over an :class:`ExtractionRecord`."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from adbrief.scraper.models import ExtractionRecord

UNKNOWN_BUSINESS = "Unknown Business"
DEFAULT_CATEGORY = "Local Business"
DEFAULT_TONE = "Professional, approachable"
DEFAULT_VALUE_PROP = "Quality products and services"

MAX_VALUE_PROPS = 5
MAX_KEYWORDS = 8

_TITLE_SEPARATORS = re.compile(r"[|–—\-]")


@dataclass(frozen=True)
class BusinessProfile:
    business_name: str
    category_guess: str
    value_props: Tuple[str, ...]
    tone: str
    keywords: Tuple[str, ...]
    assets_needed: Tuple[str, ...]
    location_guess: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "business_name": self.business_name,
            "category_guess": self.category_guess,
            "location_guess": self.location_guess,
            "value_props": list(self.value_props),
            "tone": self.tone,
            "keywords": list(self.keywords),
            "assets_needed": list(self.assets_needed),
        }


def _business_name(title: str) -> str:
    for segment in _TITLE_SEPARATORS.split(title):
        segment = segment.strip()
        if segment:
            return segment
    return UNKNOWN_BUSINESS


def _value_props(record: ExtractionRecord) -> List[str]:
    props = [h for h in record.headings if h.strip()][:MAX_VALUE_PROPS]
    if props:
        return props
    desc = record.meta_description or record.visible_text[:300]
    if desc[:100]:
        return [desc[:100]]
    return [DEFAULT_VALUE_PROP]


def _assets_needed(record: ExtractionRecord) -> List[str]:
    assets = ["Logo"]
    if record.image_urls:
        assets.append("Product/service photos")
    text = record.visible_text.lower()
    if "testimonial" in text or "review" in text:
        assets.append("Customer testimonials")
    if record.social_links:
        assets.append("Social proof graphics")
    assets.append("CTA graphics")
    return assets


def build_profile(record: ExtractionRecord) -> BusinessProfile:
    """Derive a :class:`BusinessProfile` from *record*.

    Pure and deterministic: the same record always yields an equal profile.
    ``value_props`` is never empty.
    """
    return BusinessProfile(
        business_name=_business_name(record.title),
        category_guess=DEFAULT_CATEGORY,
        value_props=tuple(_value_props(record)),
        tone=DEFAULT_TONE,
        keywords=tuple(h for h in record.headings if h.strip())[:MAX_KEYWORDS],
        assets_needed=tuple(_assets_needed(record)),
    )
