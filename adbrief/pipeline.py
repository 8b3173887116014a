"""End-to-end pipeline: admit → fetch → reduce → profile (→ creative).

Each call builds its own record chain; nothing is cached or shared between
calls, so concurrent requests need no coordination.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from adbrief.config import ScraperConfig, settings
from adbrief.creative import CreativeGenerator, GenerateResponse, generate_creative
from adbrief.profile import BusinessProfile, build_profile
from adbrief.scraper import ExtractionRecord, fetch_url, reduce_html, validate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineResult:
    url: str
    record: ExtractionRecord
    profile: BusinessProfile

    def to_dict(self) -> dict:
        return {"record": self.record.to_dict(), "profile": self.profile.to_dict()}


def process_url(
    candidate: str,
    *,
    config: Optional[ScraperConfig] = None,
    client: Optional[httpx.Client] = None,
) -> PipelineResult:
    """Run the core pipeline for *candidate*.

    Raises:
        ValidationError: The URL failed admission control.
        FetchError: The page could not be retrieved in a usable form.
    """
    config = config or settings.scraper_config()
    trusted = validate(candidate, config)
    raw = fetch_url(trusted, config, client=client)
    record = reduce_html(raw.text, trusted, config)
    profile = build_profile(record)
    logger.info("Profiled %s as %r", trusted, profile.business_name)
    return PipelineResult(url=str(trusted), record=record, profile=profile)


def generate_brief(
    candidate: str,
    *,
    generator: Optional[CreativeGenerator] = None,
    config: Optional[ScraperConfig] = None,
    client: Optional[httpx.Client] = None,
) -> GenerateResponse:
    """Run :func:`process_url` and turn the result into a full creative brief."""
    result = process_url(candidate, config=config, client=client)
    payload = generate_creative(result.record, result.profile, generator)
    record = result.record
    return GenerateResponse.model_validate(
        {
            "profile": payload.profile.to_dict(),
            "ads": payload.ads,
            "source": {
                "url": result.url,
                "fetchedAt": record.fetched_at,
                "counts": {
                    "headings": len(record.headings),
                    "textLength": len(record.visible_text),
                    "images": len(record.image_urls),
                },
            },
            "generator": payload.generator,
        }
    )
