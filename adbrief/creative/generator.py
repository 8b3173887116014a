"""Creative generators: deterministic mock and LLM-backed.

Generator backends
------------------
``mock`` (default)
    :class:`MockGenerator` — fixed ad set derived from the profile.

``openai``
    :class:`LLMGenerator` over LangChain ``ChatOpenAI``.
    Requires ``OPENAI_API_KEY``; without it the mock is used instead.

``ollama``
    :class:`LLMGenerator` over LangChain ``ChatOllama``.

Set ``LLM_PROVIDER`` in your ``.env`` to switch backends.  Whatever the
backend, :func:`generate_creative` always returns a usable payload: any
failure of the LLM path falls back to the mock.
"""

from __future__ import annotations

import json
import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from typing import Any, List, Optional

from pydantic import ValidationError as SchemaError

from adbrief.config import Settings, settings
from adbrief.creative.mock import mock_ads
from adbrief.creative.schemas import AdConcept, LLMResponse
from adbrief.errors import GeneratorError
from adbrief.profile import BusinessProfile
from adbrief.scraper.models import ExtractionRecord

logger = logging.getLogger(__name__)

_CODE_FENCE_OPEN = re.compile(r"```(?:json)?\s*", re.IGNORECASE)
_CODE_FENCE_CLOSE = re.compile(r"```\s*$")

SYSTEM_PROMPT = """You are an ad creative strategist. Given website content, produce exactly {count} ad concepts in JSON format.

Response schema (valid JSON only):
{{
  "profile": {{
    "business_name": "string",
    "category_guess": "string",
    "location_guess": "string or null",
    "value_props": ["string"],
    "tone": "string",
    "keywords": ["string"],
    "assets_needed": ["Logo", "Product photos", "etc - inferred from website"]
  }},
  "ads": [
    {{
      "duration_seconds": 5|15|30,
      "hook": "1-2 sec attention grabber",
      "angle": "the story/positioning",
      "storyboard": [{{"timestamp": "0:00-0:05", "description": "scene", "on_screen_text": "optional"}}],
      "voiceover_script": "full script",
      "cta_options": ["string"],
      "platform_variants": {{
        "meta_vertical_9_16": "format notes for 9:16",
        "youtube_horizontal_16_9": "format notes for 16:9"
      }}
    }}
  ]
}}

Order: 2x5s, 2x15s, 2x30s. Infer assets_needed from site content (logo, photos, testimonials, etc)."""


@dataclass
class CreativePayload:
    profile: BusinessProfile
    ads: List[AdConcept]
    generator: str


class CreativeGenerator(ABC):
    """Turns an extraction record and its heuristic profile into ad concepts."""

    name: str = "base"

    @abstractmethod
    def generate(self, record: ExtractionRecord, profile: BusinessProfile) -> CreativePayload:
        ...


class MockGenerator(CreativeGenerator):
    name = "mock"

    def generate(self, record: ExtractionRecord, profile: BusinessProfile) -> CreativePayload:
        return CreativePayload(profile=profile, ads=mock_ads(profile), generator=self.name)


# ---------------------------------------------------------------------------
# LLM backend
# ---------------------------------------------------------------------------

def _get_llm(cfg: Settings) -> Any:
    """Return a configured LangChain chat model based on *cfg*."""
    if cfg.llm_provider == "openai":
        from langchain_openai import ChatOpenAI

        return ChatOpenAI(
            model=cfg.openai_chat_model,
            temperature=cfg.llm_temperature,
            api_key=cfg.openai_api_key,
        )

    from langchain_ollama import ChatOllama

    return ChatOllama(model=cfg.ollama_chat_model, temperature=cfg.llm_temperature)


def build_user_prompt(record: ExtractionRecord) -> str:
    images = ", ".join(record.image_urls[:10]) or "none"
    return "\n".join(
        [
            "Website content:",
            f"Title: {record.title}",
            f"Meta: {record.meta_description}",
            f"Headings: {' | '.join(record.headings)}",
            f"Text (excerpt): {record.visible_text[:4000]}",
            f"Images (URLs only, do not fetch): {images}",
        ]
    )


def strip_code_fences(raw: str) -> str:
    """Remove Markdown code fences a model may wrap its JSON in."""
    return _CODE_FENCE_CLOSE.sub("", _CODE_FENCE_OPEN.sub("", raw)).strip()


def parse_llm_response(raw: str, min_ads: int) -> LLMResponse:
    """Decode and validate *raw* model output.

    Raises:
        GeneratorError: On invalid JSON, a schema violation, or fewer than
            *min_ads* ads.
    """
    try:
        data = json.loads(strip_code_fences(raw))
    except json.JSONDecodeError as exc:
        raise GeneratorError(f"LLM returned invalid JSON: {exc}") from exc
    try:
        parsed = LLMResponse.model_validate(data)
    except SchemaError as exc:
        raise GeneratorError(f"LLM response failed validation: {exc.error_count()} error(s)") from exc
    if len(parsed.ads) < min_ads:
        raise GeneratorError(f"LLM returned {len(parsed.ads)} ads, expected {min_ads}")
    return parsed


def merge_profile(profile: BusinessProfile, response: LLMResponse) -> BusinessProfile:
    """Overlay the fields the model supplied onto the heuristic *profile*."""
    patch = response.profile
    if patch is None:
        return profile
    updates: dict = {}
    for name in ("business_name", "category_guess", "location_guess", "tone"):
        value = getattr(patch, name)
        # blank strings count as absent
        if value is not None and value.strip():
            updates[name] = value.strip()
    for name in ("keywords", "assets_needed"):
        value = getattr(patch, name)
        if value is not None:
            updates[name] = tuple(value)
    # value_props must stay non-empty
    if patch.value_props:
        updates["value_props"] = tuple(patch.value_props)
    return replace(profile, **updates)


class LLMGenerator(CreativeGenerator):
    name = "llm"

    def __init__(self, cfg: Optional[Settings] = None, llm: Any = None) -> None:
        self.cfg = cfg or settings
        self._llm = llm

    @property
    def llm(self) -> Any:
        if self._llm is None:
            self._llm = _get_llm(self.cfg)
        return self._llm

    def generate(self, record: ExtractionRecord, profile: BusinessProfile) -> CreativePayload:
        messages = [
            ("system", SYSTEM_PROMPT.format(count=self.cfg.ad_count)),
            ("user", build_user_prompt(record)),
        ]
        try:
            response = self.llm.invoke(messages)
        except Exception as exc:
            raise GeneratorError(f"LLM call failed: {exc}") from exc

        raw = response.content if hasattr(response, "content") else str(response)
        if not isinstance(raw, str):
            raise GeneratorError("LLM returned non-text content")
        parsed = parse_llm_response(raw.strip() or "{}", self.cfg.ad_count)
        return CreativePayload(
            profile=merge_profile(profile, parsed),
            ads=parsed.ads[: self.cfg.ad_count],
            generator=self.name,
        )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def get_generator(cfg: Optional[Settings] = None) -> CreativeGenerator:
    """Return the generator selected by ``cfg.llm_provider``."""
    cfg = cfg or settings
    provider = cfg.llm_provider.strip().lower()
    if provider == "openai":
        if cfg.openai_api_key:
            return LLMGenerator(cfg)
        logger.info("OPENAI_API_KEY not set; using the mock generator")
    elif provider == "ollama":
        return LLMGenerator(cfg)
    return MockGenerator()


def generate_creative(
    record: ExtractionRecord,
    profile: BusinessProfile,
    generator: Optional[CreativeGenerator] = None,
) -> CreativePayload:
    """Run *generator*, falling back to the mock when it fails or returns no ads."""
    generator = generator or get_generator()
    try:
        payload = generator.generate(record, profile)
    except Exception as exc:  # GeneratorError or a third-party backend failure
        logger.warning("%s generator failed, using mock ads: %s", generator.name, exc)
        return MockGenerator().generate(record, profile)
    if not payload.ads:
        logger.warning("%s generator returned no ads, using mock ads", generator.name)
        return MockGenerator().generate(record, profile)
    return payload
