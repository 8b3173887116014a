"""Tests for the creative generators.

Mocking strategy
----------------
* LLM calls — ``LLMGenerator`` is handed a ``MagicMock`` whose ``.invoke()``
  returns a fake ``AIMessage``-like object, so no LangChain model is built.
"""

from __future__ import annotations

import json
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from adbrief.config import Settings
from adbrief.creative import (
    LLMGenerator,
    MockGenerator,
    generate_creative,
    get_generator,
    mock_ads,
)
from adbrief.creative.generator import (
    merge_profile,
    parse_llm_response,
    strip_code_fences,
)
from adbrief.creative.mock import DURATIONS
from adbrief.errors import GeneratorError
from adbrief.profile import build_profile
from adbrief.scraper.models import ExtractionRecord


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _fake_ai_message(content: str) -> SimpleNamespace:
    """Minimal stand-in for a LangChain ``AIMessage``."""
    return SimpleNamespace(content=content)


def _fake_llm(content: str) -> MagicMock:
    llm = MagicMock()
    llm.invoke.return_value = _fake_ai_message(content)
    return llm


def _record() -> ExtractionRecord:
    return ExtractionRecord(
        title="Joe's Pizza | Best in Town",
        meta_description="Wood-fired pizza.",
        headings=("Fresh dough daily", "Open late"),
        visible_text="Fresh dough daily. Open late. Reviews from locals.",
        image_urls=("https://example.com/pie.jpg",),
        fetched_at="2026-01-01T00:00:00+00:00",
    )


def _ad(duration: int = 5) -> dict:
    return {
        "duration_seconds": duration,
        "hook": "Hungry?",
        "angle": "Local favourite",
        "storyboard": [{"timestamp": "0:00-0:05", "description": "Pizza close-up"}],
        "voiceover_script": "Hungry? Come to Joe's.",
        "cta_options": ["Order now"],
        "platform_variants": {
            "meta_vertical_9_16": "vertical",
            "youtube_horizontal_16_9": "horizontal",
        },
    }


def _llm_json(ads: int = 6, profile: dict | None = None) -> str:
    payload = {"ads": [_ad(d) for d in (list(DURATIONS) * 2)[:ads]]}
    if profile is not None:
        payload["profile"] = profile
    return json.dumps(payload)


_CFG = Settings(llm_provider="openai")


# ---------------------------------------------------------------------------
# Mock generator
# ---------------------------------------------------------------------------

class TestMockGenerator:
    def test_six_ads_in_fixed_durations(self) -> None:
        profile = build_profile(_record())
        ads = mock_ads(profile)
        assert [a.duration_seconds for a in ads] == [5, 5, 15, 15, 30, 30]

    def test_storyboard_grows_with_duration(self) -> None:
        ads = mock_ads(build_profile(_record()))
        assert [len(a.storyboard) for a in ads] == [2, 2, 3, 3, 5, 5]

    def test_uses_profile_text(self) -> None:
        profile = build_profile(_record())
        ad = mock_ads(profile)[0]
        assert "Joe's Pizza" in ad.hook
        assert ad.storyboard[1].on_screen_text == "Fresh dough daily"
        assert ad.voiceover_script.endswith("Visit us today.")

    def test_deterministic(self) -> None:
        profile = build_profile(_record())
        first = [a.model_dump() for a in mock_ads(profile)]
        second = [a.model_dump() for a in mock_ads(profile)]
        assert first == second

    def test_generator_name(self) -> None:
        record = _record()
        payload = MockGenerator().generate(record, build_profile(record))
        assert payload.generator == "mock"
        assert len(payload.ads) == 6


# ---------------------------------------------------------------------------
# LLM response parsing
# ---------------------------------------------------------------------------

class TestParseLlmResponse:
    def test_strips_code_fences(self) -> None:
        assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'
        assert strip_code_fences('```\n{"a": 1}```') == '{"a": 1}'

    def test_valid_payload(self) -> None:
        parsed = parse_llm_response(_llm_json(), min_ads=6)
        assert len(parsed.ads) == 6

    def test_invalid_json(self) -> None:
        with pytest.raises(GeneratorError):
            parse_llm_response("not json at all", min_ads=6)

    def test_too_few_ads(self) -> None:
        with pytest.raises(GeneratorError):
            parse_llm_response(_llm_json(ads=3), min_ads=6)

    def test_missing_required_ad_field(self) -> None:
        data = json.loads(_llm_json())
        del data["ads"][2]["hook"]
        with pytest.raises(GeneratorError):
            parse_llm_response(json.dumps(data), min_ads=6)

    def test_ads_not_a_list(self) -> None:
        with pytest.raises(GeneratorError):
            parse_llm_response('{"ads": "six great ads"}', min_ads=6)


class TestMergeProfile:
    def test_overrides_supplied_fields_only(self) -> None:
        profile = build_profile(_record())
        parsed = parse_llm_response(
            _llm_json(profile={"business_name": "Joe's", "location_guess": "Brooklyn"}),
            min_ads=6,
        )
        merged = merge_profile(profile, parsed)
        assert merged.business_name == "Joe's"
        assert merged.location_guess == "Brooklyn"
        assert merged.tone == profile.tone
        assert merged.value_props == profile.value_props

    def test_empty_value_props_ignored(self) -> None:
        profile = build_profile(_record())
        parsed = parse_llm_response(_llm_json(profile={"value_props": []}), min_ads=6)
        assert merge_profile(profile, parsed).value_props == profile.value_props


# ---------------------------------------------------------------------------
# LLM generator + fallback
# ---------------------------------------------------------------------------

class TestLLMGenerator:
    def test_valid_output_used(self) -> None:
        record = _record()
        gen = LLMGenerator(_CFG, llm=_fake_llm(_llm_json(ads=8, profile={"tone": "Playful"})))
        payload = generate_creative(record, build_profile(record), gen)
        assert payload.generator == "llm"
        assert len(payload.ads) == 6
        assert payload.profile.tone == "Playful"

    def test_prompt_contains_site_content(self) -> None:
        record = _record()
        llm = _fake_llm(_llm_json())
        LLMGenerator(_CFG, llm=llm).generate(record, build_profile(record))
        messages = llm.invoke.call_args.args[0]
        user = messages[1][1]
        assert "Joe's Pizza | Best in Town" in user
        assert "https://example.com/pie.jpg" in user

    @pytest.mark.parametrize(
        "content",
        [
            "Sorry, I can't help with that.",
            _llm_json(ads=2),
            '{"profile": {}, "ads": []}',
            "",
        ],
    )
    def test_malformed_output_falls_back_to_mock(self, content: str) -> None:
        record = _record()
        profile = build_profile(record)
        gen = LLMGenerator(_CFG, llm=_fake_llm(content))
        payload = generate_creative(record, profile, gen)
        assert payload.generator == "mock"
        assert payload.profile == profile
        assert [a.model_dump() for a in payload.ads] == [a.model_dump() for a in mock_ads(profile)]

    def test_llm_exception_falls_back_to_mock(self) -> None:
        record = _record()
        llm = MagicMock()
        llm.invoke.side_effect = RuntimeError("rate limited")
        payload = generate_creative(record, build_profile(record), LLMGenerator(_CFG, llm=llm))
        assert payload.generator == "mock"

    def test_generate_raises_generator_error_directly(self) -> None:
        record = _record()
        gen = LLMGenerator(_CFG, llm=_fake_llm("nope"))
        with pytest.raises(GeneratorError):
            gen.generate(record, build_profile(record))


class TestGetGenerator:
    def test_default_is_mock(self) -> None:
        assert isinstance(get_generator(Settings(llm_provider="mock")), MockGenerator)

    def test_openai_without_key_is_mock(self, monkeypatch) -> None:
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        assert isinstance(get_generator(Settings(llm_provider="openai")), MockGenerator)

    def test_openai_with_key(self, monkeypatch) -> None:
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        assert isinstance(get_generator(Settings(llm_provider="openai")), LLMGenerator)

    def test_ollama(self) -> None:
        assert isinstance(get_generator(Settings(llm_provider="ollama")), LLMGenerator)

    @pytest.mark.parametrize("blank", ["", "   ", "\n\t"])
    def test_blank_strings_ignored(self, blank: str) -> None:
        profile = build_profile(_record())
        parsed = parse_llm_response(
            _llm_json(profile={"business_name": blank, "tone": blank, "category_guess": blank}),
            min_ads=6,
        )
        merged = merge_profile(profile, parsed)
        assert merged.business_name == profile.business_name
        assert merged.tone == profile.tone
        assert merged.category_guess == profile.category_guess

    def test_supplied_name_is_trimmed(self) -> None:
        profile = build_profile(_record())
        parsed = parse_llm_response(_llm_json(profile={"business_name": "  Joe's  "}), min_ads=6)
        assert merge_profile(profile, parsed).business_name == "Joe's"
