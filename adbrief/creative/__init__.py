"""Creative generation — ad concepts from a profile, via mock or LLM."""

from adbrief.creative.generator import (
    CreativeGenerator,
    CreativePayload,
    LLMGenerator,
    MockGenerator,
    generate_creative,
    get_generator,
)
from adbrief.creative.mock import mock_ads
from adbrief.creative.schemas import AdConcept, GenerateResponse

__all__ = [
    "CreativeGenerator",
    "CreativePayload",
    "LLMGenerator",
    "MockGenerator",
    "generate_creative",
    "get_generator",
    "mock_ads",
    "AdConcept",
    "GenerateResponse",
]
