"""Pydantic schemas for creative output and the LLM response contract."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class StoryboardScene(BaseModel):
    timestamp: str
    description: str
    on_screen_text: Optional[str] = None
    visual_notes: Optional[str] = None


class PlatformVariants(BaseModel):
    meta_vertical_9_16: str
    youtube_horizontal_16_9: str


class AdConcept(BaseModel):
    duration_seconds: int = Field(gt=0)
    hook: str
    angle: str
    storyboard: List[StoryboardScene] = Field(min_length=1)
    voiceover_script: str
    cta_options: List[str]
    platform_variants: PlatformVariants


class ProfilePatch(BaseModel):
    """Profile fields an LLM may override; anything omitted keeps the heuristic value."""

    business_name: Optional[str] = None
    category_guess: Optional[str] = None
    location_guess: Optional[str] = None
    value_props: Optional[List[str]] = None
    tone: Optional[str] = None
    keywords: Optional[List[str]] = None
    assets_needed: Optional[List[str]] = None


class LLMResponse(BaseModel):
    profile: Optional[ProfilePatch] = None
    ads: List[AdConcept] = Field(min_length=1)


class ProfileOut(BaseModel):
    business_name: str
    category_guess: str
    location_guess: Optional[str] = None
    value_props: List[str]
    tone: str
    keywords: List[str]
    assets_needed: List[str]


class SourceCounts(BaseModel):
    headings: int
    textLength: int
    images: int


class SourceInfo(BaseModel):
    url: str
    fetchedAt: str
    counts: SourceCounts


class GenerateResponse(BaseModel):
    profile: ProfileOut
    ads: List[AdConcept]
    source: SourceInfo
    generator: str
