"""Deterministic ad concepts derived purely from a :class:`BusinessProfile`.

Used when no LLM is configured and as the fallback whenever the LLM backend
returns something unusable.
"""

from __future__ import annotations

from typing import List

from adbrief.creative.schemas import AdConcept, PlatformVariants, StoryboardScene
from adbrief.profile import BusinessProfile

DURATIONS = (5, 5, 15, 15, 30, 30)

CTA_OPTIONS = ["Visit our website", "Call now", "Book a consultation"]

PLATFORM_VARIANTS = PlatformVariants(
    meta_vertical_9_16="Vertical format, text centered, CTA at bottom",
    youtube_horizontal_16_9="Horizontal format, text lower third, CTA end frame",
)


def _pick(items, idx: int, fallback: str) -> str:
    return items[idx] if len(items) > idx else fallback


def mock_ad(duration: int, profile: BusinessProfile) -> AdConcept:
    name = profile.business_name
    if duration <= 5:
        hook = f"Stop scrolling: {name} is here."
    else:
        hook = "What if you could get more customers without the hassle?"
    angle = f"{name} helps local businesses grow."

    scenes = [
        StoryboardScene(
            timestamp="0:00-0:03",
            description="Hook: logo or key visual",
            on_screen_text=name,
        ),
        StoryboardScene(
            timestamp="0:03-0:08",
            description="Value prop",
            on_screen_text=_pick(profile.value_props, 0, "Your trusted partner"),
        ),
    ]
    if duration >= 15:
        scenes.append(
            StoryboardScene(
                timestamp="0:08-0:12",
                description="Social proof or benefit",
                on_screen_text=_pick(profile.value_props, 1, "Trusted by many"),
            )
        )
    if duration >= 30:
        scenes.extend(
            [
                StoryboardScene(
                    timestamp="0:12-0:22",
                    description="Detail or testimonial",
                    on_screen_text=_pick(profile.keywords, 0, "Quality"),
                ),
                StoryboardScene(
                    timestamp="0:22-0:30",
                    description="CTA",
                    on_screen_text="Visit today",
                ),
            ]
        )

    return AdConcept(
        duration_seconds=duration,
        hook=hook,
        angle=angle,
        storyboard=scenes,
        voiceover_script=f"{hook} {angle} Visit us today.",
        cta_options=list(CTA_OPTIONS),
        platform_variants=PLATFORM_VARIANTS.model_copy(),
    )


def mock_ads(profile: BusinessProfile) -> List[AdConcept]:
    """Return the fixed six-ad set (2×5s, 2×15s, 2×30s) for *profile*."""
    return [mock_ad(d, profile) for d in DURATIONS]
