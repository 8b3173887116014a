"""Centralised settings for the Ad Brief backend.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).

Two layers live here:

``Settings``
    Mutable, environment-driven process settings (LLM provider, models,
    fetch limits).

``ScraperConfig``
    Immutable bundle of caps and patterns threaded into the fetcher and the
    HTML reducer.  ``DEFAULT_CONFIG`` holds the stock values; tests build
    their own with ``dataclasses.replace``.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (one level up from this package)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)


DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; AdBriefBot/1.0; +https://example.com)"


@dataclass(frozen=True)
class ScraperConfig:
    """Caps and patterns used by the admission filter, fetcher and reducer."""

    # Admission
    max_url_length: int = 2048
    blocked_hosts: frozenset[str] = frozenset({"localhost", "127.0.0.1", "0.0.0.0"})
    private_networks: tuple[str, ...] = ("10.0.0.0/8", "172.16.0.0/12", "192.168.0.0/16")

    # Fetch
    fetch_timeout: float = 8.0
    max_body_bytes: int = 2 * 1024 * 1024
    allowed_content_types: frozenset[str] = frozenset(
        {"text/html", "application/xhtml+xml", "text/plain"}
    )
    user_agent: str = DEFAULT_USER_AGENT

    # Reduction
    max_visible_text: int = 15_000
    max_headings: int = 50
    max_images: int = 20
    max_social_links: int = 10
    heading_tags: tuple[str, ...] = ("h1", "h2", "h3")
    skip_tags: frozenset[str] = frozenset(
        {"script", "style", "noscript", "svg", "nav", "header", "footer", "aside"}
    )
    social_patterns: tuple[str, ...] = (
        "facebook.com",
        "twitter.com",
        "x.com",
        "instagram.com",
        "linkedin.com",
        "youtube.com",
    )


DEFAULT_CONFIG = ScraperConfig()


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Creative generation
    # ------------------------------------------------------------------
    llm_provider: str = field(
        default_factory=lambda: os.environ.get("LLM_PROVIDER", "mock")
    )
    openai_chat_model: str = field(
        default_factory=lambda: os.environ.get("OPENAI_CHAT_MODEL", "gpt-4o-mini")
    )
    ollama_chat_model: str = field(
        default_factory=lambda: os.environ.get("OLLAMA_CHAT_MODEL", "ministral-3:8b")
    )
    llm_temperature: float = field(
        default_factory=lambda: float(os.environ.get("LLM_TEMPERATURE", "0.7"))
    )
    ad_count: int = field(
        default_factory=lambda: int(os.environ.get("AD_COUNT", "6"))
    )

    # ------------------------------------------------------------------
    # Scraper
    # ------------------------------------------------------------------
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("REQUEST_TIMEOUT", "8.0"))
    )
    max_body_bytes: int = field(
        default_factory=lambda: int(os.environ.get("MAX_BODY_BYTES", str(2 * 1024 * 1024)))
    )
    user_agent: str = field(
        default_factory=lambda: os.environ.get("SCRAPER_USER_AGENT", DEFAULT_USER_AGENT)
    )

    @property
    def openai_api_key(self) -> str:
        """The OpenAI key, read fresh so tests can monkeypatch the env."""
        return os.environ.get("OPENAI_API_KEY", "").strip()

    def scraper_config(self) -> ScraperConfig:
        """Return a :class:`ScraperConfig` carrying the env-driven fetch limits."""
        return ScraperConfig(
            fetch_timeout=self.request_timeout,
            max_body_bytes=self.max_body_bytes,
            user_agent=self.user_agent,
        )


# Module-level singleton, imported as:
#   from adbrief.config import settings
settings = Settings()
