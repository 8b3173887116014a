"""Scraper package — URL admission, bounded fetch & HTML reduction."""

from adbrief.scraper.extractor import reduce_html, reduce_tree
from adbrief.scraper.fetcher import fetch_url
from adbrief.scraper.models import ExtractionRecord, RawDocument, TrustedURL
from adbrief.scraper.validator import is_valid_url, validate

__all__ = [
    "validate",
    "is_valid_url",
    "fetch_url",
    "reduce_html",
    "reduce_tree",
    "TrustedURL",
    "RawDocument",
    "ExtractionRecord",
]
