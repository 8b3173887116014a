"""Typed failures raised by the URL-to-profile pipeline.

Every stage either hands its output to the next one or raises one of the
exceptions below.  ``client_error`` tells the HTTP boundary whether the
failure is attributable to the submitted URL (4xx) or to us (5xx).
"""

from __future__ import annotations

from typing import Optional


class PipelineError(Exception):
    """Base class for every pipeline failure."""

    client_error = False

    def __init__(self, message: str, url: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.url = url


class ValidationError(PipelineError):
    """The candidate URL failed admission control.

    ``reason`` is a short machine-readable code: ``not_a_string``,
    ``too_long``, ``bad_scheme``, ``loopback``, ``private_ip`` or
    ``malformed``.
    """

    client_error = True

    def __init__(self, reason: str, url: Optional[str] = None) -> None:
        super().__init__(f"Invalid URL ({reason})", url)
        self.reason = reason


class FetchError(PipelineError):
    """The target resource could not be retrieved in a usable form."""

    client_error = True
    kind = "fetch"


class FetchTimeout(FetchError):
    kind = "timeout"


class UnsupportedContentType(FetchError):
    kind = "unsupported_content_type"

    def __init__(self, content_type: str, url: Optional[str] = None) -> None:
        super().__init__(f"Rejected non-HTML content type: {content_type or '(none)'}", url)
        self.content_type = content_type


class TooLarge(FetchError):
    kind = "too_large"

    def __init__(self, limit: int, url: Optional[str] = None) -> None:
        super().__init__(f"Response too large (max {limit} bytes)", url)
        self.limit = limit


class NetworkError(FetchError):
    """DNS, connection, TLS or protocol failure, surfaced as one category."""

    kind = "network"


class ReductionError(PipelineError):
    """Reserved.  The reducer degrades to empty fields instead of raising."""


class GeneratorError(PipelineError):
    """The creative backend produced nothing usable.

    Never escapes :func:`adbrief.creative.generate_creative`; the mock
    generator takes over instead.
    """
