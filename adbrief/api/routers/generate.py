"""Brief endpoints.

Routes
------
POST /api/generate   Body: {"url": "https://..."}   → profile + ad concepts
POST /api/profile    Body: {"url": "https://..."}   → extraction record + profile

Error mapping: URL rejections and unusable targets are the caller's problem
(400); anything else is ours (500).  Errors are returned as
``{"error": "<message>"}``.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from adbrief.errors import PipelineError, ValidationError
from adbrief.pipeline import generate_brief, process_url

logger = logging.getLogger(__name__)

router = APIRouter()

INVALID_URL_MESSAGE = "Invalid URL (must be http/https, no localhost or private IPs)"


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

class UrlRequest(BaseModel):
    # Plain str: admission control is ours, not pydantic's HttpUrl.
    url: Optional[Any] = None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _candidate(body: UrlRequest) -> str:
    return body.url.strip() if isinstance(body.url, str) else ""


def _pipeline_error(exc: PipelineError) -> JSONResponse:
    if isinstance(exc, ValidationError):
        return _error(400, INVALID_URL_MESSAGE)
    return _error(400 if exc.client_error else 500, exc.message)


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post("/generate")
def generate_endpoint(body: UrlRequest, request: Request) -> Any:
    """Fetch the URL, profile the business and return six ad concepts."""
    url = _candidate(body)
    if not url:
        return _error(400, "Missing url")
    try:
        result = generate_brief(url, generator=request.app.state.generator)
    except PipelineError as exc:
        logger.warning("Generate failed for %s: %s", url, exc)
        return _pipeline_error(exc)
    except Exception as exc:
        logger.exception("Unexpected failure generating brief for %s", url)
        return _error(500, str(exc) or "Unknown error")
    return result.model_dump()


@router.post("/profile")
def profile_endpoint(body: UrlRequest) -> Any:
    """Fetch the URL and return the extraction record and heuristic profile."""
    url = _candidate(body)
    if not url:
        return _error(400, "Missing url")
    try:
        result = process_url(url)
    except PipelineError as exc:
        logger.warning("Profile failed for %s: %s", url, exc)
        return _pipeline_error(exc)
    except Exception as exc:
        logger.exception("Unexpected failure profiling %s", url)
        return _error(500, str(exc) or "Unknown error")
    return result.to_dict()
