"""FastAPI application factory.

Lifespan
--------
On startup the app picks the creative generator once (from
``settings.llm_provider``) and stores it on ``app.state.generator``.  No
other state is kept between requests.

Routers
-------
    /api     — brief generation and profiling
    /health  — liveness probe
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from adbrief.creative import get_generator

from adbrief.api.routers import generate as generate_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Select the creative generator on startup."""
    app.state.generator = get_generator()
    if app.state.generator.name == "mock":
        logger.info("Mock mode: no LLM configured, using deterministic output")
    yield


def create_app() -> FastAPI:
    """Return a fully-configured FastAPI application instance."""
    app = FastAPI(
        title="Ad Brief API",
        description=(
            "Turns a public URL into a business profile and a set of short-form "
            "ad concepts.  URLs are admission-checked against SSRF patterns and "
            "fetched under strict time and size limits."
        ),
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    app.include_router(generate_router.router, prefix="/api", tags=["brief"])

    @app.get("/health", tags=["health"])
    def health() -> dict:
        return {"status": "ok", "generator": app.state.generator.name}

    return app


# Module-level instance used by uvicorn:
#   uvicorn adbrief.api.app:app --reload
app = create_app()
