"""FastAPI application factory.

Lifespan
--------
On startup the app builds a single :class:`ExtractionPipeline` (one HTTP
client and one extraction engine, shared by all requests via
``request.app.state.pipeline``).  On shutdown it closes the HTTP client.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from urltext import __version__
from urltext.api.envelope import FALLBACK_BODY, render_error
from urltext.api.routers import extract as extract_router
from urltext.api.routers.extract import json_response
from urltext.config import settings
from urltext.logging import setup_logger
from urltext.pipeline import ExtractionPipeline, build_pipeline

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Build the pipeline on startup (unless one was injected) and close it on shutdown."""
    pipeline: ExtractionPipeline | None = getattr(app.state, "pipeline", None)
    if pipeline is None:
        pipeline = build_pipeline()
        app.state.pipeline = pipeline
    try:
        yield
    finally:
        pipeline.close()


def create_app(pipeline: ExtractionPipeline | None = None) -> FastAPI:
    """Return a fully-configured FastAPI application instance.

    Args:
        pipeline: Use this pipeline instead of building one from settings.
    """
    setup_logger(settings.log_level)

    app = FastAPI(
        title="urltext",
        description="Fetch a URL, detect its format and return the plain text.",
        version=__version__,
        lifespan=lifespan,
    )
    if pipeline is not None:
        app.state.pipeline = pipeline

    @app.get("/health", include_in_schema=False)
    def health() -> dict[str, str]:
        return {"status": "ok"}

    app.include_router(extract_router.router, tags=["extract"])

    # Errors raised by routing itself still get the JSON envelope and CORS headers.
    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> Response:
        response = json_response(*render_error(exc.status_code, str(exc.detail)))
        for name, value in (exc.headers or {}).items():
            response.headers.setdefault(name, value)
        return response

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> Response:
        logger.exception("Unhandled error serving %s", request.url.path)
        return json_response(500, FALLBACK_BODY)

    return app


# Module-level instance used by uvicorn:
#   uvicorn urltext.api.app:app
app = create_app()
