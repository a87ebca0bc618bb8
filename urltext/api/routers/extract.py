"""Extraction endpoints.

Routes
------
POST    /extract    Body: {"url": "https://..."}    → pipeline run
OPTIONS /extract    CORS preflight                  → {}

Both are also served at ``/`` for gateways that proxy the bare path.
"""

from __future__ import annotations

from fastapi import APIRouter, Request, Response
from fastapi.concurrency import run_in_threadpool

from urltext.api.envelope import CORS_HEADERS, preflight, render

router = APIRouter()


def json_response(status_code: int, body: str) -> Response:
    return Response(content=body, status_code=status_code, headers=dict(CORS_HEADERS))


@router.post("/extract")
@router.post("/", include_in_schema=False)
async def extract_endpoint(request: Request) -> Response:
    """Fetch the URL named in the JSON body and return its extracted text.

    The raw body is validated by the pipeline rather than by a pydantic
    model so that malformed input gets the same envelope as every other
    error.
    """
    body = await request.body()
    pipeline = request.app.state.pipeline
    # Fetching and parsing block; keep them off the event loop.
    outcome = await run_in_threadpool(pipeline.run, body)
    return json_response(*render(outcome))


@router.options("/extract")
@router.options("/", include_in_schema=False)
def preflight_endpoint() -> Response:
    return json_response(*preflight())
