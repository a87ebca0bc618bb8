"""JSON envelopes and response headers shared by every transport.

``render`` turns a pipeline outcome into ``(status_code, body)``.  If the
envelope itself cannot be serialised, a fixed literal body is returned so
the caller always gets well-formed JSON.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Mapping

from pydantic import BaseModel, ConfigDict, Field

from urltext.pipeline.models import ExtractionResult, Outcome

logger = logging.getLogger(__name__)

CORS_HEADERS: Mapping[str, str] = MappingProxyType({
    "Content-Type": "application/json",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type,X-Amz-Date,Authorization,X-Api-Key,X-Amz-Security-Token",
    "Access-Control-Allow-Methods": "POST,OPTIONS",
})

FALLBACK_BODY = '{"success":false,"error":"Internal server error"}'


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

class SuccessEnvelope(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    url: str
    text: str
    content_length: int = Field(alias="contentLength")
    success: bool = True


class ErrorEnvelope(BaseModel):
    success: bool = False
    error: str


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

def preflight() -> tuple[int, str]:
    """Answer a CORS preflight probe without looking at the request."""
    return 200, "{}"


def render(outcome: Outcome) -> tuple[int, str]:
    try:
        if isinstance(outcome, ExtractionResult):
            envelope = SuccessEnvelope(
                url=outcome.url,
                text=outcome.text,
                content_length=outcome.content_length,
            )
            return 200, envelope.model_dump_json(by_alias=True)
        return outcome.status_code, ErrorEnvelope(error=outcome.message).model_dump_json()
    except Exception:
        logger.exception("Error creating response")
        return 500, FALLBACK_BODY


def render_error(status_code: int, message: str) -> tuple[int, str]:
    """Error envelope for failures raised by the transport itself (404, 405, ...)."""
    try:
        return status_code, ErrorEnvelope(error=message).model_dump_json()
    except Exception:
        logger.exception("Error creating response")
        return 500, FALLBACK_BODY
