"""AWS Lambda entry point for API Gateway proxy integrations.

Both REST API (payload v1) and HTTP API (payload v2) proxy events are
accepted.  Configure the function handler as ``urltext.api.lambda_handler.handler``.
The pipeline is built on first use and reused for the lifetime of the
execution environment.
"""

from __future__ import annotations

import base64
import binascii
import logging
from functools import lru_cache
from typing import Any, Optional

from urltext.api.envelope import CORS_HEADERS, FALLBACK_BODY, preflight, render
from urltext.config import settings
from urltext.logging import setup_logger
from urltext.pipeline import ExtractionError, ExtractionPipeline, build_pipeline
from urltext.pipeline.validator import URL_REQUIRED

setup_logger(settings.log_level)
logger = logging.getLogger(__name__)

# Seconds kept in reserve so a response is sent before the runtime kills us.
_DEADLINE_MARGIN_SECONDS = 1.0


@lru_cache(maxsize=1)
def get_pipeline() -> ExtractionPipeline:
    return build_pipeline()


def _remaining_seconds(context: Any) -> Optional[float]:
    remaining = getattr(context, "get_remaining_time_in_millis", None)
    if remaining is None:
        return None
    return remaining() / 1000.0 - _DEADLINE_MARGIN_SECONDS


def _response(status_code: int, body: str) -> dict[str, Any]:
    return {"statusCode": status_code, "headers": dict(CORS_HEADERS), "body": body}


def _http_method(event: dict[str, Any]) -> Optional[str]:
    """Method of a REST API (v1) or HTTP API (v2) proxy event."""
    method = event.get("httpMethod")
    if method is None:
        method = event.get("requestContext", {}).get("http", {}).get("method")
    return method


def handler(event: dict[str, Any], context: Any = None) -> dict[str, Any]:
    """Turn an API Gateway proxy event into a proxy response dict."""
    try:
        if _http_method(event) == "OPTIONS":
            return _response(*preflight())

        body = event.get("body")
        if body is not None and event.get("isBase64Encoded"):
            try:
                body = base64.b64decode(body, validate=True)
            except (binascii.Error, ValueError):
                return _response(*render(ExtractionError.input(URL_REQUIRED)))

        outcome = get_pipeline().run(body, deadline=_remaining_seconds(context))
        return _response(*render(outcome))
    except Exception:
        logger.exception("Error handling Lambda event")
        return _response(500, FALLBACK_BODY)
