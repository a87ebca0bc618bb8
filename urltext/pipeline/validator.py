"""Request validation: raw request body → :class:`ExtractionRequest`."""

from __future__ import annotations

import json
import logging
from typing import Union

from urltext.pipeline.models import ExtractionError, ExtractionRequest

logger = logging.getLogger(__name__)

BODY_REQUIRED = "Request body is required"
URL_REQUIRED = "URL is required in request body"


def validate(raw_body: bytes | str | None) -> Union[ExtractionRequest, ExtractionError]:
    """Parse *raw_body* as JSON and pull out a non-blank ``url`` string.

    No scheme check is made here; an unusable URL surfaces later as a
    fetch failure.
    """
    if raw_body is None:
        return ExtractionError.input(BODY_REQUIRED)

    if isinstance(raw_body, bytes):
        try:
            raw_body = raw_body.decode("utf-8")
        except UnicodeDecodeError:
            logger.info("Rejected request body: not valid UTF-8")
            return ExtractionError.input(URL_REQUIRED)

    if not raw_body.strip():
        return ExtractionError.input(BODY_REQUIRED)

    try:
        payload = json.loads(raw_body)
    except (ValueError, RecursionError):
        logger.info("Rejected request body: not valid JSON")
        return ExtractionError.input(URL_REQUIRED)

    if not isinstance(payload, dict):
        return ExtractionError.input(URL_REQUIRED)

    url = payload.get("url")
    if not isinstance(url, str) or not url.strip():
        return ExtractionError.input(URL_REQUIRED)

    return ExtractionRequest(url=url.strip())
