"""Text extraction and response assembly: :class:`FetchedContent` → envelope."""

from __future__ import annotations

import logging
from typing import Union

from urltext.pipeline.engine import ParseError, TextExtractionEngine
from urltext.pipeline.models import ExtractionError, ExtractionResult, FetchedContent

logger = logging.getLogger(__name__)


def extract(
    content: FetchedContent, url: str, engine: TextExtractionEngine
) -> Union[ExtractionResult, ExtractionError]:
    """Run *engine* over *content* and wrap the text in a success envelope.

    ``content_length`` is the size of the fetched bytes, not of the text.
    """
    try:
        text = engine.parse(content.data)
    except ParseError as exc:
        logger.error("Error extracting text from URL: %s - %s", url, exc)
        return ExtractionError.extraction(str(exc))

    logger.info(
        "Successfully processed URL: %s, extracted text length: %d", url, len(text)
    )
    return ExtractionResult(url=url, text=text, content_length=content.length)
