"""The fetch-and-extract pipeline.

``ExtractionPipeline.run`` threads one request through every stage:

    validate → fetch → extract

Each stage returns either its output or an :class:`ExtractionError`; the
first error ends the run and is returned as-is.
"""

from __future__ import annotations

import logging
from typing import Optional

from urltext.pipeline.engine import TextExtractionEngine
from urltext.pipeline.extractor import extract
from urltext.pipeline.fetcher import ContentFetcher
from urltext.pipeline.models import ExtractionError, Outcome
from urltext.pipeline.validator import validate

logger = logging.getLogger(__name__)


class ExtractionPipeline:
    """Binds one fetcher and one engine, both built once per process."""

    def __init__(self, fetcher: ContentFetcher, engine: TextExtractionEngine) -> None:
        self._fetcher = fetcher
        self._engine = engine

    @property
    def engine(self) -> TextExtractionEngine:
        return self._engine

    def close(self) -> None:
        self._fetcher.close()

    def run(self, raw_body: bytes | str | None, deadline: Optional[float] = None) -> Outcome:
        """Process one request body and return exactly one envelope.

        Args:
            raw_body: The request body as received, or ``None`` if absent.
            deadline: Seconds the caller can still wait, if known.
        """
        try:
            return self._run(raw_body, deadline)
        except Exception as exc:
            logger.exception("Error processing request")
            return ExtractionError.internal(str(exc) or type(exc).__name__)

    def _run(self, raw_body: bytes | str | None, deadline: Optional[float]) -> Outcome:
        request = validate(raw_body)
        if isinstance(request, ExtractionError):
            return request

        logger.info("Processing URL: %s", request.url)

        content = self._fetcher.fetch(request.url, deadline=deadline)
        if isinstance(content, ExtractionError):
            return content

        return extract(content, request.url, self._engine)


def build_pipeline() -> ExtractionPipeline:
    """Return a pipeline wired with a fetcher and engine built from settings."""
    return ExtractionPipeline(ContentFetcher(), TextExtractionEngine())
