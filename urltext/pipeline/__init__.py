"""Pipeline package: request validation, fetch & text extraction."""

from urltext.pipeline.engine import ParseError, TextExtractionEngine
from urltext.pipeline.extractor import extract
from urltext.pipeline.fetcher import ContentFetcher
from urltext.pipeline.formats import DetectedFormat, detect_format
from urltext.pipeline.models import (
    ErrorKind,
    ExtractionError,
    ExtractionRequest,
    ExtractionResult,
    FetchedContent,
    Outcome,
)
from urltext.pipeline.runner import ExtractionPipeline, build_pipeline
from urltext.pipeline.validator import validate

__all__ = [
    "ContentFetcher",
    "DetectedFormat",
    "ErrorKind",
    "ExtractionError",
    "ExtractionPipeline",
    "ExtractionRequest",
    "ExtractionResult",
    "FetchedContent",
    "Outcome",
    "ParseError",
    "TextExtractionEngine",
    "build_pipeline",
    "detect_format",
    "extract",
    "validate",
]
