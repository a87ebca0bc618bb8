"""Data models for the fetch-and-extract pipeline.

Every value here lives for a single request.  Stages return either their
own output type or an :class:`ExtractionError`; nothing is raised across a
stage boundary.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Union


class ErrorKind(str, Enum):
    """Failure taxonomy.  The value doubles as a log-friendly label."""

    INPUT = "input"
    FETCH = "fetch"
    EXTRACTION = "extraction"
    INTERNAL = "internal"

    @property
    def status_code(self) -> int:
        if self in (ErrorKind.INPUT, ErrorKind.FETCH):
            return 400
        return 500


@dataclass(frozen=True)
class ExtractionRequest:
    """A validated request: the trimmed target URL."""

    url: str


@dataclass(frozen=True)
class FetchedContent:
    """The raw bytes of a fetched resource."""

    data: bytes = field(repr=False)

    @property
    def length(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class ExtractionResult:
    """Success envelope."""

    url: str
    text: str
    content_length: int
    success: bool = True


@dataclass(frozen=True)
class ExtractionError:
    """Failure envelope.  ``message`` is the only detail shown to callers."""

    kind: ErrorKind
    message: str
    success: bool = False

    @property
    def status_code(self) -> int:
        return self.kind.status_code

    # ------------------------------------------------------------------
    # Constructors for each failure class
    # ------------------------------------------------------------------
    @classmethod
    def input(cls, message: str) -> "ExtractionError":
        return cls(ErrorKind.INPUT, message)

    @classmethod
    def fetch(cls, message: str = "Failed to download content from URL") -> "ExtractionError":
        return cls(ErrorKind.FETCH, message)

    @classmethod
    def extraction(cls, detail: str) -> "ExtractionError":
        return cls(ErrorKind.EXTRACTION, f"Failed to extract text: {detail}")

    @classmethod
    def internal(cls, detail: str) -> "ExtractionError":
        return cls(ErrorKind.INTERNAL, f"Internal server error: {detail}")


Outcome = Union[ExtractionResult, ExtractionError]
