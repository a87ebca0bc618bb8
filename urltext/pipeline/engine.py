"""Multi-format text extraction engine.

:class:`TextExtractionEngine` turns raw bytes of any supported format into
plain text.  Parsers are registered per media type; the format is always
detected from the bytes by :func:`~urltext.pipeline.formats.detect_format`.

Supported out-of-the-box:
    • PDF          – pypdf
    • DOCX         – python-docx
    • PPTX         – python-pptx
    • HTML / XHTML – trafilatura, BeautifulSoup fallback
    • XML          – BeautifulSoup
    • plain text   – decoded as-is
    • images       – no text layer, yields ""
"""

from __future__ import annotations

import io
import logging
from typing import Callable, Dict

import docx
import pypdf
import trafilatura
from bs4 import BeautifulSoup, UnicodeDammit
from pptx import Presentation

from urltext.pipeline import formats
from urltext.pipeline.formats import DetectedFormat, detect_format

logger = logging.getLogger(__name__)

Parser = Callable[[bytes, DetectedFormat], str]


class ParseError(Exception):
    """Raised when bytes cannot be turned into text."""


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------

def _decode(data: bytes, fmt: DetectedFormat) -> str:
    """Decode text bytes, falling back to charset detection."""
    text: str | None = None
    if fmt.encoding and fmt.encoding != "unknown":
        try:
            text = data.decode(fmt.encoding)
        except UnicodeDecodeError:
            text = None
    if text is None:
        text = UnicodeDammit(data, is_html=fmt.media_type == formats.HTML).unicode_markup
    if text is None:
        raise ParseError("could not determine text encoding")
    return text[1:] if text.startswith("\ufeff") else text


# ---------------------------------------------------------------------------
# Per-format parsers
# ---------------------------------------------------------------------------

def _parse_pdf(data: bytes, fmt: DetectedFormat) -> str:
    reader = pypdf.PdfReader(io.BytesIO(data))
    pages: list[str] = []
    for page in reader.pages:
        text = page.extract_text() or ""
        if text.strip():
            pages.append(text)
    return "\n\n".join(pages)


def _parse_docx(data: bytes, fmt: DetectedFormat) -> str:
    document = docx.Document(io.BytesIO(data))
    lines = [p.text for p in document.paragraphs]
    for table in document.tables:
        for row in table.rows:
            lines.append("\t".join(cell.text for cell in row.cells))
    return "\n".join(lines).strip()


def _parse_pptx(data: bytes, fmt: DetectedFormat) -> str:
    presentation = Presentation(io.BytesIO(data))
    slides: list[str] = []
    for slide in presentation.slides:
        parts = [
            shape.text_frame.text
            for shape in slide.shapes
            if shape.has_text_frame and shape.text_frame.text.strip()
        ]
        if parts:
            slides.append("\n".join(parts))
    return "\n\n".join(slides)


def _bs4_fallback(html: str) -> str:
    """Extract readable text using BeautifulSoup ``<main>``/``<article>`` heuristics."""
    soup = BeautifulSoup(html, "html.parser")
    # Strip non-content elements
    for tag in soup(["script", "style", "noscript", "template"]):
        tag.decompose()
    container = soup.find("main") or soup.find("article") or soup.body
    if container is None:
        return soup.get_text(separator="\n", strip=True)
    return container.get_text(separator="\n", strip=True)


def _parse_html(data: bytes, fmt: DetectedFormat) -> str:
    html = _decode(data, fmt)
    text: str | None = trafilatura.extract(
        html,
        include_links=False,
        include_images=False,
        include_tables=True,
    )
    if not text:
        text = _bs4_fallback(html)
    return text or ""


def _parse_xml(data: bytes, fmt: DetectedFormat) -> str:
    soup = BeautifulSoup(_decode(data, fmt), "html.parser")
    return soup.get_text(separator="\n", strip=True)


def _parse_text(data: bytes, fmt: DetectedFormat) -> str:
    return _decode(data, fmt)


def _parse_image(data: bytes, fmt: DetectedFormat) -> str:
    return ""


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------

class TextExtractionEngine:
    """Detects the format of a byte string and extracts its text.

    Holds nothing but the parser table, which is never modified after
    construction; one instance can serve any number of concurrent calls.
    """

    def __init__(self) -> None:
        self._parsers: Dict[str, Parser] = {
            formats.PDF: _parse_pdf,
            formats.DOCX: _parse_docx,
            formats.PPTX: _parse_pptx,
            formats.HTML: _parse_html,
            formats.XHTML: _parse_html,
            formats.XML: _parse_xml,
            formats.TEXT: _parse_text,
        }

    def detect(self, data: bytes) -> DetectedFormat:
        return detect_format(data)

    def supports(self, fmt: DetectedFormat) -> bool:
        return fmt.is_image or fmt.media_type in self._parsers

    def parse(self, data: bytes) -> str:
        """Return the plain text of *data*.

        Raises:
            ParseError: If the format is unsupported or its parser fails.
        """
        fmt = self.detect(data)
        logger.debug("Detected format %s (%d bytes)", fmt.media_type, len(data))

        parser = _parse_image if fmt.is_image else self._parsers.get(fmt.media_type)
        if parser is None:
            raise ParseError(f"unsupported content format: {fmt.media_type}")

        try:
            return parser(data, fmt)
        except ParseError:
            raise
        except Exception as exc:
            raise ParseError(f"could not parse {fmt.media_type} content: {exc}") from exc
