"""Content-format detection from raw bytes.

Only the bytes are consulted: response headers and URL suffixes are
ignored, since both are easy to get wrong.
"""

from __future__ import annotations

import io
import re
import zipfile
from dataclasses import dataclass

# ---------------------------------------------------------------------------
# Media types
# ---------------------------------------------------------------------------
PDF = "application/pdf"
DOCX = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
PPTX = "application/vnd.openxmlformats-officedocument.presentationml.presentation"
XLSX = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
ZIP = "application/zip"
OLE2 = "application/x-tika-msoffice"
RTF = "application/rtf"
GZIP = "application/gzip"
HTML = "text/html"
XHTML = "application/xhtml+xml"
XML = "application/xml"
TEXT = "text/plain"
BINARY = "application/octet-stream"

# Leading byte signatures, checked in order.
_SIGNATURES: list[tuple[bytes, str]] = [
    (b"%PDF-", PDF),
    (b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1", OLE2),
    (b"{\\rtf", RTF),
    (b"\x1f\x8b", GZIP),
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
    (b"II*\x00", "image/tiff"),
    (b"MM\x00*", "image/tiff"),
]

# Marker entries identifying OOXML packages inside a ZIP container.
_OOXML_MARKERS: list[tuple[str, str]] = [
    ("word/document.xml", DOCX),
    ("ppt/presentation.xml", PPTX),
    ("xl/workbook.xml", XLSX),
]

_BOMS: list[tuple[bytes, str]] = [
    (b"\xef\xbb\xbf", "utf-8"),
    (b"\xff\xfe", "utf-16-le"),
    (b"\xfe\xff", "utf-16-be"),
]

_SNIFF_BYTES = 8192

_HTML_MARKERS = re.compile(r"<(?:!doctype\s+html|html|head|body)[\s>/]", re.IGNORECASE)
_HTML_ROOT = re.compile(r"<html[\s>/]", re.IGNORECASE)


@dataclass(frozen=True)
class DetectedFormat:
    """Result of sniffing: a media type plus the text encoding, if any."""

    media_type: str
    encoding: str | None = None

    @property
    def is_text(self) -> bool:
        return self.media_type in (TEXT, HTML, XHTML, XML)

    @property
    def is_image(self) -> bool:
        return self.media_type.startswith("image/")


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _sniff_zip(data: bytes) -> str:
    """Tell OOXML documents apart from generic ZIP archives."""
    try:
        with zipfile.ZipFile(io.BytesIO(data)) as archive:
            names = set(archive.namelist())
    except zipfile.BadZipFile:
        return ZIP
    for marker, media_type in _OOXML_MARKERS:
        if marker in names:
            return media_type
    return ZIP


def _text_encoding(head: bytes) -> str | None:
    """Guess whether *head* is text.  Returns an encoding name, or ``None``
    for binary data.

    ``"unknown"`` means "text, but not UTF-8": the decoder picks the
    charset later.
    """
    for bom, encoding in _BOMS:
        if head.startswith(bom):
            return encoding
    if b"\x00" in head:
        return None
    try:
        head.decode("utf-8")
        return "utf-8"
    except UnicodeDecodeError as exc:
        # A multi-byte sequence cut off by the sniff window is still UTF-8.
        if exc.start >= len(head) - 3 and exc.reason == "unexpected end of data":
            return "utf-8"
    controls = sum(1 for b in head if b < 0x20 and b not in (0x09, 0x0A, 0x0C, 0x0D))
    if controls > len(head) * 0.1:
        return None
    return "unknown"


def _markup_type(text: str) -> str:
    stripped = text.lstrip()
    if stripped.startswith("<?xml"):
        return XHTML if _HTML_ROOT.search(stripped) else XML
    if _HTML_MARKERS.search(stripped[:1024]):
        return HTML
    return TEXT


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def detect_format(data: bytes) -> DetectedFormat:
    """Identify the format of *data* from magic bytes and text structure.

    Empty input is treated as empty plain text.
    """
    if not data:
        return DetectedFormat(TEXT, "utf-8")

    if data.startswith(b"PK\x03\x04"):
        return DetectedFormat(_sniff_zip(data))
    if data.startswith(b"RIFF") and data[8:12] == b"WEBP":
        return DetectedFormat("image/webp")
    # "BM" alone is too common a text prefix; BMP headers carry zeroed reserved bytes.
    if data.startswith(b"BM") and data[6:10] == b"\x00\x00\x00\x00":
        return DetectedFormat("image/bmp")
    for signature, media_type in _SIGNATURES:
        if data.startswith(signature):
            return DetectedFormat(media_type)

    head = data[:_SNIFF_BYTES]
    encoding = _text_encoding(head)
    if encoding is None:
        return DetectedFormat(BINARY)

    preview = head.decode("latin-1" if encoding == "unknown" else encoding, errors="ignore")
    return DetectedFormat(_markup_type(preview.lstrip("\ufeff")), encoding)
