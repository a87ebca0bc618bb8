"""Shared fixtures: small documents of each supported binary format.

The documents are built in-process with the same libraries the engine uses
to read them, so no binary fixtures live in the repository.
"""

from __future__ import annotations

import io

import docx
import pytest
from pptx import Presentation


def build_pdf(text: str) -> bytes:
    """Return a one-page PDF showing *text* in Helvetica."""
    stream = f"BT /F1 24 Tf 72 720 Td ({text}) Tj ET".encode("latin-1")
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
        b"/Contents 4 0 R /Resources << /Font << /F1 5 0 R >> >> >>",
        b"<< /Length %d >>\nstream\n" % len(stream) + stream + b"\nendstream",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]

    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += b"%d 0 obj\n" % number + body + b"\nendobj\n"

    xref_at = len(out)
    out += b"xref\n0 %d\n" % (len(objects) + 1)
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += b"%010d 00000 n \n" % offset
    out += b"trailer\n<< /Size %d /Root 1 0 R >>\n" % (len(objects) + 1)
    out += b"startxref\n%d\n%%%%EOF\n" % xref_at
    return bytes(out)


def build_docx(paragraphs: list[str], cells: list[str] | None = None) -> bytes:
    document = docx.Document()
    for paragraph in paragraphs:
        document.add_paragraph(paragraph)
    if cells:
        table = document.add_table(rows=1, cols=len(cells))
        for i, value in enumerate(cells):
            table.cell(0, i).text = value
    buf = io.BytesIO()
    document.save(buf)
    return buf.getvalue()


def build_pptx(title: str, body: str) -> bytes:
    presentation = Presentation()
    slide = presentation.slides.add_slide(presentation.slide_layouts[1])
    slide.shapes.title.text = title
    slide.placeholders[1].text = body
    buf = io.BytesIO()
    presentation.save(buf)
    return buf.getvalue()


@pytest.fixture()
def pdf_bytes() -> bytes:
    return build_pdf("Hello PDF world")


@pytest.fixture()
def docx_bytes() -> bytes:
    return build_docx(["Quarterly report", "Revenue grew."], cells=["Region", "EMEA"])


@pytest.fixture()
def pptx_bytes() -> bytes:
    return build_pptx("Roadmap", "Ship the extractor")
