from __future__ import annotations

import io
from pathlib import Path
from typing import Callable
import sys

import pytest
from pypdf import PdfWriter
from reportlab.pdfgen import canvas

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

LETTER = (612, 792)


def _blank_pdf(pages: int, title: str | None = None) -> bytes:
    writer = PdfWriter()
    for _ in range(pages):
        writer.add_blank_page(width=LETTER[0], height=LETTER[1])
    if title is not None:
        writer.add_metadata({"/Title": title, "/Author": "pdfforge-tests"})
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


def _text_pdf(pages: int, lines_per_page: int = 40) -> bytes:
    buffer = io.BytesIO()
    pdf_canvas = canvas.Canvas(buffer, pagesize=LETTER, pageCompression=0)
    pdf_canvas.setTitle("Text fixture")
    pdf_canvas.setAuthor("pdfforge-tests")
    for page in range(1, pages + 1):
        pdf_canvas.setFont("Helvetica", 10)
        for line in range(lines_per_page):
            pdf_canvas.drawString(
                72,
                740 - line * 16,
                f"Body text for page {page}, line {line}: the quick brown fox jumps over the lazy dog.",
            )
        pdf_canvas.showPage()
    pdf_canvas.save()
    return buffer.getvalue()


@pytest.fixture()
def pdf_factory() -> Callable[..., bytes]:
    """Return a factory building blank letter-size PDFs with *pages* pages."""

    return _blank_pdf


@pytest.fixture()
def text_pdf_factory() -> Callable[..., bytes]:
    """Return a factory building uncompressed text PDFs."""

    return _text_pdf


@pytest.fixture()
def sample_pdf() -> bytes:
    return _blank_pdf(5, title="Sample")


@pytest.fixture()
def text_pdf() -> bytes:
    return _text_pdf(4)


@pytest.fixture()
def sample_pdf_path(tmp_path: Path, sample_pdf: bytes) -> Path:
    pdf_path = tmp_path / "sample.pdf"
    pdf_path.write_bytes(sample_pdf)
    return pdf_path
