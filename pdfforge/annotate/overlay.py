"""Draw plans and their reportlab rendering.

Annotation and watermarking first describe what to draw on each page as a
:class:`PagePlan`. :class:`OverlayRenderer` turns the plans into one
in-memory overlay document with one page per plan, whose pages are then
stamped onto the target pages.
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field
from typing import Sequence, Union

from pypdf import PageObject, PdfReader
from reportlab.pdfgen import canvas

from .colors import RGB
from .layout import DEFAULT_FONT

LOGGER = logging.getLogger("pdfforge.annotate")

WHITE: RGB = (1.0, 1.0, 1.0)


@dataclass(frozen=True)
class RectDraw:
    x: float
    y: float
    width: float
    height: float
    color: RGB = WHITE


@dataclass(frozen=True)
class TextDraw:
    """A string drawn with its baseline origin at ``(x, y)``.

    ``rotation`` turns the text about that origin, in degrees counter-clockwise.
    """

    text: str
    x: float
    y: float
    font_size: float
    color: RGB
    opacity: float = 1.0
    rotation: float = 0.0
    font: str = DEFAULT_FONT


DrawOperation = Union[RectDraw, TextDraw]


@dataclass
class PagePlan:
    page_index: int
    width: float
    height: float
    operations: list[DrawOperation] = field(default_factory=list)

    @property
    def texts(self) -> list[TextDraw]:
        return [operation for operation in self.operations if isinstance(operation, TextDraw)]


class OverlayRenderer:
    """Render page plans with a reportlab canvas."""

    def render(self, plans: Sequence[PagePlan]) -> list[PageObject]:
        if not plans:
            return []

        buffer = io.BytesIO()
        pdf_canvas = canvas.Canvas(buffer, pagesize=(plans[0].width, plans[0].height))
        for plan in plans:
            pdf_canvas.setPageSize((plan.width, plan.height))
            for operation in plan.operations:
                if isinstance(operation, RectDraw):
                    self._draw_rect(pdf_canvas, operation)
                else:
                    self._draw_text(pdf_canvas, operation)
            pdf_canvas.showPage()
        pdf_canvas.save()

        buffer.seek(0)
        overlay = PdfReader(buffer)
        LOGGER.debug("Rendered %d overlay pages", len(overlay.pages))
        return list(overlay.pages)

    @staticmethod
    def _draw_rect(pdf_canvas: canvas.Canvas, operation: RectDraw) -> None:
        pdf_canvas.saveState()
        pdf_canvas.setFillColorRGB(*operation.color)
        pdf_canvas.rect(
            operation.x,
            operation.y,
            operation.width,
            operation.height,
            stroke=0,
            fill=1,
        )
        pdf_canvas.restoreState()

    @staticmethod
    def _draw_text(pdf_canvas: canvas.Canvas, operation: TextDraw) -> None:
        pdf_canvas.saveState()
        pdf_canvas.setFillColorRGB(*operation.color)
        pdf_canvas.setFillAlpha(operation.opacity)
        pdf_canvas.setFont(operation.font, operation.font_size)
        if operation.rotation:
            pdf_canvas.translate(operation.x, operation.y)
            pdf_canvas.rotate(operation.rotation)
            pdf_canvas.drawString(0, 0, operation.text)
        else:
            pdf_canvas.drawString(operation.x, operation.y, operation.text)
        pdf_canvas.restoreState()


def stamp(page: PageObject, overlay: PageObject) -> None:
    """Merge *overlay* on top of *page*, honouring a shifted mediabox origin."""

    left = float(page.mediabox.left)
    bottom = float(page.mediabox.bottom)
    if left or bottom:
        page.merge_translated_page(overlay, left, bottom)
    else:
        page.merge_page(overlay)


__all__ = [
    "RectDraw",
    "TextDraw",
    "DrawOperation",
    "PagePlan",
    "OverlayRenderer",
    "stamp",
]
