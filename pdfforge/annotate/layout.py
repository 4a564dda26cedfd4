"""Anchor geometry for header, footer and watermark text."""

from __future__ import annotations

from enum import Enum
from typing import Callable

from reportlab.pdfbase.pdfmetrics import stringWidth

HEADER_Y = 750.0
FOOTER_Y = 50.0
MARGIN = 50.0
COVER_BAND_HEIGHT = 20.0
COVER_BAND_OFFSET = 5.0

WATERMARK_INSET_X = 50.0
WATERMARK_INSET_Y = 100.0

DEFAULT_FONT = "Helvetica"

TextMeasure = Callable[[str, float], float]


def helvetica_width(text: str, font_size: float) -> float:
    return stringWidth(text, DEFAULT_FONT, font_size)


class Alignment(str, Enum):
    LEFT = "left"
    MIDDLE = "middle"
    RIGHT = "right"


class WatermarkPosition(str, Enum):
    """Anchor keywords accepted for watermark placement."""

    CENTER = "center"
    TOP_LEFT = "top-left"
    TOP_RIGHT = "top-right"
    BOTTOM_LEFT = "bottom-left"
    BOTTOM_RIGHT = "bottom-right"

    @classmethod
    def parse(cls, value: object) -> "WatermarkPosition":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.CENTER


def horizontal_anchor(
    alignment: Alignment | str,
    page_width: float,
    text_width: float,
    margin: float = MARGIN,
) -> float:
    """Return the x coordinate of a left, middle or right aligned string."""

    alignment = Alignment(alignment)
    if alignment is Alignment.LEFT:
        return margin
    if alignment is Alignment.MIDDLE:
        return (page_width - text_width) / 2
    return page_width - text_width - margin


def watermark_anchor(
    position: WatermarkPosition | str,
    page_width: float,
    page_height: float,
    text_width: float,
    font_size: float,
) -> tuple[float, float]:
    """Return the ``(x, y)`` origin of a watermark on a page.

    Corners sit at a fixed inset from the page edges; ``center`` centres the
    text box geometrically. Unknown keywords behave like ``center``.
    """

    position = WatermarkPosition.parse(position)
    right_x = page_width - text_width - WATERMARK_INSET_X
    top_y = page_height - WATERMARK_INSET_Y

    if position is WatermarkPosition.TOP_LEFT:
        return WATERMARK_INSET_X, top_y
    if position is WatermarkPosition.TOP_RIGHT:
        return right_x, top_y
    if position is WatermarkPosition.BOTTOM_LEFT:
        return WATERMARK_INSET_X, WATERMARK_INSET_Y
    if position is WatermarkPosition.BOTTOM_RIGHT:
        return right_x, WATERMARK_INSET_Y
    return (page_width - text_width) / 2, (page_height - font_size) / 2


__all__ = [
    "HEADER_Y",
    "FOOTER_Y",
    "MARGIN",
    "COVER_BAND_HEIGHT",
    "COVER_BAND_OFFSET",
    "DEFAULT_FONT",
    "TextMeasure",
    "Alignment",
    "WatermarkPosition",
    "helvetica_width",
    "horizontal_anchor",
    "watermark_anchor",
]
