"""Configuration objects for header/footer annotation and watermarking.

Both configs are built from the camelCase wire payload through
``from_mapping``. Unparsable numbers fall back to their defaults. Numbers
outside their range are clamped to the nearest valid value, or rejected with
:class:`~pdfforge.exceptions.InputInvalidError` when ``clamp`` is off.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from ..exceptions import InputInvalidError
from .layout import Alignment, WatermarkPosition

LOGGER = logging.getLogger("pdfforge.annotate")

DEFAULT_FONT_SIZE = 10.0
DEFAULT_TEXT_COLOR = "#000000"

WATERMARK_DEFAULT_TEXT = "CONFIDENTIAL"
WATERMARK_DEFAULT_COLOR = "#808080"
WATERMARK_FONT_RANGE = (12.0, 100.0)
WATERMARK_OPACITY_RANGE = (0.0, 1.0)
WATERMARK_ROTATION_RANGE = (-90.0, 90.0)

SLOT_FIELDS = {
    "left_header": "leftHeader",
    "middle_header": "middleHeader",
    "right_header": "rightHeader",
    "left_footer": "leftFooter",
    "middle_footer": "middleFooter",
    "right_footer": "rightFooter",
}


def _as_number(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


def _bounded(
    name: str,
    value: float,
    low: Optional[float],
    high: Optional[float],
    clamp: bool,
) -> float:
    if (low is None or value >= low) and (high is None or value <= high):
        return value
    if not clamp:
        raise InputInvalidError(
            f"{name} must be between {low if low is not None else '-inf'} "
            f"and {high if high is not None else 'inf'}, got {value:g}."
        )
    clamped = value
    if low is not None:
        clamped = max(low, clamped)
    if high is not None:
        clamped = min(high, clamped)
    LOGGER.warning("Clamped %s from %g to %g", name, value, clamped)
    return clamped


@dataclass(frozen=True)
class AnnotationConfig:
    """Header and footer text with its styling.

    ``start_page`` is 1-based; pages before it are left untouched.
    """

    left_header: str = ""
    middle_header: str = ""
    right_header: str = ""
    left_footer: str = ""
    middle_footer: str = ""
    right_footer: str = ""
    start_page: int = 1
    cover_with_white: bool = False
    text_color: str = DEFAULT_TEXT_COLOR
    font_size: float = DEFAULT_FONT_SIZE

    def slots(self) -> list[tuple[Alignment, bool, str]]:
        """Return ``(alignment, is_header, text)`` for every non-empty slot."""

        entries = [
            (Alignment.LEFT, True, self.left_header),
            (Alignment.MIDDLE, True, self.middle_header),
            (Alignment.RIGHT, True, self.right_header),
            (Alignment.LEFT, False, self.left_footer),
            (Alignment.MIDDLE, False, self.middle_footer),
            (Alignment.RIGHT, False, self.right_footer),
        ]
        return [entry for entry in entries if entry[2]]

    @classmethod
    def from_mapping(cls, payload: Optional[Mapping[str, Any]], *, clamp: bool = True) -> "AnnotationConfig":
        payload = payload or {}
        texts = {
            attribute: str(payload.get(key) or "")
            for attribute, key in SLOT_FIELDS.items()
        }

        font_size = _as_number(payload.get("fontSize"))
        if font_size is None or font_size <= 0:
            font_size = DEFAULT_FONT_SIZE

        start_page = _as_number(payload.get("startPage"))
        start = 1 if start_page is None else int(_bounded("startPage", start_page, 1, None, clamp))

        return cls(
            start_page=start,
            cover_with_white=_as_bool(payload.get("coverWithWhite", False)),
            text_color=str(payload.get("textColor") or DEFAULT_TEXT_COLOR),
            font_size=font_size,
            **texts,
        )


@dataclass(frozen=True)
class WatermarkConfig:
    """A text watermark and the 1-based, inclusive page window it covers.

    ``end_page == 0`` means "through the last page".
    """

    text: str = WATERMARK_DEFAULT_TEXT
    font_size: float = 48.0
    opacity: float = 0.3
    color: str = WATERMARK_DEFAULT_COLOR
    rotation: float = 45.0
    position: WatermarkPosition = WatermarkPosition.CENTER
    start_page: int = 1
    end_page: int = 0

    def page_window(self, page_count: int) -> range:
        """Resolve the page window once against *page_count* (0-based indices)."""

        start = max(0, self.start_page - 1)
        end = page_count if self.end_page == 0 else min(page_count, self.end_page)
        return range(start, end)

    @classmethod
    def from_mapping(cls, payload: Optional[Mapping[str, Any]], *, clamp: bool = True) -> "WatermarkConfig":
        payload = payload or {}
        defaults = cls()

        font_size = _as_number(payload.get("fontSize"))
        font_size = (
            defaults.font_size
            if font_size is None
            else _bounded("fontSize", font_size, *WATERMARK_FONT_RANGE, clamp)
        )

        opacity = _as_number(payload.get("opacity"))
        opacity = (
            defaults.opacity
            if opacity is None
            else _bounded("opacity", opacity, *WATERMARK_OPACITY_RANGE, clamp)
        )

        rotation = _as_number(payload.get("rotation"))
        rotation = (
            defaults.rotation
            if rotation is None
            else _bounded("rotation", rotation, *WATERMARK_ROTATION_RANGE, clamp)
        )

        start_page = _as_number(payload.get("startPage"))
        start = (
            defaults.start_page
            if start_page is None
            else int(_bounded("startPage", start_page, 1, None, clamp))
        )

        end_page = _as_number(payload.get("endPage"))
        end = (
            defaults.end_page
            if end_page is None
            else int(_bounded("endPage", end_page, 0, None, clamp))
        )

        return cls(
            text=str(payload.get("text") or WATERMARK_DEFAULT_TEXT),
            font_size=font_size,
            opacity=opacity,
            color=str(payload.get("color") or WATERMARK_DEFAULT_COLOR),
            rotation=rotation,
            position=WatermarkPosition.parse(payload.get("position", WatermarkPosition.CENTER.value)),
            start_page=start,
            end_page=end,
        )


def watermark_options() -> dict[str, Any]:
    """Describe watermark defaults and accepted ranges for client forms."""

    defaults = WatermarkConfig()
    return {
        "positions": [position.value for position in WatermarkPosition],
        "defaultSettings": {
            "text": defaults.text,
            "fontSize": int(defaults.font_size),
            "opacity": defaults.opacity,
            "color": defaults.color,
            "rotation": int(defaults.rotation),
            "position": defaults.position.value,
            "startPage": defaults.start_page,
            "endPage": defaults.end_page,
        },
        "fontSizeRange": {"min": int(WATERMARK_FONT_RANGE[0]), "max": int(WATERMARK_FONT_RANGE[1])},
        "opacityRange": {"min": 0.1, "max": WATERMARK_OPACITY_RANGE[1]},
        "rotationRange": {"min": int(WATERMARK_ROTATION_RANGE[0]), "max": int(WATERMARK_ROTATION_RANGE[1])},
    }


__all__ = [
    "AnnotationConfig",
    "WatermarkConfig",
    "watermark_options",
    "DEFAULT_FONT_SIZE",
]
