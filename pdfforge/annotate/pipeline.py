"""Header/footer annotation and watermarking of document graphs."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Union

from pypdf import PdfWriter

from ..backends import PypdfBackend
from ..backends.base import PDFBackend
from ..compress.profiles import STANDARD_PROFILE
from ..validation import validate_document
from .colors import hex_to_rgb
from .config import AnnotationConfig, WatermarkConfig
from .layout import (
    COVER_BAND_HEIGHT,
    COVER_BAND_OFFSET,
    FOOTER_Y,
    HEADER_Y,
    TextMeasure,
    helvetica_width,
    horizontal_anchor,
    watermark_anchor,
)
from .overlay import OverlayRenderer, PagePlan, RectDraw, TextDraw, stamp
from .templates import expand_template

LOGGER = logging.getLogger("pdfforge.annotate")


def _page_size(page: Any) -> tuple[float, float]:
    box = page.mediabox
    return float(box.width), float(box.height)


class AnnotationPipeline:
    """Plan, render and stamp text overlays onto the pages of a document.

    The document is mutated in place and never serialized here.
    """

    def __init__(
        self,
        measure: TextMeasure = helvetica_width,
        renderer: Optional[OverlayRenderer] = None,
    ) -> None:
        self.measure = measure
        self.renderer = renderer or OverlayRenderer()

    # ------------------------------------------------------------------
    # Planning
    # ------------------------------------------------------------------
    def plan_annotations(self, document: PdfWriter, config: AnnotationConfig) -> list[PagePlan]:
        total_pages = len(document.pages)
        color = hex_to_rgb(config.text_color)
        slots = config.slots()
        plans: list[PagePlan] = []

        for index in range(max(0, config.start_page - 1), total_pages):
            width, height = _page_size(document.pages[index])
            plan = PagePlan(page_index=index, width=width, height=height)

            if config.cover_with_white:
                for baseline in (HEADER_Y, FOOTER_Y):
                    plan.operations.append(
                        RectDraw(
                            x=0,
                            y=baseline - COVER_BAND_OFFSET,
                            width=width,
                            height=COVER_BAND_HEIGHT,
                        )
                    )

            for alignment, is_header, template in slots:
                text = expand_template(template, index + 1, total_pages)
                text_width = self.measure(text, config.font_size)
                plan.operations.append(
                    TextDraw(
                        text=text,
                        x=horizontal_anchor(alignment, width, text_width),
                        y=HEADER_Y if is_header else FOOTER_Y,
                        font_size=config.font_size,
                        color=color,
                    )
                )

            if plan.operations:
                plans.append(plan)
        return plans

    def plan_watermark(self, document: PdfWriter, config: WatermarkConfig) -> list[PagePlan]:
        window = config.page_window(len(document.pages))
        color = hex_to_rgb(config.color)
        text_width = self.measure(config.text, config.font_size)
        plans: list[PagePlan] = []

        for index in window:
            width, height = _page_size(document.pages[index])
            x, y = watermark_anchor(config.position, width, height, text_width, config.font_size)
            plans.append(
                PagePlan(
                    page_index=index,
                    width=width,
                    height=height,
                    operations=[
                        TextDraw(
                            text=config.text,
                            x=x,
                            y=y,
                            font_size=config.font_size,
                            color=color,
                            opacity=config.opacity,
                            rotation=config.rotation,
                        )
                    ],
                )
            )
        return plans

    # ------------------------------------------------------------------
    # Applying
    # ------------------------------------------------------------------
    def annotate(self, document: PdfWriter, config: AnnotationConfig) -> PdfWriter:
        plans = self.plan_annotations(document, config)
        self._apply(document, plans)
        LOGGER.info("Annotated %d of %d pages", len(plans), len(document.pages))
        return document

    def watermark(self, document: PdfWriter, config: WatermarkConfig) -> PdfWriter:
        plans = self.plan_watermark(document, config)
        self._apply(document, plans)
        LOGGER.info("Watermarked %d of %d pages", len(plans), len(document.pages))
        return document

    def _apply(self, document: PdfWriter, plans: list[PagePlan]) -> None:
        overlays = self.renderer.render(plans)
        for plan, overlay in zip(plans, overlays):
            stamp(document.pages[plan.page_index], overlay)


AnnotationInput = Union[AnnotationConfig, Mapping[str, Any], None]
WatermarkInput = Union[WatermarkConfig, Mapping[str, Any], None]


def _transform(data: bytes, backend: Optional[PDFBackend], apply) -> bytes:
    backend = backend or PypdfBackend()
    loaded = backend.load(data, permissive=True)
    document = backend.clone(loaded)
    apply(document)
    output = backend.save(document, STANDARD_PROFILE)
    validate_document(output, loaded.num_pages, backend=backend)
    return output


def add_header_footer(
    data: bytes,
    config: AnnotationInput = None,
    *,
    clamp: bool = True,
    backend: Optional[PDFBackend] = None,
) -> bytes:
    """Return *data* with header and footer text stamped on it."""

    if not isinstance(config, AnnotationConfig):
        config = AnnotationConfig.from_mapping(config, clamp=clamp)
    pipeline = AnnotationPipeline()
    return _transform(data, backend, lambda document: pipeline.annotate(document, config))


def add_watermark(
    data: bytes,
    config: WatermarkInput = None,
    *,
    clamp: bool = True,
    backend: Optional[PDFBackend] = None,
) -> bytes:
    """Return *data* with a text watermark stamped on the configured pages."""

    if not isinstance(config, WatermarkConfig):
        config = WatermarkConfig.from_mapping(config, clamp=clamp)
    pipeline = AnnotationPipeline()
    return _transform(data, backend, lambda document: pipeline.watermark(document, config))


__all__ = ["AnnotationPipeline", "add_header_footer", "add_watermark"]
