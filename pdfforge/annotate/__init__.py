"""Text overlays: headers, footers and watermarks."""

from .colors import hex_to_rgb
from .config import AnnotationConfig, WatermarkConfig, watermark_options
from .layout import WatermarkPosition, horizontal_anchor, watermark_anchor
from .overlay import OverlayRenderer, PagePlan, RectDraw, TextDraw
from .pipeline import AnnotationPipeline, add_header_footer, add_watermark
from .templates import TEMPLATE_CATALOGUE, expand_template

__all__ = [
    "hex_to_rgb",
    "AnnotationConfig",
    "WatermarkConfig",
    "watermark_options",
    "WatermarkPosition",
    "horizontal_anchor",
    "watermark_anchor",
    "OverlayRenderer",
    "PagePlan",
    "RectDraw",
    "TextDraw",
    "AnnotationPipeline",
    "add_header_footer",
    "add_watermark",
    "TEMPLATE_CATALOGUE",
    "expand_template",
]
