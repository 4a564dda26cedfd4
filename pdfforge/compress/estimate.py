"""Byte-level heuristics projecting how much each tier could save.

These projections are for previews only; the real compression path never
consults them.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Optional

from ..backends import PypdfBackend
from ..backends.base import PDFBackend
from ..exceptions import PdfForgeError
from ..types import CompressionEstimate, TierEstimate
from .profiles import LEVEL_ORDER

_LOGGER = logging.getLogger("pdfforge.compress")

MAX_REDUCTION = 90.0

# (min, max) reduction percentages for a highly compressible document.
_TIER_RANGES = {
    "low": (5.0, 15.0),
    "medium": (10.0, 30.0),
    "high": (20.0, 45.0),
    "maximum": (30.0, 60.0),
}

_METADATA_MARKERS = (
    b"/Metadata",
    b"/Author",
    b"/Title",
    b"/Subject",
    b"/Keywords",
    b"/Creator",
    b"/Producer",
    b"/CreationDate",
    b"/ModDate",
)

_WHITESPACE = (b" ", b"\t", b"\r", b"\n")


@dataclasses.dataclass(frozen=True)
class ContentProfile:
    """Marker statistics gathered from the raw bytes."""

    size: int
    font_objects: int
    streams: int
    flate_streams: int
    whitespace_ratio: float
    metadata_markers: int

    @property
    def uncompressed_share(self) -> float:
        if self.streams == 0:
            return 0.5
        return max(0.0, 1.0 - self.flate_streams / self.streams)

    @property
    def font_density(self) -> float:
        return min(1.0, self.font_objects / max(1, self.streams))

    def compressibility(self) -> float:
        """Return a score in ``[0, 1]``; higher means more room to shrink."""

        score = (
            0.6 * self.uncompressed_share
            + 0.25 * min(1.0, self.whitespace_ratio * 4)
            + 0.15 * self.font_density
        )
        return max(0.0, min(1.0, score))


def inspect_content(data: bytes) -> ContentProfile:
    size = len(data)
    whitespace = sum(data.count(char) for char in _WHITESPACE)
    return ContentProfile(
        size=size,
        font_objects=data.count(b"/Type /Font") + data.count(b"/Type/Font"),
        streams=data.count(b"endstream"),
        flate_streams=data.count(b"/FlateDecode"),
        whitespace_ratio=whitespace / size if size else 0.0,
        metadata_markers=sum(1 for marker in _METADATA_MARKERS if marker in data),
    )


def _clamp(value: float) -> float:
    return max(0.0, min(MAX_REDUCTION, value))


def estimate_compression(data: bytes, *, backend: Optional[PDFBackend] = None) -> CompressionEstimate:
    """Project per-tier reductions for *data* without modifying it."""

    profile = inspect_content(data)
    score = profile.compressibility()
    metadata_bonus = 2.0 if profile.metadata_markers else 0.0
    scale = 0.25 + 0.75 * score

    page_count: Optional[int] = None
    backend = backend or PypdfBackend()
    try:
        page_count = backend.load(data, permissive=True).num_pages
    except PdfForgeError as exc:
        _LOGGER.debug("Estimate without page count: %s", exc.detail)

    tiers = []
    for level in LEVEL_ORDER:
        base_min, base_max = _TIER_RANGES[level.value]
        low = round(_clamp(base_min * scale + metadata_bonus), 1)
        high = round(_clamp(base_max * scale + metadata_bonus), 1)
        midpoint = round((low + high) / 2, 1)
        tiers.append(
            TierEstimate(
                level=level.value,
                min_reduction=low,
                max_reduction=high,
                estimated_reduction=midpoint,
                estimated_size=int(profile.size * (1 - midpoint / 100)),
                description=level.description,
            )
        )

    _LOGGER.debug("Compression estimate: score=%.2f %s", score, profile)
    return CompressionEstimate(original_size=profile.size, page_count=page_count, tiers=tiers)


__all__ = ["ContentProfile", "inspect_content", "estimate_compression"]
