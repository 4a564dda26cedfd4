"""Hex colour parsing for overlay text."""

from __future__ import annotations

import re
from typing import Optional

RGB = tuple[float, float, float]

BLACK: RGB = (0.0, 0.0, 0.0)

_HEX_PATTERN = re.compile(r"^#?([0-9a-fA-F]{2})([0-9a-fA-F]{2})([0-9a-fA-F]{2})$")


def hex_to_rgb(value: Optional[str]) -> RGB:
    """Convert ``#RRGGBB`` (or ``RRGGBB``) into normalised RGB components.

    Anything that is not a six digit hex colour yields black.
    """

    if not isinstance(value, str):
        return BLACK
    match = _HEX_PATTERN.match(value.strip())
    if match is None:
        return BLACK
    red, green, blue = (int(group, 16) / 255 for group in match.groups())
    return (red, green, blue)


__all__ = ["RGB", "BLACK", "hex_to_rgb"]
