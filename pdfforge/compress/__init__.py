"""Public API for :mod:`pdfforge.compress`."""

from .compressor import CompressionAdvisor, compress_document
from .estimate import estimate_compression, inspect_content
from .profiles import (
    COMPATIBILITY_PROFILE,
    STANDARD_PROFILE,
    CompressionLevel,
    LEVEL_ORDER,
    profiles_for,
)

__all__ = [
    "CompressionAdvisor",
    "compress_document",
    "estimate_compression",
    "inspect_content",
    "COMPATIBILITY_PROFILE",
    "STANDARD_PROFILE",
    "CompressionLevel",
    "LEVEL_ORDER",
    "profiles_for",
]
