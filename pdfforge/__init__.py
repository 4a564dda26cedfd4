"""In-memory PDF transformations: annotate, watermark, split, merge and compress.

Every entry point takes whole-document ``bytes`` and returns ``bytes`` (or a
result object carrying them), and every produced document is checked by
:func:`validate_document` before it is handed back.

Quick Start:
    >>> from pdfforge import merge_documents, split_document
    >>> result = merge_documents([first, second], add_bookmarks=True)
    >>> parts = split_document(result.data, {"splitType": "every", "everyNPages": 2})
"""

from __future__ import annotations

from . import annotate, compress, merge, split
from .annotate import (
    AnnotationConfig,
    AnnotationPipeline,
    WatermarkConfig,
    add_header_footer,
    add_watermark,
    expand_template,
    hex_to_rgb,
)
from .compress import CompressionLevel, compress_document, estimate_compression
from .config import Settings
from .exceptions import (
    InputInvalidError,
    PdfForgeError,
    ProcessingTimeoutError,
    ResourceExceededError,
    SplitPolicyEmptyError,
    StructuralValidationError,
)
from .merge import merge_documents, preview_merge
from .split import EveryNPolicy, PagesPolicy, RangesPolicy, SplitPolicy, plan_split, split_document
from .types import (
    CompressionEstimate,
    CompressionResult,
    MergeInput,
    MergePreview,
    MergeResult,
    SkippedPage,
    SplitOutput,
    ValidationReport,
)
from .validation import is_structurally_valid, validate_document

__version__ = "1.0.0"

__all__ = [
    "annotate",
    "compress",
    "merge",
    "split",
    "AnnotationConfig",
    "AnnotationPipeline",
    "WatermarkConfig",
    "add_header_footer",
    "add_watermark",
    "expand_template",
    "hex_to_rgb",
    "CompressionLevel",
    "compress_document",
    "estimate_compression",
    "Settings",
    "PdfForgeError",
    "InputInvalidError",
    "SplitPolicyEmptyError",
    "ResourceExceededError",
    "ProcessingTimeoutError",
    "StructuralValidationError",
    "merge_documents",
    "preview_merge",
    "SplitPolicy",
    "PagesPolicy",
    "RangesPolicy",
    "EveryNPolicy",
    "plan_split",
    "split_document",
    "CompressionEstimate",
    "CompressionResult",
    "MergeInput",
    "MergePreview",
    "MergeResult",
    "SkippedPage",
    "SplitOutput",
    "ValidationReport",
    "validate_document",
    "is_structurally_valid",
]
