"""Public API for the :mod:`pdfforge.merge` package."""

from .merger import (
    MergeOrchestrator,
    PageCopyOutcome,
    batch_size_for,
    check_merge_limits,
    merge_documents,
    preview_merge,
)

__all__ = [
    "MergeOrchestrator",
    "PageCopyOutcome",
    "batch_size_for",
    "check_merge_limits",
    "merge_documents",
    "preview_merge",
]
