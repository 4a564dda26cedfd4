"""
Type definitions and dataclasses for pdfforge.

This module defines the result structures returned by the merge, split,
compression and validation entry points.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class ValidationReport:
    """
    Outcome of a successful structural validation.

    Attributes:
        size: Number of bytes inspected
        page_count: Page count found on re-load, ``None`` when the re-load
            was tolerated as failed
        checks: Names of the checks that passed, in order
    """

    size: int
    page_count: Optional[int]
    checks: tuple[str, ...]


@dataclass(frozen=True)
class SplitOutput:
    """
    One serialized document produced by a split.

    Attributes:
        filename: Deterministic output name, unique within the request
        label: Human readable page label such as ``Pages 1-5``
        page_numbers: 1-based source page numbers in output order
        data: Serialized PDF bytes
    """

    filename: str
    label: str
    page_numbers: tuple[int, ...]
    data: bytes

    @property
    def page_count(self) -> int:
        return len(self.page_numbers)


@dataclass(frozen=True)
class MergeInput:
    """A merge source: raw bytes plus an optional display name."""

    data: bytes
    name: Optional[str] = None


@dataclass(frozen=True)
class SkippedPage:
    """A source page that could not be copied, even on its own."""

    document_index: int
    page_index: int
    reason: str

    def describe(self) -> str:
        return (
            f"Skipped page {self.page_index + 1} of document "
            f"{self.document_index + 1}: {self.reason}"
        )


@dataclass
class MergeResult:
    """
    Result of a merge.

    Attributes:
        data: Serialized merged PDF
        filename: Output file name
        total_pages: Pages in the merged document
        source_page_counts: Page count of each input, in input order
        skipped_pages: Pages lost to copy failures
        warnings: Human readable messages describing partial loss
        bookmarks_added: Number of outline items written
    """

    data: bytes
    filename: str
    total_pages: int
    source_page_counts: List[int]
    skipped_pages: List[SkippedPage] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    bookmarks_added: int = 0

    @property
    def size(self) -> int:
        return len(self.data)

    def __str__(self) -> str:
        return (
            f"MergeResult(pages={self.total_pages}, "
            f"skipped={len(self.skipped_pages)}, size={self.size})"
        )


@dataclass(frozen=True)
class FileSummary:
    name: str
    page_count: int
    size: int


@dataclass
class MergePreview:
    files: List[FileSummary]
    total_pages: int
    total_size: int
    estimated_output_size: int

    @property
    def file_count(self) -> int:
        return len(self.files)


@dataclass
class CompressionResult:
    """
    Result of a compression run.

    Attributes:
        data: The chosen serialized PDF
        requested_level: Tier asked for by the caller
        applied_level: Tier whose candidates produced ``data``
        profile: Name of the winning save profile (``original`` when the
            untouched input was smallest)
        original_size: Input size in bytes
        compressed_size: Output size in bytes
        target_met: ``None`` without a size target, otherwise whether the
            output fits under it
    """

    data: bytes
    requested_level: str
    applied_level: str
    profile: str
    original_size: int
    compressed_size: int
    target_met: Optional[bool] = None

    @property
    def reduction_percent(self) -> float:
        if self.original_size <= 0:
            return 0.0
        saved = self.original_size - self.compressed_size
        return round(saved / self.original_size * 100, 2)

    def __str__(self) -> str:
        return (
            f"CompressionResult(level={self.applied_level}, "
            f"size={self.original_size}->{self.compressed_size})"
        )


@dataclass(frozen=True)
class TierEstimate:
    level: str
    min_reduction: float
    max_reduction: float
    estimated_reduction: float
    estimated_size: int
    description: str


@dataclass
class CompressionEstimate:
    original_size: int
    page_count: Optional[int]
    tiers: List[TierEstimate]

    def for_level(self, level: str) -> TierEstimate:
        for tier in self.tiers:
            if tier.level == level:
                return tier
        raise KeyError(level)


__all__ = [
    "ValidationReport",
    "SplitOutput",
    "MergeInput",
    "SkippedPage",
    "MergeResult",
    "FileSummary",
    "MergePreview",
    "CompressionResult",
    "TierEstimate",
    "CompressionEstimate",
]
