"""Merge functionality for the :mod:`pdfforge.merge` package."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Union

from ..backends import PypdfBackend
from ..backends.base import LoadedDocument, PDFBackend
from ..compress.profiles import COMPATIBILITY_PROFILE
from ..config import MEGABYTE, Settings
from ..exceptions import InputInvalidError, PdfForgeError, ResourceExceededError
from ..loader import load_with_timeout
from ..types import FileSummary, MergeInput, MergePreview, MergeResult, SkippedPage
from ..utils import ensure_pdf_suffix, format_file_size, safe_filename
from ..validation import validate_document

LOGGER = logging.getLogger("pdfforge.merge")

MIN_MERGE_FILES = 2
DEFAULT_OUTPUT_NAME = "merged.pdf"

InputLike = Union[bytes, MergeInput]


def batch_size_for(size_bytes: int) -> int:
    """Return how many pages to copy per batch for a source of *size_bytes*."""

    if size_bytes < 20 * MEGABYTE:
        return 20
    if size_bytes < 100 * MEGABYTE:
        return 10
    return 5


@dataclass
class PageCopyOutcome:
    """Pages of one source that made it into the output, and those that did not."""

    copied: List[int] = field(default_factory=list)
    skipped: List[SkippedPage] = field(default_factory=list)


def _normalise_inputs(inputs: Iterable[InputLike]) -> List[MergeInput]:
    sources: List[MergeInput] = []
    for item in inputs:
        if isinstance(item, MergeInput):
            sources.append(item)
        elif isinstance(item, (bytes, bytearray, memoryview)):
            sources.append(MergeInput(bytes(item)))
        else:
            raise InputInvalidError(f"Unsupported merge input type: {type(item).__name__}")
    return sources


def check_merge_limits(sources: Sequence[MergeInput], settings: Settings) -> None:
    """Reject a merge request on count or size before anything is loaded."""

    if len(sources) < MIN_MERGE_FILES:
        raise InputInvalidError("At least 2 PDF files are required for merging.")
    if len(sources) > settings.max_merge_files:
        raise InputInvalidError(
            f"Too many files: {len(sources)} provided, at most "
            f"{settings.max_merge_files} can be merged at once."
        )

    total = 0
    for index, source in enumerate(sources):
        label = source.name or f"Document {index + 1}"
        if not source.data:
            raise InputInvalidError(f"{label} is empty.")
        if len(source.data) > settings.max_file_size:
            raise ResourceExceededError(
                f"{label} is {format_file_size(len(source.data))}, over the "
                f"{format_file_size(settings.max_file_size)} per-file limit."
            )
        total += len(source.data)

    if total > settings.max_merge_total_size:
        raise ResourceExceededError(
            f"Combined size {format_file_size(total)} exceeds the "
            f"{format_file_size(settings.max_merge_total_size)} merge limit."
        )


class MergeOrchestrator:
    """Copy the pages of several documents into one, tolerating bad pages."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        backend: Optional[PDFBackend] = None,
    ) -> None:
        self.settings = settings or Settings.from_env()
        self.backend = backend or PypdfBackend()

    def copy_pages(
        self,
        source: LoadedDocument,
        target: object,
        document_index: int,
        batch_size: int,
    ) -> PageCopyOutcome:
        """Copy every page of *source* into *target* in batches.

        A failed batch is retried page by page; a page that fails on its own
        is skipped and recorded.
        """

        outcome = PageCopyOutcome()
        for first in range(0, source.num_pages, batch_size):
            batch = list(range(first, min(first + batch_size, source.num_pages)))
            try:
                pages = self.backend.fetch_pages(source, batch)
            except Exception as exc:
                LOGGER.warning(
                    "Batch of pages %d-%d of document %d failed (%s); retrying page by page",
                    batch[0] + 1,
                    batch[-1] + 1,
                    document_index + 1,
                    exc,
                )
                for page_index in batch:
                    self._copy_single(source, target, document_index, page_index, outcome)
                continue

            for page_index, page in zip(batch, pages):
                self._append(target, page, document_index, page_index, outcome)
        return outcome

    def _copy_single(
        self,
        source: LoadedDocument,
        target: object,
        document_index: int,
        page_index: int,
        outcome: PageCopyOutcome,
    ) -> None:
        try:
            (page,) = self.backend.fetch_pages(source, [page_index])
        except Exception as exc:
            self._skip(document_index, page_index, exc, outcome)
            return
        self._append(target, page, document_index, page_index, outcome)

    def _append(
        self,
        target: object,
        page: object,
        document_index: int,
        page_index: int,
        outcome: PageCopyOutcome,
    ) -> None:
        try:
            self.backend.append_page(target, page)
        except Exception as exc:
            self._skip(document_index, page_index, exc, outcome)
            return
        outcome.copied.append(page_index)

    @staticmethod
    def _skip(document_index: int, page_index: int, exc: Exception, outcome: PageCopyOutcome) -> None:
        skipped = SkippedPage(document_index, page_index, str(exc) or type(exc).__name__)
        LOGGER.warning(skipped.describe())
        outcome.skipped.append(skipped)

    def merge(
        self,
        inputs: Iterable[InputLike],
        *,
        output_filename: Optional[str] = None,
        add_bookmarks: bool = False,
    ) -> MergeResult:
        sources = _normalise_inputs(inputs)
        check_merge_limits(sources, self.settings)

        backend = self.backend
        document = backend.new_document()
        source_page_counts: List[int] = []
        skipped: List[SkippedPage] = []
        bookmarks_added = 0
        copied_total = 0

        for index, source in enumerate(sources):
            title = source.name or f"Document {index + 1}"
            LOGGER.debug("Processing input %s (%s)", title, format_file_size(len(source.data)))
            loaded = load_with_timeout(backend, source.data, self.settings, title)
            source_page_counts.append(loaded.num_pages)

            first_output_page = backend.page_count(document)
            outcome = self.copy_pages(loaded, document, index, batch_size_for(len(source.data)))
            copied_total += len(outcome.copied)
            skipped.extend(outcome.skipped)

            if index == 0:
                try:
                    backend.copy_metadata(loaded, document)
                except Exception as exc:  # pragma: no cover - metadata quirks vary
                    LOGGER.warning("Failed to copy metadata from %s: %s", title, exc)

            if add_bookmarks and outcome.copied:
                try:
                    backend.add_bookmark(document, title, first_output_page)
                    bookmarks_added += 1
                except Exception as exc:
                    LOGGER.warning("Failed to add bookmark for %s: %s", title, exc)

        if copied_total == 0:
            raise InputInvalidError("No pages could be copied from the provided documents.")

        try:
            data = backend.save(document, COMPATIBILITY_PROFILE)
        except PdfForgeError:
            raise
        except Exception as exc:
            LOGGER.error("Failed to serialize merged PDF: %s", exc)
            raise PdfForgeError(f"Failed to write merged PDF: {exc}") from exc

        validate_document(data, copied_total, backend=backend)

        warnings = [page.describe() for page in skipped]
        result = MergeResult(
            data=data,
            filename=ensure_pdf_suffix(safe_filename(output_filename, DEFAULT_OUTPUT_NAME)),
            total_pages=copied_total,
            source_page_counts=source_page_counts,
            skipped_pages=skipped,
            warnings=warnings,
            bookmarks_added=bookmarks_added,
        )
        LOGGER.info(
            "Merged %d PDFs into %d pages (%d skipped)",
            len(sources),
            result.total_pages,
            len(skipped),
        )
        return result

    def preview(self, inputs: Iterable[InputLike]) -> MergePreview:
        sources = _normalise_inputs(inputs)
        check_merge_limits(sources, self.settings)

        files: List[FileSummary] = []
        for index, source in enumerate(sources):
            name = source.name or f"Document {index + 1}"
            loaded = load_with_timeout(self.backend, source.data, self.settings, name)
            files.append(FileSummary(name=name, page_count=loaded.num_pages, size=len(source.data)))

        total_size = sum(summary.size for summary in files)
        return MergePreview(
            files=files,
            total_pages=sum(summary.page_count for summary in files),
            total_size=total_size,
            # Uncompressed page copy keeps roughly the combined input size.
            estimated_output_size=total_size,
        )


def merge_documents(
    inputs: Iterable[InputLike],
    *,
    output_filename: Optional[str] = None,
    add_bookmarks: bool = False,
    settings: Optional[Settings] = None,
    backend: Optional[PDFBackend] = None,
) -> MergeResult:
    """Merge *inputs* in order and return the validated result.

    Args:
        inputs: Raw PDF bytes or :class:`~pdfforge.types.MergeInput` items;
            their order is the output order.
        output_filename: Name reported on the result, ``merged.pdf`` by default.
        add_bookmarks: Add one outline item per source at its first page.

    Raises:
        InputInvalidError: Wrong file count, empty or unreadable input, or
            nothing could be copied.
        ResourceExceededError: A file or the combined upload is too large.
        ProcessingTimeoutError: Loading an input took too long.
        StructuralValidationError: The merged bytes failed validation.
    """

    orchestrator = MergeOrchestrator(settings=settings, backend=backend)
    return orchestrator.merge(
        inputs,
        output_filename=output_filename,
        add_bookmarks=add_bookmarks,
    )


def preview_merge(
    inputs: Iterable[InputLike],
    *,
    settings: Optional[Settings] = None,
    backend: Optional[PDFBackend] = None,
) -> MergePreview:
    """Summarise a merge without producing it."""

    return MergeOrchestrator(settings=settings, backend=backend).preview(inputs)


__all__ = [
    "MergeOrchestrator",
    "PageCopyOutcome",
    "batch_size_for",
    "check_merge_limits",
    "merge_documents",
    "preview_merge",
]
