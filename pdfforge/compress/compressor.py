"""Tiered compression: try several save profiles and keep the smallest valid output."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from ..backends import PypdfBackend
from ..backends.base import LoadedDocument, PDFBackend, SaveProfile
from ..config import Settings
from ..exceptions import (
    InputInvalidError,
    PdfForgeError,
    ResourceExceededError,
    StructuralValidationError,
)
from ..loader import load_with_timeout
from ..types import CompressionResult
from ..utils import format_file_size
from ..validation import is_structurally_valid, validate_document
from .profiles import COMPATIBILITY_PROFILE, CompressionLevel, profiles_for

LOGGER = logging.getLogger("pdfforge.compress")

ORIGINAL_PROFILE_NAME = "original"

GraphBuilder = Callable[[PDFBackend, LoadedDocument], object]


def clone_graph(backend: PDFBackend, source: LoadedDocument) -> object:
    return backend.clone(source)


def rebuild_graph(backend: PDFBackend, source: LoadedDocument) -> object:
    """Copy every page into a fresh graph, leaving unreachable objects behind."""

    document = backend.new_document()
    for page in backend.fetch_pages(source, range(source.num_pages)):
        backend.append_page(document, page)
    backend.copy_metadata(source, document)
    return document


@dataclass(frozen=True)
class Candidate:
    data: bytes
    profile: str
    level: CompressionLevel

    @property
    def size(self) -> int:
        return len(self.data)


class CompressionAdvisor:
    """Produce and rank compression candidates for one source document."""

    def __init__(self, backend: PDFBackend, data: bytes, page_count: int, *, remove_metadata: bool) -> None:
        self.backend = backend
        self.data = data
        self.page_count = page_count
        self.remove_metadata = remove_metadata
        # Candidate outputs by name; tiers share profiles, so each is built once.
        self._outputs: dict[str, Optional[bytes]] = {}
        self._original_valid: Optional[bool] = None

    def _produce(self, builder: GraphBuilder, profile: SaveProfile) -> bytes:
        # Each candidate starts from a fresh parse; saving mutates the graph.
        source = self.backend.load(self.data, permissive=True)
        document = builder(self.backend, source)
        if self.remove_metadata:
            self.backend.strip_metadata(document)
        output = self.backend.save(document, profile)
        validate_document(output, self.page_count, backend=self.backend)
        return output

    def _try(
        self,
        builder: GraphBuilder,
        profile: SaveProfile,
        name: str,
        level: CompressionLevel,
    ) -> Optional[Candidate]:
        if name not in self._outputs:
            self._outputs[name] = self._attempt(builder, profile, name)
        output = self._outputs[name]
        if output is None:
            return None
        return Candidate(output, name, level)

    def _attempt(self, builder: GraphBuilder, profile: SaveProfile, name: str) -> Optional[bytes]:
        try:
            output = self._produce(builder, profile)
        except PdfForgeError as exc:
            LOGGER.warning("Rejected candidate %s: %s", name, exc.detail)
            return None
        except Exception as exc:
            LOGGER.warning("Candidate %s failed: %s", name, exc)
            return None
        LOGGER.debug("Candidate %s produced %s", name, format_file_size(len(output)))
        return output

    def _original_is_valid(self) -> bool:
        if self._original_valid is None:
            self._original_valid = is_structurally_valid(
                self.data, self.page_count, backend=self.backend
            )
        return self._original_valid

    def candidates(self, level: CompressionLevel) -> List[Candidate]:
        builders: list[tuple[str, GraphBuilder]] = [("clone", clone_graph)]
        if level is CompressionLevel.MAXIMUM:
            builders.append(("rebuild", rebuild_graph))

        found: List[Candidate] = []
        if not self.remove_metadata and self._original_is_valid():
            found.append(Candidate(self.data, ORIGINAL_PROFILE_NAME, level))
        for profile in profiles_for(level):
            for mode, builder in builders:
                name = profile.name if mode == "clone" else f"{profile.name}+{mode}"
                candidate = self._try(builder, profile, name, level)
                if candidate is not None:
                    found.append(candidate)
        return found

    def best(self, level: CompressionLevel) -> Candidate:
        """Return the smallest valid candidate for *level*.

        When nothing is valid the conservative profile is tried on a rebuilt
        graph; if that fails too, :class:`StructuralValidationError` is raised.
        """

        found = self.candidates(level)
        if found:
            return min(found, key=lambda candidate: candidate.size)

        fallback_name = f"{COMPATIBILITY_PROFILE.name}+fallback"
        output = self._outputs.get(fallback_name)
        if output is not None:
            return Candidate(output, fallback_name, level)

        LOGGER.warning("No valid candidate for %s; falling back to %s", level.value, COMPATIBILITY_PROFILE.name)
        try:
            output = self._produce(rebuild_graph, COMPATIBILITY_PROFILE)
        except StructuralValidationError:
            raise
        except PdfForgeError as exc:
            raise StructuralValidationError(
                f"Compression could not produce a valid document: {exc.detail}",
                check="fallback",
            ) from exc
        except Exception as exc:
            raise StructuralValidationError(
                f"Compression could not produce a valid document: {exc}",
                check="fallback",
            ) from exc
        self._outputs[fallback_name] = output
        return Candidate(output, fallback_name, level)


def compress_document(
    data: bytes,
    level: CompressionLevel | str = CompressionLevel.MEDIUM,
    *,
    remove_metadata: bool = False,
    target_size_kb: Optional[float] = None,
    settings: Optional[Settings] = None,
    backend: Optional[PDFBackend] = None,
) -> CompressionResult:
    """Compress *data* at *level* and return the smallest valid result.

    Args:
        data: Source PDF bytes.
        level: ``low``, ``medium``, ``high`` or ``maximum``.
        remove_metadata: Strip the document information dictionary and XMP.
        target_size_kb: Optional size goal; higher tiers are tried in turn
            until the output fits or ``maximum`` is exhausted.

    Raises:
        InputInvalidError: Unknown level, bad target or unreadable input.
        ResourceExceededError: The input is over the compression size limit.
        ProcessingTimeoutError: Loading took too long.
        StructuralValidationError: No valid output could be produced.
    """

    requested = CompressionLevel.parse(level)
    settings = settings or Settings.from_env()
    backend = backend or PypdfBackend()

    if not data:
        raise InputInvalidError("Uploaded document is empty.")
    if len(data) > settings.max_compress_file_size:
        raise ResourceExceededError(
            f"File is {format_file_size(len(data))}, over the "
            f"{format_file_size(settings.max_compress_file_size)} compression limit."
        )
    if target_size_kb is not None and target_size_kb <= 0:
        raise InputInvalidError("targetSizeKB must be a positive number.")

    source = load_with_timeout(backend, data, settings)
    advisor = CompressionAdvisor(backend, data, source.num_pages, remove_metadata=remove_metadata)
    best = advisor.best(requested)

    target_bytes = None if target_size_kb is None else int(target_size_kb * 1024)
    if target_bytes is not None:
        for next_level in requested.next_levels():
            if best.size <= target_bytes:
                break
            LOGGER.info(
                "Output %s above target %s; trying %s",
                format_file_size(best.size),
                format_file_size(target_bytes),
                next_level.value,
            )
            candidate = advisor.best(next_level)
            if candidate.size < best.size:
                best = candidate

    result = CompressionResult(
        data=best.data,
        requested_level=requested.value,
        applied_level=best.level.value,
        profile=best.profile,
        original_size=len(data),
        compressed_size=best.size,
        target_met=None if target_bytes is None else best.size <= target_bytes,
    )
    LOGGER.info(
        "Compressed %s -> %s (%.2f%%) with %s/%s",
        format_file_size(result.original_size),
        format_file_size(result.compressed_size),
        result.reduction_percent,
        result.applied_level,
        result.profile,
    )
    return result


__all__ = [
    "Candidate",
    "CompressionAdvisor",
    "clone_graph",
    "rebuild_graph",
    "compress_document",
]
