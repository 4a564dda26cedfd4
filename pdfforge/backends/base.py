"""Backend protocol for the PDF object-model primitives pdfforge relies on."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence


@dataclass(frozen=True)
class SaveProfile:
    """Serialization settings applied when a document graph is written out.

    Attributes:
        name: Stable identifier reported in results and logs.
        compress_streams: Flate-compress page content streams before writing.
        compression_level: zlib level used when ``compress_streams`` is set.
        dedupe_objects: Collapse identical indirect objects into one.
        remove_orphans: Drop objects no longer reachable from the catalog.
    """

    name: str
    compress_streams: bool = False
    compression_level: int = 6
    dedupe_objects: bool = False
    remove_orphans: bool = False


@dataclass
class LoadedDocument:
    """Represents a loaded PDF document with backend-specific helpers."""

    num_pages: int
    file_size: int


class PDFBackend(Protocol):
    """Protocol defining the load/copy/save operations used by the orchestrators."""

    def load(self, data: bytes, *, permissive: bool = True) -> LoadedDocument:
        """Decode *data* into a document graph."""

    def new_document(self) -> object:
        """Return an empty, writable document graph."""

    def clone(self, source: LoadedDocument) -> object:
        """Return a writable copy of *source* keeping its catalog intact."""

    def fetch_pages(self, source: LoadedDocument, indices: Sequence[int]) -> list[object]:
        """Resolve the pages at *indices* so they can be appended elsewhere."""

    def append_page(self, target: object, page: object) -> None:
        """Append an already fetched page to *target*."""

    def page_count(self, document: object) -> int:
        """Return the number of pages held by a writable document."""

    def add_bookmark(self, target: object, title: str, page_index: int) -> None:
        """Attach an outline item pointing at *page_index*."""

    def copy_metadata(self, source: LoadedDocument, target: object) -> None:
        """Carry document information from *source* over to *target*."""

    def strip_metadata(self, target: object) -> None:
        """Remove descriptive metadata from *target*."""

    def save(self, document: object, profile: SaveProfile) -> bytes:
        """Serialize *document* with *profile* and return the bytes."""
