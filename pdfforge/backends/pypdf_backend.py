"""pypdf backend implementation for pdfforge."""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from typing import Sequence

from pypdf import PdfReader, PdfWriter
from pypdf.errors import PdfReadError
from pypdf.generic import NameObject

from ..exceptions import InputInvalidError
from .base import LoadedDocument, PDFBackend, SaveProfile

LOGGER = logging.getLogger("pdfforge.backends")


@dataclass
class PypdfDocument(LoadedDocument):
    reader: PdfReader


class PypdfBackend(PDFBackend):
    """Backend implementation that uses `pypdf` under the hood."""

    def load(self, data: bytes, *, permissive: bool = True) -> PypdfDocument:
        if not data:
            raise InputInvalidError("Uploaded document is empty.")

        try:
            reader = PdfReader(io.BytesIO(data), strict=not permissive)
        except PdfReadError as exc:
            raise InputInvalidError(f"Corrupted or invalid PDF file. Error: {exc}") from exc
        except Exception as exc:
            raise InputInvalidError(f"Unexpected error reading PDF. Error: {exc}") from exc

        if reader.is_encrypted:
            LOGGER.debug("Attempting empty-password decrypt of encrypted PDF")
            try:
                reader.decrypt("")
            except Exception as exc:  # pragma: no cover - decrypt errors vary
                if not permissive:
                    raise InputInvalidError("PDF is encrypted and cannot be opened.") from exc
                LOGGER.warning("Ignoring encryption on input document: %s", exc)

        try:
            num_pages = len(reader.pages)
        except Exception as exc:
            raise InputInvalidError(f"Unable to read the page tree. Error: {exc}") from exc
        if num_pages == 0:
            raise InputInvalidError("PDF has no pages.")

        return PypdfDocument(num_pages=num_pages, file_size=len(data), reader=reader)

    def new_document(self) -> PdfWriter:
        return PdfWriter()

    def clone(self, source: PypdfDocument) -> PdfWriter:  # type: ignore[override]
        return PdfWriter(clone_from=source.reader)

    def fetch_pages(self, source: PypdfDocument, indices: Sequence[int]) -> list[object]:  # type: ignore[override]
        pages = []
        for index in indices:
            page = source.reader.pages[index]
            # Touch the geometry so broken page dictionaries fail here, not on write.
            page.mediabox
            pages.append(page)
        return pages

    def append_page(self, target: PdfWriter, page: object) -> None:  # type: ignore[override]
        target.add_page(page)

    def page_count(self, document: PdfWriter) -> int:  # type: ignore[override]
        return len(document.pages)

    def add_bookmark(self, target: PdfWriter, title: str, page_index: int) -> None:  # type: ignore[override]
        target.add_outline_item(title, page_index)

    def copy_metadata(self, source: PypdfDocument, target: PdfWriter) -> None:  # type: ignore[override]
        metadata = source.reader.metadata
        if not metadata:
            return
        cleaned = {
            str(key): str(value)
            for key, value in metadata.items()
            if value is not None
        }
        if cleaned:
            target.add_metadata(cleaned)

    def strip_metadata(self, target: PdfWriter) -> None:  # type: ignore[override]
        target.metadata = None
        root = target._root_object  # type: ignore[attr-defined]
        if NameObject("/Metadata") in root:
            del root[NameObject("/Metadata")]

    def save(self, document: PdfWriter, profile: SaveProfile) -> bytes:  # type: ignore[override]
        if profile.compress_streams:
            for page in document.pages:
                page.compress_content_streams(level=profile.compression_level)
        if profile.dedupe_objects or profile.remove_orphans:
            document.compress_identical_objects(
                remove_identicals=profile.dedupe_objects,
                remove_orphans=profile.remove_orphans,
            )

        buffer = io.BytesIO()
        document.write(buffer)
        return buffer.getvalue()


__all__ = ["PypdfBackend", "PypdfDocument"]
