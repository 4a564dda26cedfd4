"""Structural sniff tests run on every document pdfforge produces."""

from __future__ import annotations

import logging
from typing import Optional

from .backends import PypdfBackend
from .backends.base import PDFBackend
from .exceptions import PdfForgeError, StructuralValidationError
from .types import ValidationReport

LOGGER = logging.getLogger("pdfforge.validation")

SIGNATURE = b"%PDF-"
EOF_MARKER = b"%%EOF"
SIGNATURE_WINDOW = 8
TRAILER_WINDOW = 1024


def validate_document(
    data: bytes,
    expected_page_count: Optional[int] = None,
    *,
    backend: Optional[PDFBackend] = None,
) -> ValidationReport:
    """Check *data* for signature, trailer, catalog, page tree and page count.

    Checks run in that order and stop at the first failure, which is raised
    as :class:`StructuralValidationError` with ``check`` naming the failing
    step. When *expected_page_count* is omitted a document that cannot be
    re-loaded still passes, with ``page_count`` left as ``None``.
    """

    if SIGNATURE not in data[:SIGNATURE_WINDOW]:
        raise StructuralValidationError("Missing PDF header signature.", check="signature")
    if EOF_MARKER not in data[-TRAILER_WINDOW:]:
        raise StructuralValidationError("Missing end-of-file marker.", check="trailer")
    if b"/Catalog" not in data:
        raise StructuralValidationError("Missing document catalog.", check="catalog")
    if b"/Pages" not in data:
        raise StructuralValidationError("Missing page tree.", check="page-tree")

    backend = backend or PypdfBackend()
    checks = ("signature", "trailer", "catalog", "page-tree")
    try:
        page_count: Optional[int] = backend.load(data, permissive=True).num_pages
    except PdfForgeError as exc:
        if expected_page_count is not None:
            raise StructuralValidationError(
                f"Produced document could not be re-loaded: {exc.detail}",
                check="page-count",
            ) from exc
        LOGGER.warning("Re-load during validation failed, tolerated: %s", exc.detail)
        return ValidationReport(size=len(data), page_count=None, checks=checks)

    if expected_page_count is not None and page_count != expected_page_count:
        raise StructuralValidationError(
            f"Page count mismatch: expected {expected_page_count}, found {page_count}.",
            check="page-count",
        )

    LOGGER.debug("Validated %d bytes with %s pages", len(data), page_count)
    return ValidationReport(size=len(data), page_count=page_count, checks=checks + ("page-count",))


def is_structurally_valid(
    data: bytes,
    expected_page_count: Optional[int] = None,
    *,
    backend: Optional[PDFBackend] = None,
) -> bool:
    try:
        validate_document(data, expected_page_count, backend=backend)
    except StructuralValidationError:
        return False
    return True


__all__ = ["validate_document", "is_structurally_valid"]
