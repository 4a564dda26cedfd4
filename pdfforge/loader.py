"""Timed document loading shared by the merge and compression paths."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeout

from .backends.base import LoadedDocument, PDFBackend
from .config import MEGABYTE, Settings
from .exceptions import ProcessingTimeoutError

LOGGER = logging.getLogger("pdfforge.loader")


def load_with_timeout(
    backend: PDFBackend,
    data: bytes,
    settings: Settings,
    label: str = "document",
) -> LoadedDocument:
    """Load *data* permissively, giving up after the size-proportional timeout.

    The worker thread is abandoned rather than joined on expiry; the caller
    gets :class:`ProcessingTimeoutError` straight away. Threads cannot be
    interrupted, so an abandoned parse keeps running and holds *data* until
    pypdf returns.
    """

    timeout = settings.load_timeout(len(data))
    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="pdfforge-load")
    future = executor.submit(backend.load, data, permissive=True)
    try:
        return future.result(timeout=timeout)
    except FutureTimeout as exc:
        LOGGER.warning(
            "Loading %s (%.1f MB) exceeded %.1fs",
            label,
            len(data) / MEGABYTE,
            timeout,
        )
        raise ProcessingTimeoutError(
            f"Loading {label} timed out after {timeout:.0f} seconds. "
            "The file may be too large or complex; try splitting it first."
        ) from exc
    finally:
        executor.shutdown(wait=False, cancel_futures=True)


__all__ = ["load_with_timeout"]
