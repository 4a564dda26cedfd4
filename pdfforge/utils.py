"""Utilities shared by pdfforge modules."""

from __future__ import annotations

import logging
from pathlib import Path

from rich.logging import RichHandler


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger


def configure_logging(level: int = logging.INFO) -> None:
    """Route the ``pdfforge`` logger hierarchy through rich for terminal use."""

    logger = logging.getLogger("pdfforge")
    logger.setLevel(level)
    if not any(isinstance(handler, RichHandler) for handler in logger.handlers):
        logger.addHandler(RichHandler(show_path=False, markup=False))


def format_file_size(size_bytes: float) -> str:
    """
    Format file size in human-readable format.

    Args:
        size_bytes: File size in bytes

    Returns:
        Formatted string (e.g., "1.5 MB", "500.0 KB")
    """
    for unit in ["B", "KB", "MB", "GB", "TB"]:
        if abs(size_bytes) < 1024.0:
            return f"{size_bytes:.1f} {unit}"
        size_bytes /= 1024.0
    return f"{size_bytes:.1f} PB"


def safe_filename(filename: str | None, default: str) -> str:
    """Return a filesystem-safe filename derived from user input."""

    if not filename:
        return default

    candidate = Path(filename.replace("\\", "/")).name.strip()
    return candidate or default


def ensure_pdf_suffix(filename: str) -> str:
    if filename.lower().endswith(".pdf"):
        return filename
    return f"{filename}.pdf"


__all__ = [
    "get_logger",
    "configure_logging",
    "format_file_size",
    "safe_filename",
    "ensure_pdf_suffix",
]
