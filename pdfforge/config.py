"""Runtime limits and policies for :mod:`pdfforge`, read from the environment."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

LOGGER = logging.getLogger("pdfforge.config")

MEGABYTE = 1024 * 1024

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    normalised = value.strip().lower()
    if normalised in _TRUE_VALUES:
        return True
    if normalised in _FALSE_VALUES:
        return False
    LOGGER.warning("Ignoring unrecognised boolean %s=%r", name, value)
    return default


def _env_number(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return float(value)
    except ValueError:
        LOGGER.warning("Ignoring non-numeric %s=%r", name, value)
        return default


@dataclass(frozen=True)
class Settings:
    """Size ceilings, load timeouts and the out-of-range policy.

    Attributes:
        max_file_size: Per-file ceiling in bytes for merge inputs.
        max_merge_total_size: Aggregate ceiling in bytes for one merge.
        max_merge_files: Maximum number of documents in one merge.
        max_compress_file_size: Per-file ceiling in bytes for compression.
        load_timeout_floor: Minimum load timeout in seconds.
        load_timeout_per_mb: Additional seconds granted per megabyte of input.
        clamp_out_of_range: Clamp out-of-range annotation numbers instead of
            rejecting the request.
    """

    max_file_size: int = 250 * MEGABYTE
    max_merge_total_size: int = 500 * MEGABYTE
    max_merge_files: int = 10
    max_compress_file_size: int = 250 * MEGABYTE
    load_timeout_floor: float = 30.0
    load_timeout_per_mb: float = 1.0
    clamp_out_of_range: bool = True

    @classmethod
    def from_env(cls) -> "Settings":
        defaults = cls()
        return cls(
            max_file_size=int(
                _env_number("PDFFORGE_MAX_FILE_MB", defaults.max_file_size / MEGABYTE) * MEGABYTE
            ),
            max_merge_total_size=int(
                _env_number("PDFFORGE_MAX_MERGE_TOTAL_MB", defaults.max_merge_total_size / MEGABYTE)
                * MEGABYTE
            ),
            max_merge_files=int(_env_number("PDFFORGE_MAX_MERGE_FILES", defaults.max_merge_files)),
            max_compress_file_size=int(
                _env_number("PDFFORGE_MAX_COMPRESS_MB", defaults.max_compress_file_size / MEGABYTE)
                * MEGABYTE
            ),
            load_timeout_floor=_env_number("PDFFORGE_LOAD_TIMEOUT_FLOOR", defaults.load_timeout_floor),
            load_timeout_per_mb=_env_number("PDFFORGE_LOAD_TIMEOUT_PER_MB", defaults.load_timeout_per_mb),
            clamp_out_of_range=_env_bool("PDFFORGE_CLAMP_OUT_OF_RANGE", defaults.clamp_out_of_range),
        )

    def load_timeout(self, size_bytes: int) -> float:
        """Return the load timeout for a document of *size_bytes*."""

        return max(self.load_timeout_floor, self.load_timeout_per_mb * size_bytes / MEGABYTE)


__all__ = ["Settings", "MEGABYTE"]
