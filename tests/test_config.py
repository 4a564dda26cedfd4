from __future__ import annotations

import pytest

from pdfforge.config import MEGABYTE, Settings
from pdfforge.exceptions import (
    InputInvalidError,
    PdfForgeError,
    ProcessingTimeoutError,
    SplitPolicyEmptyError,
    StructuralValidationError,
)
from pdfforge.utils import ensure_pdf_suffix, format_file_size, safe_filename


def test_defaults() -> None:
    settings = Settings()
    assert settings.max_file_size == 250 * MEGABYTE
    assert settings.max_merge_total_size == 500 * MEGABYTE
    assert settings.max_merge_files == 10
    assert settings.clamp_out_of_range is True


def test_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PDFFORGE_MAX_FILE_MB", "5")
    monkeypatch.setenv("PDFFORGE_MAX_MERGE_FILES", "3")
    monkeypatch.setenv("PDFFORGE_LOAD_TIMEOUT_FLOOR", "2.5")
    monkeypatch.setenv("PDFFORGE_CLAMP_OUT_OF_RANGE", "off")

    settings = Settings.from_env()

    assert settings.max_file_size == 5 * MEGABYTE
    assert settings.max_merge_files == 3
    assert settings.load_timeout_floor == 2.5
    assert settings.clamp_out_of_range is False


def test_from_env_ignores_bad_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PDFFORGE_MAX_MERGE_FILES", "lots")
    monkeypatch.setenv("PDFFORGE_CLAMP_OUT_OF_RANGE", "maybe")

    settings = Settings.from_env()

    assert settings.max_merge_files == 10
    assert settings.clamp_out_of_range is True


def test_load_timeout_is_size_proportional() -> None:
    settings = Settings()
    assert settings.load_timeout(1 * MEGABYTE) == 30
    assert settings.load_timeout(120 * MEGABYTE) == pytest.approx(120)


def test_error_classifications() -> None:
    assert PdfForgeError().detail == "PDF processing failed."
    assert InputInvalidError("bad").detail == "bad"
    assert SplitPolicyEmptyError().classification == "split-policy-empty"
    assert ProcessingTimeoutError().retryable is True
    error = StructuralValidationError("boom", check="trailer")
    assert (error.classification, error.check, str(error)) == (
        "structural-validation-failed",
        "trailer",
        "boom",
    )


def test_file_helpers() -> None:
    assert format_file_size(512) == "512.0 B"
    assert format_file_size(1536) == "1.5 KB"
    assert safe_filename("../../etc/passwd", "x.pdf") == "passwd"
    assert safe_filename(None, "x.pdf") == "x.pdf"
    assert safe_filename("C:\\docs\\scan.pdf", "x.pdf") == "scan.pdf"
    assert ensure_pdf_suffix("report") == "report.pdf"
    assert ensure_pdf_suffix("report.PDF") == "report.PDF"
