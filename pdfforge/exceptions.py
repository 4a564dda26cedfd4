"""Custom exceptions for :mod:`pdfforge`.

Every error carries a short ``classification`` used by the HTTP and CLI
surfaces and a human readable ``detail`` string.
"""

from __future__ import annotations


class PdfForgeError(Exception):
    """Base exception for all pdfforge errors."""

    classification = "processing-failed"
    retryable = False

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.default_message)
        self.detail = message or self.default_message

    @property
    def default_message(self) -> str:
        return "PDF processing failed."


class InputInvalidError(PdfForgeError):
    """Raised when a document, the file count or a configuration is malformed."""

    classification = "input-invalid"

    @property
    def default_message(self) -> str:
        return "Invalid input document or configuration."


class SplitPolicyEmptyError(InputInvalidError):
    """Raised when a split policy resolves to no page group at all."""

    classification = "split-policy-empty"

    @property
    def default_message(self) -> str:
        return "No valid pages or ranges specified for splitting."


class ResourceExceededError(PdfForgeError):
    """Raised when a file or the aggregate upload is over the configured ceiling."""

    classification = "size-exceeded"

    @property
    def default_message(self) -> str:
        return "File size exceeds the configured limit."


class ProcessingTimeoutError(PdfForgeError):
    """Raised when loading a document exceeds its size-proportional timeout."""

    classification = "processing-timeout"
    retryable = True

    @property
    def default_message(self) -> str:
        return (
            "The document is too large or complex to load in time. "
            "Consider splitting the file first."
        )


class StructuralValidationError(PdfForgeError):
    """Raised when produced bytes fail the structural sniff test."""

    classification = "structural-validation-failed"

    def __init__(self, message: str = "", *, check: str = "unknown") -> None:
        super().__init__(message)
        self.check = check

    @property
    def default_message(self) -> str:
        return "Produced document failed structural validation."


__all__ = [
    "PdfForgeError",
    "InputInvalidError",
    "SplitPolicyEmptyError",
    "ResourceExceededError",
    "ProcessingTimeoutError",
    "StructuralValidationError",
]
