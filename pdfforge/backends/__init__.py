"""Backend abstractions for pdfforge."""

from .base import LoadedDocument, PDFBackend, SaveProfile
from .pypdf_backend import PypdfBackend, PypdfDocument

__all__ = [
    "LoadedDocument",
    "PDFBackend",
    "SaveProfile",
    "PypdfBackend",
    "PypdfDocument",
]
