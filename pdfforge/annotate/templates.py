"""Placeholder expansion for header and footer text."""

from __future__ import annotations

DOCUMENT_PLACEHOLDER = "Document"

TEMPLATE_CATALOGUE: tuple[dict[str, str], ...] = (
    {
        "placeholder": "Page (x) of (y)",
        "label": "Page X of Y",
        "description": "Current page number and total page count",
    },
    {
        "placeholder": "(x) of (y)",
        "label": "X of Y",
        "description": "Page number and total without the word 'Page'",
    },
    {
        "placeholder": "Page (x)",
        "label": "Page X",
        "description": "Current page number with the word 'Page'",
    },
    {
        "placeholder": "(x)",
        "label": "Page number",
        "description": "Current page number only",
    },
    {
        "placeholder": "(file)",
        "label": "File name",
        "description": "Document name placeholder",
    },
)


def expand_template(text: str, page_number: int, total_pages: int) -> str:
    """Substitute page placeholders in *text*, most specific pattern first.

    ``"Page (x) of (y) - (x)"`` on page 3 of 10 becomes ``"Page 3 of 10 - 3"``.
    """

    if not text:
        return text or ""

    current = str(page_number)
    total = str(total_pages)
    return (
        text.replace("Page (x) of (y)", f"Page {current} of {total}")
        .replace("(x) of (y)", f"{current} of {total}")
        .replace("Page (x)", f"Page {current}")
        .replace("(x)", current)
        .replace("(file)", DOCUMENT_PLACEHOLDER)
    )


__all__ = ["TEMPLATE_CATALOGUE", "DOCUMENT_PLACEHOLDER", "expand_template"]
