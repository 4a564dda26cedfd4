from __future__ import annotations

import pytest

from pdfforge.annotate import TEMPLATE_CATALOGUE, expand_template, hex_to_rgb


@pytest.mark.parametrize(
    ("template", "expected"),
    [
        ("Page (x) of (y)", "Page 3 of 10"),
        ("(x) of (y)", "3 of 10"),
        ("Page (x)", "Page 3"),
        ("(x)", "3"),
        ("(file)", "Document"),
        ("Page (x) of (y) - (x)", "Page 3 of 10 - 3"),
        ("(file): Page (x)", "Document: Page 3"),
        ("No placeholders here", "No placeholders here"),
    ],
)
def test_expand_template_precedence(template: str, expected: str) -> None:
    assert expand_template(template, 3, 10) == expected


def test_expand_template_empty() -> None:
    assert expand_template("", 1, 1) == ""


def test_template_catalogue_lists_placeholders() -> None:
    placeholders = [entry["placeholder"] for entry in TEMPLATE_CATALOGUE]
    assert placeholders[0] == "Page (x) of (y)"
    assert "(file)" in placeholders
    assert all(entry["description"] for entry in TEMPLATE_CATALOGUE)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("#FF0000", (1.0, 0.0, 0.0)),
        ("00ff00", (0.0, 1.0, 0.0)),
        ("#0000Ff", (0.0, 0.0, 1.0)),
        ("#ffffff", (1.0, 1.0, 1.0)),
    ],
)
def test_hex_to_rgb_valid(value: str, expected: tuple[float, float, float]) -> None:
    assert hex_to_rgb(value) == pytest.approx(expected)


@pytest.mark.parametrize("value", ["#FFF", "red", "#GGGGGG", "", None, "#1234567"])
def test_hex_to_rgb_invalid_is_black(value: str | None) -> None:
    assert hex_to_rgb(value) == (0.0, 0.0, 0.0)


def test_hex_to_rgb_grey() -> None:
    red, green, blue = hex_to_rgb("#808080")
    assert red == pytest.approx(128 / 255)
    assert red == green == blue
