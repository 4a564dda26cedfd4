from __future__ import annotations

import io
from typing import Callable

import pytest
from pypdf import PdfReader, PdfWriter

from pdfforge.annotate import (
    AnnotationConfig,
    AnnotationPipeline,
    RectDraw,
    TextDraw,
    WatermarkConfig,
    WatermarkPosition,
    add_header_footer,
    add_watermark,
    watermark_options,
)
from pdfforge.annotate.layout import helvetica_width
from pdfforge.exceptions import InputInvalidError


def _writer(data: bytes) -> PdfWriter:
    return PdfWriter(clone_from=PdfReader(io.BytesIO(data)))


def _page_texts(data: bytes) -> list[str]:
    return [page.extract_text() or "" for page in PdfReader(io.BytesIO(data)).pages]


def test_annotation_plan_right_header_from_start_page(pdf_factory: Callable[..., bytes]) -> None:
    document = _writer(pdf_factory(3))
    config = AnnotationConfig.from_mapping({"rightHeader": "Page (x) of (y)", "startPage": 2})

    plans = AnnotationPipeline().plan_annotations(document, config)

    assert [plan.page_index for plan in plans] == [1, 2]
    for plan, expected in zip(plans, ["Page 2 of 3", "Page 3 of 3"]):
        (draw,) = plan.texts
        assert draw.text == expected
        assert draw.y == 750
        assert draw.x == pytest.approx(612 - helvetica_width(expected, 10) - 50)


def test_add_header_footer_renders_text(pdf_factory: Callable[..., bytes]) -> None:
    output = add_header_footer(
        pdf_factory(3),
        {"rightHeader": "Page (x) of (y)", "startPage": 2},
    )

    texts = _page_texts(output)
    assert len(texts) == 3
    assert "Page" not in texts[0]
    assert "Page 2 of 3" in texts[1]
    assert "Page 3 of 3" in texts[2]


def test_cover_bands_precede_text(pdf_factory: Callable[..., bytes]) -> None:
    document = _writer(pdf_factory(1))
    config = AnnotationConfig(left_footer="(x)", cover_with_white=True)

    (plan,) = AnnotationPipeline().plan_annotations(document, config)

    kinds = [type(operation) for operation in plan.operations]
    assert kinds == [RectDraw, RectDraw, TextDraw]
    header_band, footer_band = plan.operations[:2]
    assert (header_band.y, header_band.height, header_band.width) == (745, 20, 612)
    assert (footer_band.y, footer_band.height) == (45, 20)
    assert plan.operations[2].x == 50


def test_annotation_uses_injected_measure(pdf_factory: Callable[..., bytes]) -> None:
    document = _writer(pdf_factory(1))
    pipeline = AnnotationPipeline(measure=lambda text, size: 100.0)

    (plan,) = pipeline.plan_annotations(document, AnnotationConfig(middle_header="Title"))

    assert plan.texts[0].x == pytest.approx(256)


def test_annotation_without_slots_leaves_pages_alone(pdf_factory: Callable[..., bytes]) -> None:
    document = _writer(pdf_factory(2))
    assert AnnotationPipeline().plan_annotations(document, AnnotationConfig()) == []


def test_annotation_config_font_size_fallback() -> None:
    assert AnnotationConfig.from_mapping({"fontSize": "abc"}).font_size == 10
    assert AnnotationConfig.from_mapping({"fontSize": -4}).font_size == 10
    assert AnnotationConfig.from_mapping({"fontSize": "14"}).font_size == 14


def test_annotation_config_parses_flags() -> None:
    config = AnnotationConfig.from_mapping(
        {"coverWithWhite": "true", "textColor": "#FF0000", "startPage": "0"}
    )
    assert config.cover_with_white is True
    assert config.text_color == "#FF0000"
    assert config.start_page == 1


@pytest.mark.parametrize(("end_page", "expected"), [(0, [0, 1, 2, 3, 4]), (3, [0, 1, 2])])
def test_watermark_page_window(
    pdf_factory: Callable[..., bytes], end_page: int, expected: list[int]
) -> None:
    document = _writer(pdf_factory(5))
    config = WatermarkConfig.from_mapping({"position": "top-right", "endPage": end_page})

    plans = AnnotationPipeline().plan_watermark(document, config)

    assert [plan.page_index for plan in plans] == expected
    draw = plans[0].texts[0]
    text_width = helvetica_width("CONFIDENTIAL", 48)
    assert (draw.x, draw.y) == pytest.approx((612 - text_width - 50, 692))
    assert draw.rotation == 45
    assert draw.opacity == pytest.approx(0.3)


def test_add_watermark_marks_selected_pages(pdf_factory: Callable[..., bytes]) -> None:
    source = pdf_factory(5)

    everywhere = add_watermark(source, {"position": "top-right", "endPage": 0, "rotation": 0})
    first_three = add_watermark(source, {"position": "top-right", "endPage": 3, "rotation": 0})

    assert all("CONFIDENTIAL" in text for text in _page_texts(everywhere))
    marked = ["CONFIDENTIAL" in text for text in _page_texts(first_three)]
    assert marked == [True, True, True, False, False]


def test_watermark_start_page_after_end_marks_nothing(pdf_factory: Callable[..., bytes]) -> None:
    document = _writer(pdf_factory(5))
    config = WatermarkConfig(start_page=4, end_page=2)
    assert AnnotationPipeline().plan_watermark(document, config) == []


def test_watermark_config_clamps_out_of_range_values() -> None:
    config = WatermarkConfig.from_mapping(
        {
            "fontSize": 500,
            "opacity": 1.7,
            "rotation": -180,
            "position": "middle-ish",
            "startPage": -3,
            "endPage": -1,
        }
    )
    assert config.font_size == 100
    assert config.opacity == 1.0
    assert config.rotation == -90
    assert config.position is WatermarkPosition.CENTER
    assert config.start_page == 1
    assert config.end_page == 0


def test_watermark_config_defaults_for_unparsable_values() -> None:
    config = WatermarkConfig.from_mapping({"fontSize": "big", "opacity": None, "rotation": "0", "text": ""})
    assert config.font_size == 48
    assert config.opacity == pytest.approx(0.3)
    assert config.rotation == 0
    assert config.text == "CONFIDENTIAL"


def test_watermark_config_rejects_when_clamping_disabled() -> None:
    with pytest.raises(InputInvalidError):
        WatermarkConfig.from_mapping({"opacity": 2}, clamp=False)
    with pytest.raises(InputInvalidError):
        WatermarkConfig.from_mapping({"rotation": 120}, clamp=False)


def test_watermark_options_describe_defaults() -> None:
    options = watermark_options()
    assert options["defaultSettings"]["text"] == "CONFIDENTIAL"
    assert options["fontSizeRange"] == {"min": 12, "max": 100}
    assert options["rotationRange"] == {"min": -90, "max": 90}
    assert "top-right" in options["positions"]


def test_add_header_footer_rejects_garbage() -> None:
    with pytest.raises(InputInvalidError):
        add_header_footer(b"definitely not a pdf", {"leftHeader": "x"})
