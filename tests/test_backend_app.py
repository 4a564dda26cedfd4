from __future__ import annotations

import io
import json
from typing import Callable
from urllib.parse import quote
from zipfile import ZipFile

from fastapi.testclient import TestClient
from pypdf import PdfReader

from pdfforge.config import Settings

from apps.backend.app.main import app, get_settings


client = TestClient(app)


def _pdf_file(name: str, data: bytes) -> tuple[str, tuple[str, bytes, str]]:
    return ("pdf", (name, data, "application/pdf"))


def test_health() -> None:
    assert client.get("/health").json()["status"] == "ok"
    assert client.get("/api/pdf/health").status_code == 200


def test_templates_and_watermark_options() -> None:
    templates = client.get("/api/pdf/templates").json()
    assert templates["templates"][0]["placeholder"] == "Page (x) of (y)"
    assert "center" in templates["watermarkPositions"]

    options = client.get("/api/pdf/watermark/options").json()
    assert options["defaultSettings"]["fontSize"] == 48
    assert options["opacityRange"] == {"min": 0.1, "max": 1.0}


def test_process_header_footer(pdf_factory: Callable[..., bytes]) -> None:
    response = client.post(
        "/api/pdf/process",
        files=[_pdf_file("report.pdf", pdf_factory(3))],
        data={"headerFooterData": json.dumps({"rightHeader": "Page (x) of (y)", "startPage": 2})},
    )

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert "processed_report.pdf" in response.headers["content-disposition"]
    pages = PdfReader(io.BytesIO(response.content)).pages
    assert "Page 3 of 3" in pages[2].extract_text()


def test_watermark(pdf_factory: Callable[..., bytes]) -> None:
    response = client.post(
        "/api/pdf/watermark",
        files=[_pdf_file("doc.pdf", pdf_factory(5))],
        data={"watermarkData": json.dumps({"text": "SECRET", "endPage": 3, "rotation": 0})},
    )

    assert response.status_code == 200
    pages = PdfReader(io.BytesIO(response.content)).pages
    assert ["SECRET" in page.extract_text() for page in pages] == [True, True, True, False, False]


def test_split_single_group_returns_pdf(pdf_factory: Callable[..., bytes]) -> None:
    response = client.post(
        "/api/pdf/split",
        files=[_pdf_file("doc.pdf", pdf_factory(4))],
        data={"splitData": json.dumps({"splitType": "ranges", "ranges": [{"start": 2, "end": 3}]})},
    )

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert "doc_pages_2_to_3.pdf" in response.headers["content-disposition"]
    assert len(PdfReader(io.BytesIO(response.content)).pages) == 2


def test_split_many_groups_returns_zip(pdf_factory: Callable[..., bytes]) -> None:
    response = client.post(
        "/api/pdf/split",
        files=[_pdf_file("doc.pdf", pdf_factory(5))],
        data={"splitData": json.dumps({"splitType": "every", "everyNPages": 2, "fileName": "chunks"})},
    )

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/zip"
    assert response.headers["x-total-files"] == "3"
    with ZipFile(io.BytesIO(response.content)) as archive:
        assert archive.namelist() == ["chunks_part_1.pdf", "chunks_part_2.pdf", "chunks_part_3.pdf"]


def test_split_empty_policy_is_400(pdf_factory: Callable[..., bytes]) -> None:
    response = client.post(
        "/api/pdf/split",
        files=[_pdf_file("doc.pdf", pdf_factory(2))],
        data={"splitData": json.dumps({"splitType": "pages", "pages": [9]})},
    )

    assert response.status_code == 400
    assert response.json() == {
        "error": "split-policy-empty",
        "details": "No valid pages or ranges specified for splitting.",
        "retryable": False,
    }


def test_invalid_json_is_400(pdf_factory: Callable[..., bytes]) -> None:
    response = client.post(
        "/api/pdf/split",
        files=[_pdf_file("doc.pdf", pdf_factory(2))],
        data={"splitData": "{not json"},
    )
    assert response.status_code == 400
    assert response.json()["error"] == "input-invalid"


def test_merge_reports_headers(pdf_factory: Callable[..., bytes]) -> None:
    response = client.post(
        "/api/pdf/merge",
        files=[
            ("pdfs", ("a.pdf", pdf_factory(2), "application/pdf")),
            ("pdfs", ("b.pdf", pdf_factory(3), "application/pdf")),
            ("pdfs", ("c.pdf", pdf_factory(4), "application/pdf")),
        ],
        data={"mergeData": json.dumps({"outputFileName": "all.pdf", "addBookmarks": True})},
    )

    assert response.status_code == 200
    assert response.headers["x-total-pages"] == "9"
    assert response.headers["x-skipped-pages"] == "0"
    assert response.headers["x-bookmarks-added"] == "3"
    assert "all.pdf" in response.headers["content-disposition"]
    reader = PdfReader(io.BytesIO(response.content))
    assert [item.title for item in reader.outline] == ["a", "b", "c"]


def test_merge_single_file_is_400(pdf_factory: Callable[..., bytes]) -> None:
    response = client.post(
        "/api/pdf/merge",
        files=[("pdfs", ("a.pdf", pdf_factory(1), "application/pdf"))],
    )
    assert response.status_code == 400
    assert response.json()["error"] == "input-invalid"


def test_merge_size_limit_is_413(pdf_factory: Callable[..., bytes]) -> None:
    app.dependency_overrides[get_settings] = lambda: Settings(max_file_size=64)
    try:
        response = client.post(
            "/api/pdf/merge",
            files=[
                ("pdfs", ("a.pdf", pdf_factory(1), "application/pdf")),
                ("pdfs", ("b.pdf", pdf_factory(1), "application/pdf")),
            ],
        )
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 413
    assert response.json()["error"] == "size-exceeded"


def test_merge_preview(pdf_factory: Callable[..., bytes]) -> None:
    response = client.post(
        "/api/pdf/merge/preview",
        files=[
            ("pdfs", ("a.pdf", pdf_factory(2), "application/pdf")),
            ("pdfs", ("b.pdf", pdf_factory(1), "application/pdf")),
        ],
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["fileCount"] == 2
    assert payload["totalPages"] == 3
    assert [entry["pageCount"] for entry in payload["files"]] == [2, 1]


def test_compress_reports_sizes(text_pdf: bytes) -> None:
    response = client.post(
        "/api/pdf/compress",
        files=[_pdf_file("text.pdf", text_pdf)],
        data={"compressionData": json.dumps({"compressionLevel": "high", "removeMetadata": True})},
    )

    assert response.status_code == 200
    assert response.headers["x-original-size"] == str(len(text_pdf))
    assert int(response.headers["x-compressed-size"]) == len(response.content)
    assert float(response.headers["x-compression-ratio"]) > 0
    assert response.headers["x-compression-level"] == "high"
    assert "compressed_text.pdf" in response.headers["content-disposition"]


def test_compress_unknown_level_is_400(text_pdf: bytes) -> None:
    response = client.post(
        "/api/pdf/compress",
        files=[_pdf_file("text.pdf", text_pdf)],
        data={"compressionData": json.dumps({"compressionLevel": "ultra"})},
    )
    assert response.status_code == 400


def test_compress_preview(text_pdf: bytes) -> None:
    response = client.post("/api/pdf/compress/preview", files=[_pdf_file("text.pdf", text_pdf)])

    assert response.status_code == 200
    payload = response.json()
    assert payload["pageCount"] == 4
    assert [level["level"] for level in payload["compressionLevels"]] == [
        "low",
        "medium",
        "high",
        "maximum",
    ]
    assert payload["compressionLevels"][0]["estimatedReduction"].endswith("%")


def test_empty_upload_is_400() -> None:
    response = client.post("/api/pdf/watermark", files=[_pdf_file("empty.pdf", b"")])
    assert response.status_code == 400


def test_non_ascii_upload_name(pdf_factory: Callable[..., bytes]) -> None:
    response = client.post(
        "/api/pdf/watermark",
        files=[_pdf_file("отчёт.pdf", pdf_factory(1))],
    )

    assert response.status_code == 200
    assert response.headers["content-disposition"] == (
        f"attachment; filename*=utf-8''{quote('watermarked_отчёт.pdf')}"
    )


def test_split_file_name_cannot_escape_archive(pdf_factory: Callable[..., bytes]) -> None:
    response = client.post(
        "/api/pdf/split",
        files=[_pdf_file("doc.pdf", pdf_factory(2))],
        data={"splitData": json.dumps({"splitType": "every", "everyNPages": 1, "fileName": "../../etc/evil"})},
    )

    assert response.status_code == 200
    assert response.headers["content-disposition"] == 'attachment; filename="evil_split.zip"'
    with ZipFile(io.BytesIO(response.content)) as archive:
        assert archive.namelist() == ["evil_part_1.pdf", "evil_part_2.pdf"]


def test_merge_combined_size_limit_is_413(pdf_factory: Callable[..., bytes]) -> None:
    first, second = pdf_factory(1), pdf_factory(1)
    app.dependency_overrides[get_settings] = lambda: Settings(
        max_merge_total_size=len(first) + len(second) - 1
    )
    try:
        response = client.post(
            "/api/pdf/merge",
            files=[
                ("pdfs", ("a.pdf", first, "application/pdf")),
                ("pdfs", ("b.pdf", second, "application/pdf")),
            ],
        )
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 413
    assert response.json()["error"] == "size-exceeded"
