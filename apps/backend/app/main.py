"""FastAPI application exposing the pdfforge transformations over HTTP."""

from __future__ import annotations

import io
import json
from json import JSONDecodeError
from typing import List
from urllib.parse import quote
from zipfile import ZIP_DEFLATED, ZipFile

from fastapi import Depends, FastAPI, File, Form, Request, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.openapi.docs import get_swagger_ui_html
from fastapi.responses import HTMLResponse, JSONResponse, Response

from pdfforge import (
    AnnotationConfig,
    CompressionLevel,
    MergeInput,
    Settings,
    SplitPolicy,
    WatermarkConfig,
    add_header_footer,
    add_watermark,
    compress_document,
    estimate_compression,
    merge_documents,
    preview_merge,
    split_document,
)
from pdfforge.annotate import TEMPLATE_CATALOGUE, WatermarkPosition, watermark_options
from pdfforge.config import MEGABYTE
from pdfforge.exceptions import InputInvalidError, PdfForgeError, ResourceExceededError
from pdfforge.split.planner import normalise_base_name
from pdfforge.utils import ensure_pdf_suffix, format_file_size, get_logger, safe_filename

LOGGER = get_logger("pdfforge.api")

app = FastAPI(title="pdfforge API", version="1.0.0")
DOCS_PREFIX = "/api"
PDF_PREFIX = "/api/pdf"

STATUS_BY_CLASSIFICATION = {
    "input-invalid": 400,
    "split-policy-empty": 400,
    "size-exceeded": 413,
    "processing-timeout": 504,
    "structural-validation-failed": 500,
}


def get_settings() -> Settings:
    """Read limits from the environment for the current request."""

    return Settings.from_env()


@app.exception_handler(PdfForgeError)
async def pdfforge_error_handler(request: Request, exc: PdfForgeError) -> JSONResponse:
    status_code = STATUS_BY_CLASSIFICATION.get(exc.classification, 500)
    log = LOGGER.error if status_code >= 500 else LOGGER.warning
    log("%s %s failed: %s (%s)", request.method, request.url.path, exc.classification, exc.detail)
    return JSONResponse(
        status_code=status_code,
        content={
            "error": exc.classification,
            "details": exc.detail,
            "retryable": exc.retryable,
        },
    )


def _parse_json_mapping(raw_value: str | None, *, field_name: str) -> dict[str, object]:
    """Parse an optional JSON encoded mapping from a multipart form field."""

    if raw_value is None or not raw_value.strip():
        return {}

    try:
        payload = json.loads(raw_value)
    except JSONDecodeError as exc:
        raise InputInvalidError(f"{field_name} must be valid JSON.") from exc

    if payload is None:
        return {}

    if not isinstance(payload, dict):
        raise InputInvalidError(f"{field_name} must be a JSON object.")

    return payload


async def _read_upload(upload: UploadFile, limit: int) -> bytes:
    contents = await upload.read()
    if not contents:
        raise InputInvalidError(f"File '{upload.filename}' is empty.")
    if len(contents) > limit:
        raise ResourceExceededError(
            f"File '{upload.filename}' is {format_file_size(len(contents))}, "
            f"over the {format_file_size(limit)} limit."
        )
    return contents


def _content_disposition(filename: str) -> str:
    # RFC 5987 form whenever quoting changes the name, as FileResponse does.
    quoted = quote(filename)
    if quoted != filename:
        return f"attachment; filename*=utf-8''{quoted}"
    return f'attachment; filename="{filename}"'


def _pdf_response(data: bytes, filename: str, headers: dict[str, str] | None = None) -> Response:
    response_headers = {"Content-Disposition": _content_disposition(filename)}
    if headers:
        response_headers.update(headers)
    return Response(content=data, media_type="application/pdf", headers=response_headers)


def _zip_outputs(files: list[tuple[str, bytes]]) -> bytes:
    """Pack ``(name, data)`` pairs into an in-memory zip archive."""

    buffer = io.BytesIO()
    with ZipFile(buffer, "w", ZIP_DEFLATED) as archive:
        for name, data in files:
            archive.writestr(name, data)
    return buffer.getvalue()


def _as_bool(value: object) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


@app.get("/health", response_class=JSONResponse)
@app.get(f"{PDF_PREFIX}/health", response_class=JSONResponse)
async def health() -> dict[str, str]:
    """Lightweight health endpoint for uptime checks."""
    return {"status": "ok", "service": "pdfforge"}


@app.get(
    f"{DOCS_PREFIX}/openapi.json",
    include_in_schema=False,
    name="prefixed_openapi",
)
async def prefixed_openapi() -> JSONResponse:
    """Expose the OpenAPI schema under the gateway's ``/api`` prefix."""

    return JSONResponse(app.openapi())


@app.get(f"{DOCS_PREFIX}/docs", include_in_schema=False)
async def prefixed_swagger_ui(request: Request) -> HTMLResponse:
    """Serve Swagger UI from the same ``/api`` prefix used by the gateway."""

    return get_swagger_ui_html(
        openapi_url=str(request.url_for("prefixed_openapi")),
        title=f"{app.title} - Swagger UI",
    )


@app.get(f"{PDF_PREFIX}/templates", response_class=JSONResponse)
async def templates() -> dict[str, object]:
    """List header/footer placeholders and watermark positions."""

    return {
        "templates": [dict(entry) for entry in TEMPLATE_CATALOGUE],
        "watermarkPositions": [position.value for position in WatermarkPosition],
    }


@app.get(f"{PDF_PREFIX}/watermark/options", response_class=JSONResponse)
async def get_watermark_options() -> dict[str, object]:
    return watermark_options()


@app.post(f"{PDF_PREFIX}/process", response_class=Response)
async def process_header_footer(
    pdf: UploadFile = File(..., description="PDF to annotate"),
    header_footer_data: str | None = Form(
        None,
        alias="headerFooterData",
        description="JSON encoded header/footer configuration.",
    ),
    settings: Settings = Depends(get_settings),
) -> Response:
    """Stamp header and footer text on every page from ``startPage`` on."""

    data = await _read_upload(pdf, settings.max_file_size)
    config = AnnotationConfig.from_mapping(
        _parse_json_mapping(header_footer_data, field_name="headerFooterData"),
        clamp=settings.clamp_out_of_range,
    )
    output = await run_in_threadpool(add_header_footer, data, config)
    filename = f"processed_{ensure_pdf_suffix(safe_filename(pdf.filename, 'document.pdf'))}"
    return _pdf_response(output, filename)


@app.post(f"{PDF_PREFIX}/watermark", response_class=Response)
async def watermark(
    pdf: UploadFile = File(..., description="PDF to watermark"),
    watermark_data: str | None = Form(
        None,
        alias="watermarkData",
        description="JSON encoded watermark configuration.",
    ),
    settings: Settings = Depends(get_settings),
) -> Response:
    data = await _read_upload(pdf, settings.max_file_size)
    config = WatermarkConfig.from_mapping(
        _parse_json_mapping(watermark_data, field_name="watermarkData"),
        clamp=settings.clamp_out_of_range,
    )
    output = await run_in_threadpool(add_watermark, data, config)
    filename = f"watermarked_{ensure_pdf_suffix(safe_filename(pdf.filename, 'document.pdf'))}"
    return _pdf_response(output, filename)


@app.post(f"{PDF_PREFIX}/split", response_class=Response)
async def split(
    pdf: UploadFile = File(..., description="PDF to split"),
    split_data: str | None = Form(
        None,
        alias="splitData",
        description="JSON encoded split policy (splitType, pages, ranges, everyNPages, fileName).",
    ),
    settings: Settings = Depends(get_settings),
) -> Response:
    """Split a PDF; a single group is returned as PDF, several as a zip archive."""

    data = await _read_upload(pdf, settings.max_file_size)
    payload = _parse_json_mapping(split_data, field_name="splitData")
    policy = SplitPolicy.from_mapping(payload)
    base_name = normalise_base_name(
        str(payload.get("fileName") or "") or safe_filename(pdf.filename, "document")
    )

    outputs = await run_in_threadpool(split_document, data, policy, base_name=base_name)

    headers = {"X-Total-Files": str(len(outputs))}
    if len(outputs) == 1:
        return _pdf_response(outputs[0].data, outputs[0].filename, headers)

    archive = _zip_outputs([(item.filename, item.data) for item in outputs])
    headers["Content-Disposition"] = _content_disposition(f"{base_name}_split.zip")
    return Response(content=archive, media_type="application/zip", headers=headers)


async def _read_merge_uploads(pdfs: List[UploadFile], settings: Settings) -> list[MergeInput]:
    if len(pdfs) > settings.max_merge_files:
        raise InputInvalidError(
            f"Too many files: at most {settings.max_merge_files} can be merged at once."
        )
    inputs: list[MergeInput] = []
    total = 0
    for index, upload in enumerate(pdfs, start=1):
        contents = await _read_upload(upload, settings.max_file_size)
        total += len(contents)
        if total > settings.max_merge_total_size:
            raise ResourceExceededError(
                f"Combined upload size exceeds the "
                f"{format_file_size(settings.max_merge_total_size)} merge limit."
            )
        name = normalise_base_name(safe_filename(upload.filename, f"document_{index}.pdf"))
        inputs.append(MergeInput(contents, name))
    return inputs


@app.post(f"{PDF_PREFIX}/merge", response_class=Response)
async def merge(
    pdfs: List[UploadFile] = File(..., description="PDF files to merge, in order"),
    merge_data: str | None = Form(
        None,
        alias="mergeData",
        description="JSON encoded merge options (outputFileName, addBookmarks).",
    ),
    settings: Settings = Depends(get_settings),
) -> Response:
    """Merge uploads in order; skipped pages are reported in ``X-Skipped-Pages``."""

    inputs = await _read_merge_uploads(pdfs, settings)
    options = _parse_json_mapping(merge_data, field_name="mergeData")

    result = await run_in_threadpool(
        merge_documents,
        inputs,
        output_filename=str(options.get("outputFileName") or "merged.pdf"),
        add_bookmarks=_as_bool(options.get("addBookmarks", False)),
        settings=settings,
    )

    headers = {
        "X-Total-Pages": str(result.total_pages),
        "X-Skipped-Pages": str(len(result.skipped_pages)),
        "X-Bookmarks-Added": str(result.bookmarks_added),
    }
    return _pdf_response(result.data, result.filename, headers)


@app.post(f"{PDF_PREFIX}/merge/preview", response_class=JSONResponse)
async def merge_preview(
    pdfs: List[UploadFile] = File(..., description="PDF files to inspect"),
    settings: Settings = Depends(get_settings),
) -> dict[str, object]:
    inputs = await _read_merge_uploads(pdfs, settings)
    preview = await run_in_threadpool(preview_merge, inputs, settings=settings)
    return {
        "fileCount": preview.file_count,
        "totalPages": preview.total_pages,
        "totalSize": preview.total_size,
        "estimatedOutputSize": preview.estimated_output_size,
        "files": [
            {"name": summary.name, "pageCount": summary.page_count, "size": summary.size}
            for summary in preview.files
        ],
    }


@app.post(f"{PDF_PREFIX}/compress", response_class=Response)
async def compress(
    pdf: UploadFile = File(..., description="PDF to compress"),
    compression_data: str | None = Form(
        None,
        alias="compressionData",
        description="JSON encoded options (compressionLevel, removeMetadata, targetSizeKB, outputFileName).",
    ),
    settings: Settings = Depends(get_settings),
) -> Response:
    """Compress a PDF and report the sizes in response headers."""

    data = await _read_upload(pdf, settings.max_compress_file_size)
    options = _parse_json_mapping(compression_data, field_name="compressionData")

    target = options.get("targetSizeKB")
    try:
        target_size_kb = float(target) if target not in (None, "") else None
    except (TypeError, ValueError) as exc:
        raise InputInvalidError("targetSizeKB must be a number.") from exc

    result = await run_in_threadpool(
        compress_document,
        data,
        CompressionLevel.parse(options.get("compressionLevel") or CompressionLevel.MEDIUM.value),
        remove_metadata=_as_bool(options.get("removeMetadata", False)),
        target_size_kb=target_size_kb,
        settings=settings,
    )

    default_name = f"compressed_{ensure_pdf_suffix(safe_filename(pdf.filename, 'document.pdf'))}"
    filename = ensure_pdf_suffix(safe_filename(str(options.get("outputFileName") or ""), default_name))
    headers = {
        "X-Original-Size": str(result.original_size),
        "X-Compressed-Size": str(result.compressed_size),
        "X-Compression-Ratio": f"{result.reduction_percent:.2f}",
        "X-Compression-Level": result.applied_level,
    }
    if result.target_met is not None:
        headers["X-Target-Met"] = "true" if result.target_met else "false"
    return _pdf_response(result.data, filename, headers)


@app.post(f"{PDF_PREFIX}/compress/preview", response_class=JSONResponse)
async def compress_preview(
    pdf: UploadFile = File(..., description="PDF to inspect"),
    settings: Settings = Depends(get_settings),
) -> dict[str, object]:
    data = await _read_upload(pdf, settings.max_compress_file_size)
    estimate = await run_in_threadpool(estimate_compression, data)
    return {
        "originalSize": estimate.original_size,
        "originalSizeMB": round(estimate.original_size / MEGABYTE, 2),
        "pageCount": estimate.page_count,
        "compressionLevels": [
            {
                "level": tier.level,
                "estimatedReduction": f"{tier.min_reduction:.0f}-{tier.max_reduction:.0f}%",
                "estimatedReductionPercent": tier.estimated_reduction,
                "estimatedSize": tier.estimated_size,
                "description": tier.description,
            }
            for tier in estimate.tiers
        ],
    }


__all__ = ["app", "get_settings"]
