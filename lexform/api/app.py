"""FastAPI application for the LexForm document automation API.

Provides endpoints for OCR field extraction, template placeholder
inspection, field merging, document generation from scanned files, and
PDF/DOCX export.
"""

import json
import time
import uuid
from pathlib import Path
from typing import Annotated

from fastapi import FastAPI, File, Form, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response

from lexform import __version__
from lexform.drafting.drafter import DocumentDrafter
from lexform.errors import (
    TemplateNotFoundError,
    TemplateValidationError,
    UnreadableDocumentError,
    UnsupportedFormatError,
)
from lexform.export.exporter import (
    CONTENT_TYPES,
    DocumentExporter,
    content_disposition,
    export_filename,
)
from lexform.ocr.tesseract_engine import tesseract_available
from lexform.templating.library import DocumentTemplate, TemplateLibrary
from lexform.templating.placeholders import extract_placeholders, render
from lexform.utils.config import load_config
from lexform.utils.logger import get_logger

from .schemas import (
    DraftResponse,
    ExportRequest,
    ExtractionResponse,
    FieldMapResponse,
    HealthResponse,
    MergeRequest,
    MergeResponse,
    PlaceholdersRequest,
    PlaceholdersResponse,
    ScannedFileResponse,
    TemplateCreateRequest,
    TemplateResponse,
    TemplatesResponse,
    TemplateUpdateRequest,
    TextExtractionRequest,
)

logger = get_logger(__name__)

app = FastAPI(
    title="LexForm Document Automation API",
    description="Fill legal document templates from scanned identity documents",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

_ALLOWED_CONTENT_TYPES = {
    "image/png",
    "image/jpeg",
    "image/tiff",
    "image/webp",
    "application/pdf",
    "application/octet-stream",
}


def _get_components() -> tuple[DocumentDrafter, DocumentExporter]:
    """Build the drafting pipeline and exporter for a request."""
    config = load_config()
    library = TemplateLibrary(Path(config.templates.templates_path))
    drafter = DocumentDrafter(config, library=library)
    exporter = DocumentExporter(config.export)
    return drafter, exporter


def _check_content_type(file: UploadFile) -> None:
    if file.content_type and file.content_type not in _ALLOWED_CONTENT_TYPES:
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported file type: {file.content_type}",
        )


def _template_response(template: DocumentTemplate) -> TemplateResponse:
    return TemplateResponse(
        name=template.name,
        description=template.description,
        category=template.category,
        language=template.language,
        status=template.status,
        required_documents=template.required_documents,
        content=template.content,
        placeholders=template.placeholders,
    )


@app.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Return service health status."""
    return HealthResponse(
        status="healthy",
        version=__version__,
        tesseract_available=tesseract_available(),
    )


@app.get("/templates", response_model=TemplatesResponse)
async def list_templates() -> TemplatesResponse:
    """List active document templates."""
    drafter, _ = _get_components()
    return TemplatesResponse(
        templates=[_template_response(t) for t in drafter.library.list_templates()]
    )


@app.get("/templates/{name}", response_model=TemplateResponse)
async def get_template(name: str) -> TemplateResponse:
    """Return a single template by name."""
    drafter, _ = _get_components()
    try:
        return _template_response(drafter.library.get(name))
    except TemplateNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@app.post("/templates/placeholders", response_model=PlaceholdersResponse)
async def template_placeholders(request: PlaceholdersRequest) -> PlaceholdersResponse:
    """List the placeholders in an unsaved template body."""
    return PlaceholdersResponse(placeholders=extract_placeholders(request.content))


@app.post("/templates", response_model=TemplateResponse, status_code=201)
async def create_template(request: TemplateCreateRequest) -> TemplateResponse:
    """Add a template to the library and save it."""
    drafter, _ = _get_components()
    try:
        template = drafter.library.add(DocumentTemplate(**request.model_dump()))
    except TemplateValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    drafter.library.save()
    return _template_response(template)


@app.put("/templates/{name}", response_model=TemplateResponse)
async def update_template(
    name: str, request: TemplateUpdateRequest
) -> TemplateResponse:
    """Change a template; its placeholders follow the new content."""
    drafter, _ = _get_components()
    changes = request.model_dump(exclude_none=True)
    try:
        template = drafter.library.update(name, **changes)
    except TemplateNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except TemplateValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    drafter.library.save()
    return _template_response(template)


@app.delete("/templates/{name}")
async def delete_template(name: str) -> dict[str, str]:
    """Remove a template from the library."""
    drafter, _ = _get_components()
    try:
        drafter.library.remove(name)
    except TemplateNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    drafter.library.save()
    return {"message": f"Template '{name}' deleted"}


@app.post("/extract", response_model=ExtractionResponse)
async def extract_document(
    file: Annotated[UploadFile, File(...)],
) -> ExtractionResponse:
    """OCR an uploaded image or PDF and extract its fields.

    Args:
        file: Uploaded document (PNG, JPEG, TIFF, WebP or PDF).

    Returns:
        Recognized text, OCR confidence and the extracted Field Map.
    """
    start_time = time.time()
    _check_content_type(file)

    try:
        drafter, _ = _get_components()
        content = await file.read()
        filename = file.filename or "document"
        scan, fields = drafter.scan(content, filename)

        return ExtractionResponse(
            success=True,
            document_id=str(uuid.uuid4()),
            filename=filename,
            raw_text=scan.text,
            confidence=scan.confidence,
            page_count=scan.page_count,
            fields=fields,
            processing_time_ms=(time.time() - start_time) * 1000,
        )
    except HTTPException:
        raise
    except UnreadableDocumentError as exc:
        logger.warning("Rejected upload: %s", exc)
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except Exception as exc:
        logger.error("Extraction failed: %s", exc)
        raise HTTPException(status_code=500, detail=str(exc)) from exc


@app.post("/extract/text", response_model=FieldMapResponse)
async def extract_text_fields(request: TextExtractionRequest) -> FieldMapResponse:
    """Extract fields from text that was already recognized."""
    drafter, _ = _get_components()
    return FieldMapResponse(
        fields=drafter.extractor.extract(request.text, request.fields)
    )


@app.post("/merge", response_model=MergeResponse)
async def merge_template(request: MergeRequest) -> MergeResponse:
    """Merge a Field Map into a template.

    Unresolved placeholders are returned verbatim in ``content`` and listed
    in ``unresolved``.
    """
    if request.template_name:
        drafter, _ = _get_components()
        try:
            text = drafter.library.get(request.template_name).content
        except TemplateNotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
    elif request.content is not None:
        text = request.content
    else:
        raise HTTPException(
            status_code=400, detail="Either content or template_name is required"
        )

    result = render(text, request.fields)
    return MergeResponse(
        content=result.content,
        resolved=result.resolved,
        unresolved=result.unresolved,
    )


@app.post("/documents/generate", response_model=DraftResponse)
async def generate_document(
    files: Annotated[list[UploadFile], File(...)],
    template: Annotated[str, Form()],
    overrides: Annotated[str | None, Form()] = None,
) -> DraftResponse:
    """Generate a document from scanned files and a template.

    Args:
        files: Uploaded identity documents or court papers.
        template: Name of the template to fill.
        overrides: Optional JSON object of operator-entered field values.

    Returns:
        The drafted document with per-file extraction results.
    """
    start_time = time.time()
    for file in files:
        _check_content_type(file)

    try:
        override_fields = json.loads(overrides) if overrides else None
    except json.JSONDecodeError as exc:
        raise HTTPException(
            status_code=400, detail=f"Invalid overrides JSON: {exc}"
        ) from exc
    if override_fields is not None and not isinstance(override_fields, dict):
        raise HTTPException(status_code=400, detail="Overrides must be a JSON object")

    try:
        drafter, _ = _get_components()
        sources = [(f.filename or "document", await f.read()) for f in files]
        draft = drafter.draft(sources, template, override_fields)
    except TemplateNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except Exception as exc:
        logger.error("Document generation failed: %s", exc)
        raise HTTPException(status_code=500, detail=str(exc)) from exc

    return DraftResponse(
        success=True,
        document_id=str(uuid.uuid4()),
        template_name=draft.template_name,
        generated_document=draft.content,
        extracted_data=draft.fields,
        unresolved=draft.unresolved,
        processed_files=[
            ScannedFileResponse(
                filename=f.filename,
                fields=f.fields,
                confidence=f.confidence,
                page_count=f.page_count,
                extracted_text=f.text,
                error=f.error,
            )
            for f in draft.files
        ],
        processing_time_ms=(time.time() - start_time) * 1000,
    )


@app.post("/documents/export")
async def export_document(request: ExportRequest) -> Response:
    """Download drafted text as a PDF or DOCX file."""
    _, exporter = _get_components()
    fmt = request.format.lower()
    try:
        data = exporter.export(
            request.content, fmt, title=request.title, signature=request.signature
        )
    except UnsupportedFormatError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except Exception as exc:
        logger.error("Export failed: %s", exc)
        raise HTTPException(status_code=500, detail=str(exc)) from exc

    filename = export_filename(request.template_name, request.document_id, fmt)
    return Response(
        content=data,
        media_type=CONTENT_TYPES[fmt],
        headers={"Content-Disposition": content_disposition(filename)},
    )

