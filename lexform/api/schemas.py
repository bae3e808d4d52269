"""Pydantic request/response schemas for the FastAPI endpoints."""

from typing import Literal

from pydantic import BaseModel, Field

TemplateStatus = Literal["active", "inactive"]


class HealthResponse(BaseModel):
    status: str
    version: str
    tesseract_available: bool


class TemplateResponse(BaseModel):
    """A document template with its derived placeholders."""

    name: str
    description: str
    category: str
    language: str
    status: str
    required_documents: list[str]
    content: str
    placeholders: list[str]


class TemplatesResponse(BaseModel):
    templates: list[TemplateResponse]


class PlaceholdersRequest(BaseModel):
    content: str


class PlaceholdersResponse(BaseModel):
    placeholders: list[str]


class TextExtractionRequest(BaseModel):
    text: str
    fields: list[str] | None = None


class FieldMapResponse(BaseModel):
    """Extracted fields; a missing key means the field was not found."""

    fields: dict[str, str]


class ExtractionResponse(BaseModel):
    """OCR text and extracted fields for one uploaded file."""

    success: bool
    document_id: str
    filename: str
    raw_text: str
    confidence: float
    page_count: int
    fields: dict[str, str]
    processing_time_ms: float


class MergeRequest(BaseModel):
    """Either raw template ``content`` or a library ``template_name``."""

    content: str | None = None
    template_name: str | None = None
    fields: dict[str, str] = Field(default_factory=dict)


class MergeResponse(BaseModel):
    content: str
    resolved: list[str]
    unresolved: list[str]


class ScannedFileResponse(BaseModel):
    filename: str
    fields: dict[str, str]
    confidence: float
    page_count: int
    extracted_text: str
    error: str | None = None


class DraftResponse(BaseModel):
    """Result of generating a document from scanned files."""

    success: bool
    document_id: str
    template_name: str
    generated_document: str
    extracted_data: dict[str, str]
    unresolved: list[str]
    processed_files: list[ScannedFileResponse]
    processing_time_ms: float


class ExportRequest(BaseModel):
    content: str
    format: str = "pdf"
    title: str = "Document"
    template_name: str = ""
    document_id: str = ""
    signature: str | None = None


class TemplateCreateRequest(BaseModel):
    name: str
    category: str
    content: str
    description: str = ""
    language: str = "english"
    required_documents: list[str] = Field(default_factory=list)
    status: TemplateStatus = "active"


class TemplateUpdateRequest(BaseModel):
    """Attributes to change; omitted ones keep their current value."""

    category: str | None = None
    content: str | None = None
    description: str | None = None
    language: str | None = None
    required_documents: list[str] | None = None
    status: TemplateStatus | None = None
