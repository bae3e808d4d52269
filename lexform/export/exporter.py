"""Renders drafted document text to PDF or DOCX."""

import io
import re
from urllib.parse import quote
from xml.sax.saxutils import escape

from docx import Document
from docx.shared import Pt
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer

from lexform.errors import UnsupportedFormatError
from lexform.utils.config import ExportConfig
from lexform.utils.logger import get_logger

logger = get_logger(__name__)

SIGNATURE_MARK = "[Digital Signature Applied]"

CONTENT_TYPES = {
    "pdf": "application/pdf",
    "docx": (
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
    ),
}

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def export_filename(template_name: str, document_id: str, fmt: str) -> str:
    """Build the download name, e.g. ``affidavit_1234.pdf``."""
    base = "_".join(part for part in (template_name, document_id) if part)
    return f"{base or 'document'}.{fmt}"


def content_disposition(filename: str) -> str:
    """Build an attachment header that is safe for any filename.

    Header values must be Latin-1, so the plain ``filename`` carries an
    ASCII-only fallback and ``filename*`` carries the UTF-8 name.
    """
    stem, _, ext = filename.rpartition(".")
    if not stem:
        stem, ext = filename, ""
    fallback = _UNSAFE_FILENAME_CHARS.sub("_", stem).strip("_") or "document"
    if ext:
        fallback = f"{fallback}.{_UNSAFE_FILENAME_CHARS.sub('_', ext)}"
    encoded = quote(filename, safe="")
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{encoded}"


class DocumentExporter:
    """Writes document text out line by line, one paragraph per line.

    Args:
        config: Export settings.
    """

    def __init__(self, config: ExportConfig | None = None) -> None:
        self.config = config or ExportConfig()

    def export(
        self,
        content: str,
        fmt: str,
        title: str = "Document",
        signature: str | None = None,
    ) -> bytes:
        """Render ``content`` in the requested format.

        Raises:
            UnsupportedFormatError: If ``fmt`` is not ``pdf`` or ``docx``.
        """
        fmt = fmt.lower()
        if fmt == "pdf":
            return self.to_pdf(content, title=title, signature=signature)
        if fmt == "docx":
            return self.to_docx(content, signature=signature)
        raise UnsupportedFormatError(fmt)

    def to_pdf(
        self, content: str, title: str = "Document", signature: str | None = None
    ) -> bytes:
        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            leftMargin=20 * mm,
            rightMargin=20 * mm,
            topMargin=20 * mm,
            bottomMargin=20 * mm,
            title=title,
        )
        body = ParagraphStyle(
            "LexFormBody",
            parent=getSampleStyleSheet()["Normal"],
            fontSize=self.config.font_size,
            leading=self.config.font_size + self.config.line_gap,
        )

        story: list = []
        for line in content.split("\n"):
            if line.strip():
                story.append(Paragraph(escape(line), body))
            else:
                story.append(Spacer(1, body.leading))

        if signature:
            story.append(Spacer(1, body.leading * 2))
            label = escape(self.config.signature_label)
            story.append(Paragraph(f"<u>{label}</u>", body))
            story.append(Paragraph(escape(SIGNATURE_MARK), body))

        doc.build(story)
        data = buffer.getvalue()
        logger.info("Rendered PDF '%s' (%d bytes)", title, len(data))
        return data

    def to_docx(self, content: str, signature: str | None = None) -> bytes:
        doc = Document()
        doc.styles["Normal"].font.size = Pt(self.config.font_size)

        for line in content.split("\n"):
            doc.add_paragraph(line)

        if signature:
            doc.add_paragraph()
            label = doc.add_paragraph().add_run(self.config.signature_label)
            label.underline = True
            doc.add_paragraph(SIGNATURE_MARK)

        buffer = io.BytesIO()
        doc.save(buffer)
        data = buffer.getvalue()
        logger.info("Rendered DOCX (%d bytes)", len(data))
        return data
