"""Drafting pipeline: scanned documents in, filled-in template out.

Each uploaded file is OCR'd and run through the field extractor on its
own. The per-file Field Maps are then combined explicitly, operator
corrections applied on top, and the result merged into the chosen
template. Placeholders nobody supplied a value for stay in the draft.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path

from lexform.extraction.field_extractor import FieldExtractor, FieldMap
from lexform.ocr.scanner import DocumentScanner, ScanResult
from lexform.templating.library import TemplateLibrary
from lexform.templating.placeholders import render
from lexform.utils.config import AppConfig
from lexform.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class ScannedFile:
    """OCR and extraction outcome for one input file."""

    filename: str
    fields: FieldMap = field(default_factory=dict)
    text: str = ""
    confidence: float = 0.0
    page_count: int = 0
    error: str | None = None


@dataclass
class Draft:
    """A template filled in from scanned documents."""

    template_name: str
    content: str
    fields: FieldMap
    unresolved: list[str]
    files: list[ScannedFile]

    @property
    def is_complete(self) -> bool:
        return not self.unresolved


def combine_field_maps(maps: Iterable[Mapping[str, str]]) -> FieldMap:
    """Combine Field Maps from several documents.

    Later maps take precedence for keys present in more than one, so a
    field read from the last uploaded document wins.
    """
    combined: FieldMap = {}
    for fields in maps:
        combined.update(fields)
    return combined


class DocumentDrafter:
    """Runs scan, extract and merge for a set of documents.

    Args:
        config: Application configuration.
        library: Template library. Loaded from the configured path if omitted.
        scanner: OCR scanner. Built from ``config`` if omitted.
    """

    def __init__(
        self,
        config: AppConfig,
        library: TemplateLibrary | None = None,
        scanner: DocumentScanner | None = None,
    ) -> None:
        self.config = config
        self.library = library or TemplateLibrary(Path(config.templates.templates_path))
        self.scanner = scanner or DocumentScanner(config)
        self.extractor = FieldExtractor()

    def scan(
        self, source: Path | bytes, filename: str = "document"
    ) -> tuple[ScanResult, FieldMap]:
        """OCR one document and extract its Field Map."""
        scan = self.scanner.scan(source, filename)
        return scan, self.extractor.extract(scan.text)

    def draft(
        self,
        sources: list[tuple[str, Path | bytes]],
        template_name: str,
        overrides: Mapping[str, str] | None = None,
    ) -> Draft:
        """Fill a template from scanned documents.

        Args:
            sources: ``(filename, path_or_bytes)`` pairs, in upload order.
            template_name: Name of the template in the library.
            overrides: Operator-entered values, applied after extraction.

        Returns:
            The draft, with any unresolved placeholders still in the text.

        Raises:
            TemplateNotFoundError: If the template does not exist.
        """
        template = self.library.get(template_name)

        files: list[ScannedFile] = []
        for filename, source in sources:
            try:
                scan, fields = self.scan(source, filename)
            except Exception as exc:
                logger.error("Processing failed for %s: %s", filename, exc)
                files.append(ScannedFile(filename=filename, error=str(exc)))
                continue
            files.append(
                ScannedFile(
                    filename=filename,
                    fields=fields,
                    text=scan.text,
                    confidence=scan.confidence,
                    page_count=scan.page_count,
                )
            )

        fields = combine_field_maps(f.fields for f in files)
        if overrides:
            fields.update(overrides)

        merged = render(template.content, fields)
        logger.info(
            "Drafted '%s' from %d files: %d placeholders filled, %d unresolved",
            template.name,
            len(files),
            len(merged.resolved),
            len(merged.unresolved),
        )
        return Draft(
            template_name=template.name,
            content=merged.content,
            fields=fields,
            unresolved=merged.unresolved,
            files=files,
        )
