"""Turns an uploaded image or PDF into recognized text.

Combines PDF rasterization, image preprocessing and Tesseract into one
call. The scanner only produces text; field extraction happens later.
"""

import io
from dataclasses import dataclass
from pathlib import Path

import numpy as np
from PIL import Image, UnidentifiedImageError

from lexform.errors import UnreadableDocumentError
from lexform.utils.config import AppConfig
from lexform.utils.logger import get_logger

from .pdf_handler import PDFHandler, is_pdf
from .preprocess import ImagePreprocessor
from .tesseract_engine import OCRResult, TesseractEngine

logger = get_logger(__name__)

PAGE_BREAK = "\n\n--- Page Break ---\n\n"


@dataclass
class PageScan:
    """OCR output for one page."""

    page_number: int
    ocr_result: OCRResult


@dataclass
class ScanResult:
    """OCR output for a whole file."""

    source_file: str
    pages: list[PageScan]

    @property
    def page_count(self) -> int:
        return len(self.pages)

    @property
    def text(self) -> str:
        return PAGE_BREAK.join(p.ocr_result.text for p in self.pages)

    @property
    def confidence(self) -> float:
        if not self.pages:
            return 0.0
        return sum(p.ocr_result.confidence for p in self.pages) / len(self.pages)


class DocumentScanner:
    """Loads, cleans up and OCRs documents.

    Args:
        config: Application configuration.
    """

    def __init__(self, config: AppConfig) -> None:
        self.config = config
        self.pdf_handler = PDFHandler(dpi=config.ocr.pdf_dpi)
        self.preprocessor = ImagePreprocessor(config.preprocessing)
        self.ocr_engine = TesseractEngine(
            tesseract_cmd=config.ocr.tesseract_cmd,
            default_lang=config.ocr.default_lang,
        )

    def scan(
        self,
        source: Path | bytes,
        filename: str = "document",
        lang: str | None = None,
    ) -> ScanResult:
        """OCR every page of a document.

        Args:
            source: Path to an image/PDF, or its raw bytes.
            filename: Name used in logs and results.
            lang: Tesseract language override.

        Returns:
            ScanResult with one entry per page.

        Raises:
            UnreadableDocumentError: If an image upload cannot be decoded.
            RuntimeError: If PDF rendering or Tesseract fails.
        """
        logger.info("Scanning document: %s", filename)
        pages: list[PageScan] = []
        for i, image in enumerate(self._load_images(source, filename), start=1):
            cleaned = self.preprocessor.process(image)
            ocr_result = self.ocr_engine.extract_text(
                cleaned, lang=lang, psm=self.config.ocr.psm
            )
            pages.append(PageScan(page_number=i, ocr_result=ocr_result))

        logger.info("Scanned %d pages from %s", len(pages), filename)
        return ScanResult(source_file=filename, pages=pages)

    def _load_images(self, source: Path | bytes, filename: str) -> list[np.ndarray]:
        if is_pdf(source):
            return self.pdf_handler.pdf_to_images(source)

        if not isinstance(source, bytes) and not Path(source).is_file():
            raise FileNotFoundError(f"Image file not found: {source}")
        try:
            stream = io.BytesIO(source) if isinstance(source, bytes) else source
            img = Image.open(stream)
            return [np.array(img.convert("RGB"))]
        except (UnidentifiedImageError, OSError) as exc:
            raise UnreadableDocumentError(filename, str(exc)) from exc
