"""Rasterizes PDF uploads so their pages can be OCR'd."""

from pathlib import Path

import numpy as np
from pdf2image import convert_from_bytes, convert_from_path
from PIL import Image

from lexform.utils.logger import get_logger

logger = get_logger(__name__)

PDF_MAGIC = b"%PDF"


def is_pdf(source: Path | bytes) -> bool:
    """Tell PDFs apart from images by magic bytes or file suffix."""
    if isinstance(source, bytes):
        return source[:4] == PDF_MAGIC
    return Path(source).suffix.lower() == ".pdf"


class PDFHandler:
    """Converts PDF documents to page images.

    Args:
        dpi: Rendering resolution. Scanned ID cards need at least 300 to
            keep Aadhaar digits legible.
    """

    def __init__(self, dpi: int = 300) -> None:
        self.dpi = dpi

    def _render(self, pdf_source: Path | bytes) -> list[Image.Image]:
        if isinstance(pdf_source, bytes):
            return convert_from_bytes(pdf_source, dpi=self.dpi)
        return convert_from_path(str(pdf_source), dpi=self.dpi)

    def pdf_to_images(self, pdf_source: Path | bytes) -> list[np.ndarray]:
        """Render every page of a PDF as an RGB array.

        Raises:
            FileNotFoundError: If a path is given and the file does not exist.
            RuntimeError: If poppler cannot render the document.
        """
        if not isinstance(pdf_source, bytes):
            pdf_source = Path(pdf_source)
            if not pdf_source.is_file():
                raise FileNotFoundError(f"PDF file not found: {pdf_source}")

        try:
            pages = self._render(pdf_source)
        except Exception as exc:
            raise RuntimeError(f"PDF conversion failed: {exc}") from exc

        logger.info("Rendered %d PDF pages at %d DPI", len(pages), self.dpi)
        return [np.array(page.convert("RGB")) for page in pages]
