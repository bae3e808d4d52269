"""Tesseract OCR wrapper returning text with an overall confidence."""

from dataclasses import dataclass

import numpy as np
import pytesseract
from PIL import Image

from lexform.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class OCRResult:
    """Recognized text for one page image."""

    text: str
    confidence: float
    language: str
    word_count: int = 0


def tesseract_available() -> bool:
    """Whether a Tesseract binary can be found and run."""
    try:
        pytesseract.get_tesseract_version()
    except (pytesseract.TesseractNotFoundError, OSError):
        return False
    return True


def _word_confidences(data: dict[str, list]) -> list[float]:
    # Tesseract reports -1 for layout rows that carry no word.
    return [
        float(conf)
        for conf, word in zip(data["conf"], data["text"])
        if float(conf) > 0 and str(word).strip()
    ]


class TesseractEngine:
    """Runs Tesseract on page images.

    Args:
        tesseract_cmd: Path to the Tesseract executable. If ``None``, the
            one on ``PATH`` is used.
        default_lang: Language code used when none is given per call.
    """

    def __init__(self, tesseract_cmd: str | None = None, default_lang: str = "eng"):
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd
        self.default_lang = default_lang

    def extract_text(
        self, image: np.ndarray, lang: str | None = None, psm: int = 3
    ) -> OCRResult:
        """Recognize the text in an image.

        Args:
            image: Page image as a numpy array.
            lang: Tesseract language code, e.g. ``"eng+hin"``.
            psm: Page segmentation mode passed as ``--psm``.

        Returns:
            OCRResult whose confidence is the mean word confidence in 0-1.

        Raises:
            RuntimeError: If Tesseract is missing or fails on the image.
        """
        language = lang or self.default_lang
        options = {"lang": language, "config": f"--psm {psm}"}
        page = Image.fromarray(image)

        try:
            text = pytesseract.image_to_string(page, **options)
            data = pytesseract.image_to_data(
                page, output_type=pytesseract.Output.DICT, **options
            )
        except (pytesseract.TesseractError, pytesseract.TesseractNotFoundError) as exc:
            raise RuntimeError(f"OCR failed: {exc}") from exc
        words = _word_confidences(data)
        confidence = sum(words) / len(words) / 100.0 if words else 0.0

        logger.info(
            "OCR (%s) read %d words, mean confidence %.2f",
            language,
            len(words),
            confidence,
        )
        return OCRResult(
            text=text, confidence=confidence, language=language, word_count=len(words)
        )
