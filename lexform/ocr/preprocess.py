"""Image cleanup for scanned identity documents before OCR.

Phone photos of Aadhaar and PAN cards are often noisy and unevenly lit;
converting to grayscale, denoising and binarizing gives Tesseract a
cleaner page to read.
"""

import cv2
import numpy as np

from lexform.utils.config import PreprocessingConfig
from lexform.utils.logger import get_logger

logger = get_logger(__name__)


def to_gray(image: np.ndarray) -> np.ndarray:
    """Convert an RGB/RGBA image to grayscale; grayscale input is returned as is."""
    if image.ndim == 2:
        return image
    if image.shape[2] == 4:
        return cv2.cvtColor(image, cv2.COLOR_RGBA2GRAY)
    return cv2.cvtColor(image, cv2.COLOR_RGB2GRAY)


def binarize(image: np.ndarray, method: str = "otsu") -> np.ndarray:
    """Threshold a grayscale image to black and white.

    Args:
        image: Grayscale image.
        method: ``"otsu"`` for a global threshold, anything else for
            adaptive Gaussian thresholding.

    Returns:
        Binary image with values 0 or 255.
    """
    if method == "otsu":
        _, binary = cv2.threshold(image, 0, 255, cv2.THRESH_BINARY + cv2.THRESH_OTSU)
        return binary
    return cv2.adaptiveThreshold(
        image, 255, cv2.ADAPTIVE_THRESH_GAUSSIAN_C, cv2.THRESH_BINARY, 11, 2
    )


class ImagePreprocessor:
    """Applies the configured cleanup steps to a page image.

    Args:
        config: Preprocessing configuration.
    """

    def __init__(self, config: PreprocessingConfig) -> None:
        self.config = config

    def process(self, image: np.ndarray) -> np.ndarray:
        if not self.config.enabled:
            return image

        result = to_gray(image)
        if self.config.denoise_enabled:
            result = cv2.fastNlMeansDenoising(result, h=self.config.denoise_strength)
        if self.config.binarize_enabled:
            result = binarize(result, self.config.binarize_method)

        logger.debug(
            "Preprocessed %dx%d image (denoise=%s, binarize=%s)",
            result.shape[1],
            result.shape[0],
            self.config.denoise_enabled,
            self.config.binarize_method if self.config.binarize_enabled else "off",
        )
        return result
