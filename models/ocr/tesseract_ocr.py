"""
Plum Health Profiler – Tesseract OCR Wrapper
=============================================
Extracts health text from an uploaded image (photo of a form, a note,
a screenshot) with Tesseract.

Requires the ``tesseract`` binary on PATH (or ``tesseract_cmd`` in config),
plus ``pytesseract`` and ``Pillow``.
"""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path
from typing import Optional, Union

import pytesseract
from PIL import Image

from core.errors import ExtractionError

logger = logging.getLogger(__name__)


class TesseractOCR:
    """Image-to-text extraction. The source image is always deleted afterwards."""

    def __init__(self, language: str = "eng", tesseract_cmd: Optional[str] = None):
        self.language = language
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd

    def extract(self, image_path: Union[str, Path]) -> str:
        """
        Extract text from the image at ``image_path`` and delete the file.

        Raises ExtractionError if the image cannot be read or OCR fails.
        """
        path = Path(image_path)
        logger.info("OCR: processing image %s", path)
        try:
            with Image.open(path) as img:
                text = pytesseract.image_to_string(img, lang=self.language)
        except (pytesseract.TesseractError, OSError) as e:
            logger.error("OCR failed for %s: %s", path, e)
            raise ExtractionError("Failed to extract text from image.") from e
        finally:
            path.unlink(missing_ok=True)

        return text.strip()

    def extract_from_bytes(self, image_bytes: bytes, filename: str = "upload.png") -> str:
        """Extract text from raw upload bytes (written to a temp file first)."""
        suffix = Path(filename).suffix or ".png"
        with tempfile.NamedTemporaryFile(suffix=suffix, delete=False) as tmp:
            tmp.write(image_bytes)
            tmp_path = tmp.name

        return self.extract(tmp_path)
