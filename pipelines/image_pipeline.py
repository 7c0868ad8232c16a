"""
Plum Health Profiler – Image Pipeline
======================================
Full pipeline: Image → OCR → Text pipeline
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

from models.ocr.tesseract_ocr import TesseractOCR
from pipelines.text_pipeline import TextPipeline

logger = logging.getLogger(__name__)


class ImagePipeline:
    """End-to-end image → health profile pipeline.

    OCR failures are not recovered: ExtractionError propagates to the caller.
    """

    def __init__(
        self,
        ocr: Optional[TesseractOCR] = None,
        text_pipeline: Optional[TextPipeline] = None,
        **kwargs,
    ):
        self.ocr = ocr or TesseractOCR(**kwargs.get("ocr_config", {}))
        self.text_pipeline = text_pipeline or TextPipeline(**kwargs)

    def run(
        self,
        image: Union[str, Path, bytes],
        filename: str = "upload.png",
        run_id: Optional[str] = None,
    ) -> dict:
        """Run OCR on a file path or raw upload bytes, then the text pipeline."""
        if isinstance(image, bytes):
            logger.info("Image pipeline: extracting text from upload %s", filename)
            text = self.ocr.extract_from_bytes(image, filename=filename)
        else:
            logger.info("Image pipeline: extracting text from %s", image)
            text = self.ocr.extract(image)

        return self.text_pipeline.run(text, run_id=run_id)
