"""
Plum Health Profiler – Router
==============================
Top-level entrypoint: resolves the request's input source (uploaded image
or inline text) and dispatches to the matching pipeline.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional, Union

import yaml

from core.errors import ClientInputError
from core.logging_utils import log_pipeline_event, new_run_id
from models.generation.llm_client import DEFAULT_MODEL, create_generator
from models.ocr.tesseract_ocr import TesseractOCR
from pipelines.image_pipeline import ImagePipeline
from pipelines.text_pipeline import PipelineState, TextPipeline

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[1] / "configs" / "model_config.yaml"


class HealthProfileRouter:
    """One-call entrypoint for the health profiler."""

    def __init__(
        self,
        config_path: Optional[str] = None,
        generator=None,
        ocr: Optional[TesseractOCR] = None,
    ):
        cfg_path = Path(config_path) if config_path else _DEFAULT_CONFIG_PATH

        self.config: dict = {}
        if cfg_path.exists():
            with open(cfg_path) as f:
                self.config = yaml.safe_load(f) or {}

        self.generation_config = self._build_generation_config()
        self.ocr_config = self._build_ocr_config()

        # One generator shared by all stages; read-only after construction
        self.generator = generator or create_generator(self.generation_config)
        logger.info(
            "Generation backend: %s (model=%s)",
            self.generation_config["backend"],
            self.generation_config["model"],
        )

        self.text_pipeline = TextPipeline(
            generator=self.generator,
            generation_config=self.generation_config,
        )
        self.image_pipeline = ImagePipeline(
            ocr=ocr or TesseractOCR(**self.ocr_config),
            text_pipeline=self.text_pipeline,
        )

    def _build_generation_config(self) -> dict:
        g = self.config.get("generation", {})
        params = g.get("parameters", {})
        temps = g.get("temperatures", {})
        return {
            "backend": g.get("backend", "groq"),
            "model": os.environ.get("AI_MODEL") or g.get("model", DEFAULT_MODEL),
            # hf_endpoint
            "endpoint_url": g.get("endpoint_url"),
            # ollama
            "ollama_base_url": g.get("ollama_base_url"),
            "max_new_tokens": params.get("max_new_tokens", 512),
            "timeout": g.get("timeout", 60),
            "temperatures": {
                "parsing": temps.get("parsing", 0.0),
                "extraction": temps.get("extraction", 0.0),
                "recommendation": temps.get("recommendation", 0.6),
            },
        }

    def _build_ocr_config(self) -> dict:
        o = self.config.get("ocr", {})
        return {
            "language": o.get("language", "eng"),
            "tesseract_cmd": o.get("tesseract_cmd"),
        }

    # ── Public API ──────────────────────────────────────────────────────

    def profile(
        self,
        text: Optional[str] = None,
        image: Union[str, Path, bytes, None] = None,
        filename: str = "upload.png",
    ) -> dict:
        """
        Run the health profiling pipeline.

        Parameters
        ----------
        text : str, optional
            Inline health text, used verbatim.
        image : str, Path or bytes, optional
            Uploaded image (path or raw bytes). Takes precedence over ``text``.
        filename : str
            Original upload name, used for the temp file suffix.

        Returns
        -------
        dict – the response body for the terminal state reached.

        Raises
        ------
        ClientInputError
            Neither text nor image was provided.
        ExtractionError
            OCR failed on the uploaded image.
        """
        run_id = new_run_id()
        log_pipeline_event(logger, run_id, PipelineState.START.value)

        if image is not None:
            logger.info("Routing to image pipeline")
            return self.image_pipeline.run(image, filename=filename, run_id=run_id)

        if text is not None:
            logger.info("Routing to text pipeline")
            return self.text_pipeline.run(text, run_id=run_id)

        log_pipeline_event(logger, run_id, PipelineState.REJECTED_NO_INPUT.value)
        raise ClientInputError("No text or image provided.")
