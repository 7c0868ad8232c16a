"""
Plum Health Profiler – Risk Factor Extractor
=============================================
Stage 2: Identifies which risk factors from a closed vocabulary are present
in the health text. Degrades to local keyword matching when the generation
service fails or returns a malformed response.
"""

from __future__ import annotations

import logging
from typing import List

from core.errors import ServiceError
from models.extraction.keyword_extractor import local_factor_extraction
from models.generation.json_utils import decode_json
from models.generation.llm_client import DEFAULT_MODEL
from models.schema_definition import RiskFactor

logger = logging.getLogger(__name__)

FACTOR_VOCABULARY = [
    "smoker",
    "high sugar diet",
    "high alcohol consumption",
    "sedentary lifestyle (low exercise)",
    "obesity or overweight",
    "healthy lifestyle",
    "regular exercise",
    "balanced diet",
]

SERVICE_CONFIDENCE = 0.95

# Reported for the step when no factor was found.
EMPTY_EXTRACTION_CONFIDENCE = 0.88

EXTRACTOR_PROMPT = """Analyze the health text below and identify if any of these specific risk factors are present:
{vocabulary}

Text: "{text}"

Instructions:
1. Return ONLY a JSON array of strings (e.g., ["smoker", "high sugar diet"]).
2. Do NOT write any other words.
3. If no factors are found, return []."""


class FactorExtractor:
    """Risk-factor extraction with a keyword safety net."""

    def __init__(self, generator, model: str = DEFAULT_MODEL, temperature: float = 0.0):
        self.generator = generator
        self.model = model
        self.temperature = temperature

    def extract(self, text: str) -> List[dict]:
        """
        Ask the generation service which vocabulary factors apply.

        An empty array is a valid result. Raises ServiceError on failure or
        when the response is not an array of strings.
        """
        logger.info("Factor extractor: sending text to %s", self.model)
        prompt = EXTRACTOR_PROMPT.format(
            vocabulary="\n".join(f"- {name}" for name in FACTOR_VOCABULARY),
            text=text,
        )
        raw_output = self.generator.complete(prompt, self.model, self.temperature)
        logger.debug("Factor extractor raw output: %s", raw_output[:500])

        names = decode_json(raw_output, list, default="[]")
        if not all(isinstance(name, str) for name in names):
            raise ServiceError(f"Expected an array of strings, got: {names!r}"[:200])

        return [
            RiskFactor(factor=name, confidence=SERVICE_CONFIDENCE).model_dump() for name in names
        ]

    def extract_safe(self, text: str) -> List[dict]:
        """Like extract() but falls back to keyword matching on failure."""
        try:
            return self.extract(text)
        except ServiceError as e:
            logger.warning("Factor extractor failed (%s) – using local keyword logic", e)
            return local_factor_extraction(text)


def summarize_extraction(factors: List[dict]) -> dict:
    """Build the Stage 2 step output from an extracted factor list."""
    return {
        "factors": [f["factor"] for f in factors],
        "confidence": factors[0]["confidence"] if factors else EMPTY_EXTRACTION_CONFIDENCE,
    }
