"""
Plum Health Profiler – Form Parser
===================================
Stage 1: Turns free health text into structured questionnaire answers
(age, smoker, exercise, diet) using the text-generation service.

Any service failure or malformed response yields an empty answer set;
the pipeline always has a Stage 1 output to evaluate its guardrail on.
"""

from __future__ import annotations

import logging
from typing import List

from core.errors import ServiceError
from core.validation import validate_structured_answers
from models.generation.json_utils import decode_json
from models.generation.llm_client import DEFAULT_MODEL

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ["age", "smoker", "exercise", "diet"]

# Fixed parsing confidence; not derived from field completeness.
PARSING_CONFIDENCE = 0.92

PARSER_PROMPT = """Extract key health fields from the text below into a JSON object.
Fields to look for: "age" (number), "smoker" (boolean), "exercise" (string), "diet" (string).

Text: "{text}"

Return ONLY JSON. Example: {{"age": 40, "smoker": false}}
If a field is missing, do not include it."""


def find_missing_fields(answers: dict) -> List[str]:
    """Required fields that are absent (or null/blank) in ``answers``."""
    missing = []
    for field in REQUIRED_FIELDS:
        value = answers.get(field)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(field)
    return missing


class FormParser:
    """Structured questionnaire extraction (deterministic mode)."""

    def __init__(self, generator, model: str = DEFAULT_MODEL, temperature: float = 0.0):
        self.generator = generator
        self.model = model
        self.temperature = temperature

    def parse(self, text: str) -> dict:
        """
        Extract structured answers from free text.

        Raises ServiceError if the service fails or the response is not a
        well-typed JSON object.
        """
        logger.info("Form parser: structured extraction")
        raw_output = self.generator.complete(
            PARSER_PROMPT.format(text=text), self.model, self.temperature
        )
        logger.debug("Form parser raw output: %s", raw_output[:500])

        data = decode_json(raw_output, dict, default="{}")
        answers, errors = validate_structured_answers(data)
        if answers is None:
            raise ServiceError("; ".join(errors))
        return answers.model_dump(exclude_none=True)

    def parse_safe(self, text: str) -> dict:
        """
        Like parse() but returns an empty answer set on failure.

        Returns
        -------
        dict with keys: answers, missing_fields, confidence
        """
        try:
            answers = self.parse(text)
        except ServiceError as e:
            logger.error("Form parser failed: %s", e)
            answers = {}

        return {
            "answers": answers,
            "missing_fields": find_missing_fields(answers),
            "confidence": PARSING_CONFIDENCE,
        }
