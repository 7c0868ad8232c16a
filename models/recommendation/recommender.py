"""
Plum Health Profiler – Recommendation Generator
================================================
Stage 4: Produces up to three short lifestyle tips conditioned on the risk
level and contributing factors. Runs the generation service in creative
mode, so repeated calls may legitimately differ.
"""

from __future__ import annotations

import logging
import re
from typing import List

from core.errors import ServiceError
from models.generation.llm_client import DEFAULT_MODEL
from models.recommendation.safety import sanitize_recommendations

logger = logging.getLogger(__name__)

HEALTHY_AFFIRMATION = ["Maintain your healthy habits!"]
EMPTY_RESPONSE_DEFAULTS = ["Eat healthy.", "Exercise daily.", "Sleep well."]
SERVICE_ERROR_DEFAULTS = ["Eat balanced meals.", "Exercise daily.", "Sleep well."]

MIN_TIP_LENGTH = 5

_NUMBER_MARKER_RE = re.compile(r"\d\.")

RECOMMENDER_PROMPT = """You are a helpful health coach.
User Risk Level: {risk_level}
Identified Factors: {factors}

Task: Provide exactly 3 short, actionable lifestyle tips.
Constraints:
- Do NOT diagnose diseases.
- Do NOT use medical jargon.
- Return plain text, numbered 1, 2, 3."""


def split_numbered_tips(raw_text: str) -> List[str]:
    """Split "1. ... 2. ... 3. ..." text into trimmed tips, dropping short fragments."""
    fragments = (part.strip() for part in _NUMBER_MARKER_RE.split(raw_text or ""))
    return [part for part in fragments if len(part) > MIN_TIP_LENGTH]


class Recommender:
    """Lifestyle tip generation with fixed fallbacks and a safety filter."""

    def __init__(self, generator, model: str = DEFAULT_MODEL, temperature: float = 0.6):
        self.generator = generator
        self.model = model
        self.temperature = temperature

    def generate(self, factors: List[str], risk_level: str) -> List[str]:
        """
        Raw (unsanitized) tips for ``factors`` at ``risk_level``.

        Raises ServiceError if the generation service fails.
        """
        if not factors:
            return list(HEALTHY_AFFIRMATION)

        logger.info("Recommender: generating advice for risk %s", risk_level)
        prompt = RECOMMENDER_PROMPT.format(risk_level=risk_level, factors=", ".join(factors))
        raw_output = self.generator.complete(prompt, self.model, self.temperature)

        tips = split_numbered_tips(raw_output)
        return tips if tips else list(EMPTY_RESPONSE_DEFAULTS)

    def recommend(self, factors: List[str], risk_level: str) -> List[str]:
        """Sanitized tips; service failures fall back to a fixed default set."""
        try:
            tips = self.generate(factors, risk_level)
        except ServiceError as e:
            logger.error("Recommender failed: %s", e)
            tips = list(SERVICE_ERROR_DEFAULTS)
        return sanitize_recommendations(tips)
