"""
Plum Health Profiler – Risk Scorer
===================================
Stage 3: Deterministically maps extracted risk factors to a bounded
numeric score and a three-level risk classification.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from models.schema_definition import RiskLevel

logger = logging.getLogger(__name__)

RISK_WEIGHTS: Dict[str, int] = {
    "smoker": 30,
    "obesity or overweight": 25,
    "high sugar diet": 20,
    "high alcohol consumption": 20,
    "sedentary lifestyle (low exercise)": 15,
    "healthy lifestyle": -10,
    "regular exercise": -10,
    "balanced diet": -5,
}

MIN_SCORE = 0
MAX_SCORE = 100
HIGH_THRESHOLD = 60
MEDIUM_THRESHOLD = 30


def classify(score: int) -> RiskLevel:
    """score > 60 → High, score > 30 → Medium, otherwise Low."""
    if score > HIGH_THRESHOLD:
        return RiskLevel.HIGH
    if score > MEDIUM_THRESHOLD:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


class RiskScorer:
    """Weighted-sum risk scoring over a closed factor vocabulary."""

    def __init__(self, weights: Optional[Dict[str, int]] = None):
        self.weights = dict(weights) if weights is not None else dict(RISK_WEIGHTS)

    def score(self, factors: List[dict]) -> dict:
        """
        Score a sequence of extracted factors.

        Parameters
        ----------
        factors : list[dict]
            Items shaped {"factor": str, "confidence": float}, in extraction
            order. Names outside the weight table contribute nothing.

        Returns
        -------
        dict with keys: score (int), risk_level (RiskLevel),
        contributing_factors (positive-weight names in input order,
        duplicates preserved).
        """
        total = 0
        contributing: List[str] = []

        for item in factors:
            name = item.get("factor")
            weight = self.weights.get(name)
            if weight is None:
                continue
            total += weight
            if weight > 0:
                contributing.append(name)

        score = max(MIN_SCORE, min(total, MAX_SCORE))
        risk_level = classify(score)

        logger.info("Risk score %d (%s) from %d factors", score, risk_level.value, len(factors))
        return {
            "score": score,
            "risk_level": risk_level,
            "contributing_factors": contributing,
        }
