"""
Plum Health Profiler – Keyword Factor Extraction
=================================================
Deterministic risk-factor detection used when the generation service is
unavailable. A pure function of the input text; no network access.
"""

from __future__ import annotations

import logging
import re
from typing import List

from models.schema_definition import RiskFactor

logger = logging.getLogger(__name__)

# (factor, pattern, confidence) – evaluated in this order.
KEYWORD_RULES = [
    ("smoker", re.compile(r"smoke|cigarette|tobacco|nicotine"), 0.9),
    ("high sugar diet", re.compile(r"sugar|sweet|candy|soda|dessert"), 0.8),
    ("high alcohol consumption", re.compile(r"alcohol|beer|wine|liquor"), 0.8),
    ("obesity or overweight", re.compile(r"weight|fat|obese|bmi"), 0.8),
    ("sedentary lifestyle (low exercise)", re.compile(r"lazy|sit|desk|inactive"), 0.7),
    ("regular exercise", re.compile(r"run|gym|walk|yoga|workout"), 0.9),
    ("balanced diet", re.compile(r"salad|veg|fruit|diet"), 0.9),
]


def local_factor_extraction(text: str) -> List[dict]:
    """
    Match risk factors against ``text`` using fixed keyword patterns.

    Matching is case-insensitive and substring-based; one text may trigger
    several factors.

    Returns
    -------
    list of {"factor": str, "confidence": float}
    """
    lowered = (text or "").lower()
    factors = [
        RiskFactor(factor=factor, confidence=confidence).model_dump()
        for factor, pattern, confidence in KEYWORD_RULES
        if pattern.search(lowered)
    ]
    logger.info("Keyword fallback matched: %s", [f["factor"] for f in factors])
    return factors
