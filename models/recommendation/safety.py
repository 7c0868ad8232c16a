"""
Plum Health Profiler – Recommendation Safety Filter
====================================================
Last line of defence against diagnostic language in generated advice.
"""

from __future__ import annotations

import logging
from typing import Iterable, List

logger = logging.getLogger(__name__)

FORBIDDEN_TERMS = ("diagnose", "cure", "medicine", "cancer", "diabetes", "prescription")

MAX_RECOMMENDATIONS = 3


def contains_forbidden_term(text: str) -> bool:
    lowered = text.lower()
    return any(term in lowered for term in FORBIDDEN_TERMS)


def sanitize_recommendations(recommendations: Iterable[str]) -> List[str]:
    """
    Drop every recommendation containing a forbidden term (case-insensitive
    substring) and keep at most three. Idempotent.
    """
    clean = []
    for rec in recommendations:
        if contains_forbidden_term(rec):
            logger.warning("Dropped recommendation with forbidden term: %s", rec[:80])
            continue
        clean.append(rec)
    return clean[:MAX_RECOMMENDATIONS]
