"""
Plum Health Profiler – Validation Utilities
============================================
Validates pipeline records against Pydantic schemas.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Tuple

from pydantic import ValidationError

from models.schema_definition import PipelineResult, StructuredAnswers

logger = logging.getLogger(__name__)


def _format_errors(exc: ValidationError) -> List[str]:
    errors = []
    for err in exc.errors():
        field = ".".join(str(loc) for loc in err["loc"])
        errors.append(f"Validation error at '{field}': {err['msg']}")
    return errors


def validate_structured_answers(data: Any) -> Tuple[Optional[StructuredAnswers], List[str]]:
    """
    Validate a Stage 1 record against the StructuredAnswers schema.

    Returns (validated_model, errors_list).
    """
    if not isinstance(data, dict):
        logger.warning("Structured answers must be a JSON object, got %s", type(data).__name__)
        return None, [f"Expected an object, got {type(data).__name__}"]
    try:
        return StructuredAnswers(**data), []
    except ValidationError as e:
        errors = _format_errors(e)
        logger.warning("Structured answers validation failed: %d errors", len(errors))
        return None, errors


def validate_pipeline_result(data: dict) -> Tuple[Optional[PipelineResult], List[str]]:
    """
    Validate the full four-step pipeline result.

    Returns (validated_model, errors_list).
    """
    try:
        return PipelineResult(**data), []
    except ValidationError as e:
        errors = _format_errors(e)
        logger.warning("Pipeline result validation failed: %d errors", len(errors))
        return None, errors
