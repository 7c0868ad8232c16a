"""
Plum Health Profiler – API Schemas
===================================
Pydantic models for the REST API response contracts.
"""

from __future__ import annotations

from typing import Dict, Optional

from pydantic import BaseModel, Field

from models.schema_definition import ParsingOutput, PipelineResult, ProfileStatus


class ErrorResponse(BaseModel):
    status: ProfileStatus = ProfileStatus.ERROR
    message: str


class IncompleteProfileResponse(BaseModel):
    """Guardrail short-circuit; ``step_1`` is present when parsing ran."""
    status: ProfileStatus = ProfileStatus.INCOMPLETE
    reason: str
    step_1: Optional[ParsingOutput] = None


class HealthProfileResponse(PipelineResult):
    """Full four-step result."""


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"
    models: Dict[str, str] = Field(default_factory=dict)
