"""
Plum Health Profiler – Schema Definitions
==========================================
Pydantic models for the four-stage pipeline:
  Stage 1 output: Structured answers (form parser)
  Stage 2 output: Risk factors (factor extractor)
  Stage 3 output: Risk score and level (risk scorer)
  Stage 4 output: Sanitized recommendations (recommender)
"""

from __future__ import annotations

from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# ── Enums ───────────────────────────────────────────────────────────────────


class RiskLevel(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class ProfileStatus(str, Enum):
    OK = "ok"
    INCOMPLETE = "incomplete_profile"
    ERROR = "error"


# ── Stage 1: Structured Answers ─────────────────────────────────────────────


class StructuredAnswers(BaseModel):
    """Health questionnaire answers extracted from free text.

    An absent field means "unknown", never "false".
    """
    model_config = ConfigDict(extra="ignore")

    age: Optional[Union[int, float]] = None
    smoker: Optional[bool] = None
    exercise: Optional[str] = None
    diet: Optional[str] = None


class ParsingOutput(BaseModel):
    answers: dict = Field(default_factory=dict)
    missing_fields: List[str] = Field(default_factory=list)
    confidence: float = Field(ge=0.0, le=1.0)


# ── Stage 2: Risk Factors ───────────────────────────────────────────────────


class RiskFactor(BaseModel):
    """A named risk factor with a fixed extraction confidence."""
    factor: str
    confidence: float = Field(ge=0.0, le=1.0)


class ExtractionOutput(BaseModel):
    factors: List[str] = Field(default_factory=list)
    confidence: float = Field(ge=0.0, le=1.0)


# ── Stage 3: Risk Assessment ────────────────────────────────────────────────


class ScoringOutput(BaseModel):
    risk_level: RiskLevel
    score: int = Field(ge=0, le=100)
    rationale: List[str] = Field(default_factory=list)


# ── Stage 4: Recommendations ────────────────────────────────────────────────


class FinalOutput(BaseModel):
    risk_level: RiskLevel
    factors: List[str] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list, max_length=3)
    status: ProfileStatus = ProfileStatus.OK


# ── Full Pipeline Result ────────────────────────────────────────────────────


class PipelineResult(BaseModel):
    """Composite result of a pipeline run that reached all four stages."""
    step_1_parsing: ParsingOutput
    step_2_extraction: ExtractionOutput
    step_3_risk_scoring: ScoringOutput
    step_4_final_output: FinalOutput
