"""
Plum Health Profiler – Text Pipeline
=====================================
Pipeline: Free text → Parse → Extract factors → Score → Recommend

Stages run strictly in order and are never retried. Generation-service
failures are recovered inside each stage; anything else propagates to the
caller after being logged as an internal error.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Optional

from core.logging_utils import log_pipeline_event, new_run_id
from core.validation import validate_pipeline_result
from models.extraction.factor_extractor import FactorExtractor, summarize_extraction
from models.parsing.form_parser import FormParser, REQUIRED_FIELDS
from models.recommendation.recommender import Recommender
from models.schema_definition import ProfileStatus
from models.scoring.risk_scorer import RiskScorer

logger = logging.getLogger(__name__)

MIN_INPUT_LENGTH = 5

# Guardrail: stop when more than half of the required fields are missing.
MAX_MISSING_FIELDS = len(REQUIRED_FIELDS) // 2


class PipelineState(str, Enum):
    START = "start"
    ACQUIRED = "acquired"
    PARSED = "parsed"
    EXTRACTED = "extracted"
    SCORED = "scored"
    RECOMMENDED = "recommended"
    DONE = "done"
    # terminal early exits
    REJECTED_NO_INPUT = "rejected_no_input"
    INCOMPLETE_TOO_SHORT = "incomplete_too_short"
    INCOMPLETE_FIELDS_MISSING = "incomplete_fields_missing"
    INTERNAL_ERROR = "internal_error"


def _enter(run_id: str, state: PipelineState, details: Optional[dict] = None):
    log_pipeline_event(logger, run_id, state.value, details)


class TextPipeline:
    """Text intake → four-stage health risk assessment."""

    def __init__(
        self,
        generator=None,
        form_parser: Optional[FormParser] = None,
        factor_extractor: Optional[FactorExtractor] = None,
        risk_scorer: Optional[RiskScorer] = None,
        recommender: Optional[Recommender] = None,
        **kwargs,
    ):
        if generator is None and None in (form_parser, factor_extractor, recommender):
            raise ValueError("TextPipeline needs a generator or all generation-backed stages")

        gen_cfg = kwargs.get("generation_config", {})
        model = gen_cfg.get("model")
        model_kwargs = {"model": model} if model else {}
        temps = gen_cfg.get("temperatures", {})

        self.form_parser = form_parser or FormParser(
            generator, temperature=temps.get("parsing", 0.0), **model_kwargs
        )
        self.factor_extractor = factor_extractor or FactorExtractor(
            generator, temperature=temps.get("extraction", 0.0), **model_kwargs
        )
        self.risk_scorer = risk_scorer or RiskScorer()
        self.recommender = recommender or Recommender(
            generator, temperature=temps.get("recommendation", 0.6), **model_kwargs
        )

    def run(self, raw_text: str, run_id: Optional[str] = None) -> dict:
        """
        Run the four-stage pipeline on ``raw_text``.

        Parameters
        ----------
        raw_text : str
            Inline or OCR-derived health text.
        run_id : str, optional
            Id stamped on every transition log line; generated when omitted.

        Returns
        -------
        dict – one of the response shapes:
          * {"status": "incomplete_profile", "reason": "Input too short."}
          * {"step_1", "status": "incomplete_profile", "reason": ">50% fields missing"}
          * {"step_1_parsing", "step_2_extraction", "step_3_risk_scoring",
             "step_4_final_output"}
        """
        run_id = run_id or new_run_id()
        _enter(run_id, PipelineState.ACQUIRED, {"length": len(raw_text or "")})

        if len((raw_text or "").strip()) < MIN_INPUT_LENGTH:
            _enter(run_id, PipelineState.INCOMPLETE_TOO_SHORT)
            return {"status": ProfileStatus.INCOMPLETE.value, "reason": "Input too short."}

        try:
            return self._run_stages(raw_text, run_id)
        except Exception:
            _enter(run_id, PipelineState.INTERNAL_ERROR)
            logger.exception("Pipeline run %s aborted with an unhandled error", run_id)
            raise

    def _run_stages(self, raw_text: str, run_id: str) -> dict:
        # Stage 1: Parsing
        step1 = self.form_parser.parse_safe(raw_text)
        _enter(run_id, PipelineState.PARSED, {"missing_fields": step1["missing_fields"]})

        if len(step1["missing_fields"]) > MAX_MISSING_FIELDS:
            _enter(run_id, PipelineState.INCOMPLETE_FIELDS_MISSING)
            return {
                "step_1": step1,
                "status": ProfileStatus.INCOMPLETE.value,
                "reason": ">50% fields missing",
            }

        # Stage 2: Factor extraction
        factors = self.factor_extractor.extract_safe(raw_text)
        step2 = summarize_extraction(factors)
        _enter(run_id, PipelineState.EXTRACTED, {"factors": step2["factors"]})

        # Stage 3: Risk scoring
        assessment = self.risk_scorer.score(factors)
        risk_level = assessment["risk_level"].value
        contributing = assessment["contributing_factors"]
        step3 = {
            "risk_level": risk_level,
            "score": assessment["score"],
            "rationale": contributing,
        }
        _enter(run_id, PipelineState.SCORED, {"score": assessment["score"], "risk_level": risk_level})

        # Stage 4: Recommendations
        recommendations = self.recommender.recommend(contributing, risk_level)
        _enter(run_id, PipelineState.RECOMMENDED, {"count": len(recommendations)})

        step4 = {
            "risk_level": risk_level,
            "factors": contributing,
            "recommendations": recommendations,
            "status": ProfileStatus.OK.value,
        }
        result = {
            "step_1_parsing": step1,
            "step_2_extraction": step2,
            "step_3_risk_scoring": step3,
            "step_4_final_output": step4,
        }

        _, errors = validate_pipeline_result(result)
        _enter(run_id, PipelineState.DONE, {"schema_errors": errors} if errors else None)
        return result
