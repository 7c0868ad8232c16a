from __future__ import annotations

from core.errors import ServiceError
from models.recommendation.recommender import (
    EMPTY_RESPONSE_DEFAULTS,
    SERVICE_ERROR_DEFAULTS,
    Recommender,
    split_numbered_tips,
)


def test_no_factors_returns_affirmation_without_calling_service(stub_generator):
    gen = stub_generator("1. should never be used")
    assert Recommender(gen).recommend([], "Low") == ["Maintain your healthy habits!"]
    assert gen.calls == []


def test_numbered_tips_are_split_and_trimmed(stub_generator):
    gen = stub_generator(
        "1. Take a brisk walk after lunch.\n2. Swap soda for sparkling water.\n3. Go to bed at the same time."
    )
    recs = Recommender(gen).recommend(["high sugar diet"], "Medium")

    assert recs == [
        "Take a brisk walk after lunch.",
        "Swap soda for sparkling water.",
        "Go to bed at the same time.",
    ]


def test_runs_in_creative_mode_with_level_and_factors(stub_generator):
    gen = stub_generator("1. Take a brisk walk after lunch.")
    Recommender(gen, model="m").recommend(["smoker", "high sugar diet"], "High")

    call = gen.calls[0]
    assert call["temperature"] == 0.6
    assert "User Risk Level: High" in call["prompt"]
    assert "Identified Factors: smoker, high sugar diet" in call["prompt"]


def test_forbidden_term_candidate_is_dropped(stub_generator):
    gen = stub_generator(
        "1. Walk for thirty minutes each day.\n"
        "2. Please consult for a prescription to help you quit.\n"
        "3. Replace sweets with fresh fruit."
    )
    recs = Recommender(gen).recommend(["smoker"], "Medium")

    assert recs == ["Walk for thirty minutes each day.", "Replace sweets with fresh fruit."]


def test_short_fragments_are_discarded():
    assert split_numbered_tips("1. Nap. 2. Walk more often.") == ["Walk more often."]


def test_empty_generation_uses_default_set(stub_generator):
    gen = stub_generator("")
    assert Recommender(gen).recommend(["smoker"], "Low") == EMPTY_RESPONSE_DEFAULTS


def test_service_error_uses_fallback_set(stub_generator):
    gen = stub_generator(ServiceError("timeout"))
    assert Recommender(gen).recommend(["smoker"], "Low") == SERVICE_ERROR_DEFAULTS


def test_output_never_exceeds_three(stub_generator):
    gen = stub_generator("1. Drink more water. 2. Walk every evening. 3. Eat more greens. 4. Sleep eight hours.")
    assert len(Recommender(gen).recommend(["smoker"], "High")) == 3
