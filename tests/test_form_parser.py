from __future__ import annotations

from core.errors import ServiceError
from models.parsing.form_parser import FormParser, find_missing_fields


def test_parses_fenced_json_object(stub_generator):
    gen = stub_generator('```json\n{"age": 42, "smoker": true, "exercise": "none", "diet": "fast food"}\n```')
    step1 = FormParser(gen, model="test-model").parse_safe("I'm 42, I smoke, no exercise, fast food")

    assert step1["answers"] == {"age": 42, "smoker": True, "exercise": "none", "diet": "fast food"}
    assert step1["missing_fields"] == []
    assert step1["confidence"] == 0.92


def test_runs_in_deterministic_mode(stub_generator):
    gen = stub_generator('{"age": 30}')
    FormParser(gen, model="test-model").parse_safe("I am thirty years old")

    assert gen.calls[0]["temperature"] == 0.0
    assert gen.calls[0]["model"] == "test-model"
    assert "I am thirty years old" in gen.calls[0]["prompt"]


def test_absent_keys_are_missing_but_false_is_an_answer(stub_generator):
    gen = stub_generator('{"age": 40, "smoker": false}')
    step1 = FormParser(gen).parse_safe("40, never smoked")

    assert step1["answers"] == {"age": 40, "smoker": False}
    assert step1["missing_fields"] == ["exercise", "diet"]


def test_service_error_yields_empty_answers(stub_generator):
    gen = stub_generator(ServiceError("boom"))
    step1 = FormParser(gen).parse_safe("some health text")

    assert step1["answers"] == {}
    assert step1["missing_fields"] == ["age", "smoker", "exercise", "diet"]
    assert step1["confidence"] == 0.92


def test_malformed_json_yields_empty_answers(stub_generator):
    gen = stub_generator("Sure! Here is the data: age forty")
    assert FormParser(gen).parse_safe("some health text")["answers"] == {}


def test_array_instead_of_object_yields_empty_answers(stub_generator):
    gen = stub_generator('[{"age": 40}]')
    assert FormParser(gen).parse_safe("some health text")["answers"] == {}


def test_wrongly_typed_field_yields_empty_answers_not_partial(stub_generator):
    gen = stub_generator('{"age": 40, "smoker": {"packs": 2}}')
    assert FormParser(gen).parse_safe("some health text")["answers"] == {}


def test_unknown_keys_are_ignored(stub_generator):
    gen = stub_generator('{"age": 55, "diet": "vegan", "height": 180}')
    assert FormParser(gen).parse_safe("some health text")["answers"] == {"age": 55, "diet": "vegan"}


def test_empty_response_is_an_empty_object(stub_generator):
    gen = stub_generator("")
    step1 = FormParser(gen).parse_safe("some health text")
    assert step1["answers"] == {}
    assert len(step1["missing_fields"]) == 4


def test_blank_and_null_values_count_as_missing():
    assert find_missing_fields({"age": None, "smoker": False, "exercise": "  ", "diet": "keto"}) == [
        "age",
        "exercise",
    ]


def test_fence_only_reply_yields_empty_answers(stub_generator):
    gen = stub_generator("```json\n```")
    step1 = FormParser(gen).parse_safe("some health text")
    assert step1["answers"] == {}
    assert len(step1["missing_fields"]) == 4
