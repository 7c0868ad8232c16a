from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from core.errors import ExtractionError
from core.router import HealthProfileRouter


@pytest.fixture
def api_module():
    import api.main as module

    return module


@pytest.fixture
def client_with(api_module, monkeypatch, tmp_path):
    def _make(generator, ocr):
        cfg = tmp_path / "model_config.yaml"
        cfg.write_text("")
        router = HealthProfileRouter(config_path=str(cfg), generator=generator, ocr=ocr)
        monkeypatch.setattr(api_module, "router", router)
        return TestClient(api_module.app)

    return _make


def test_root_banner(client_with, stub_generator, fake_ocr):
    response = client_with(stub_generator(), fake_ocr()).get("/")
    assert response.status_code == 200
    assert response.text == "Plum Health Profiler is Running!"


def test_health_reports_backend(client_with, stub_generator, fake_ocr):
    response = client_with(stub_generator(), fake_ocr()).get("/health")
    assert response.status_code == 200
    assert response.json()["models"]["backend"] == "groq"


def test_no_input_is_400(client_with, stub_generator, fake_ocr):
    response = client_with(stub_generator(), fake_ocr()).post("/api/health-profile")
    assert response.status_code == 400
    assert response.json() == {"status": "error", "message": "No text or image provided."}


def test_short_text_is_incomplete(client_with, stub_generator, fake_ocr):
    response = client_with(stub_generator(), fake_ocr()).post(
        "/api/health-profile", data={"text": "hi"}
    )
    assert response.status_code == 200
    assert response.json() == {"status": "incomplete_profile", "reason": "Input too short."}


def test_full_text_profile(client_with, stub_generator, fake_ocr):
    gen = stub_generator(
        '{"age": 45, "smoker": true, "exercise": "none", "diet": "lots of soda"}',
        '["smoker", "high sugar diet", "sedentary lifestyle (low exercise)"]',
        "1. Take the stairs at work.\n2. Replace soda with water.\n3. Ask a friend to help you quit smoking.",
    )
    response = client_with(gen, fake_ocr()).post(
        "/api/health-profile",
        data={"text": "I'm 45, I smoke, never exercise and drink lots of soda"},
    )
    assert response.status_code == 200
    payload = response.json()

    assert set(payload) == {
        "step_1_parsing",
        "step_2_extraction",
        "step_3_risk_scoring",
        "step_4_final_output",
    }
    assert payload["step_3_risk_scoring"]["score"] == 65
    assert payload["step_3_risk_scoring"]["risk_level"] == "High"
    assert payload["step_4_final_output"]["status"] == "ok"
    assert len(payload["step_4_final_output"]["recommendations"]) == 3


def test_image_upload_uses_ocr(client_with, stub_generator, fake_ocr):
    ocr = fake_ocr(text="I am 38 years old")
    gen = stub_generator('{"age": 38}')
    response = client_with(gen, ocr).post(
        "/api/health-profile",
        files={"image": ("form.png", b"fake-png-bytes", "image/png")},
        data={"text": "ignored"},
    )
    assert response.status_code == 200
    assert ocr.calls == 1
    assert response.json()["step_1"]["answers"] == {"age": 38}


def test_ocr_failure_is_opaque_500(client_with, stub_generator, fake_ocr):
    ocr = fake_ocr(error=ExtractionError("tesseract missing"))
    response = client_with(stub_generator(), ocr).post(
        "/api/health-profile",
        files={"image": ("form.png", b"fake-png-bytes", "image/png")},
    )
    assert response.status_code == 500
    assert response.json() == {"status": "error", "message": "Internal server error."}


def test_unexpected_error_is_opaque_500(client_with, stub_generator, fake_ocr, api_module, monkeypatch):
    client = client_with(stub_generator(), fake_ocr())

    def explode(**kwargs):
        raise RuntimeError("secret internal detail")

    monkeypatch.setattr(api_module.router, "profile", explode)
    response = client.post("/api/health-profile", data={"text": "I smoke a lot"})
    assert response.status_code == 500
    assert "secret" not in response.text


def test_incomplete_bodies_match_schema(client_with, stub_generator, fake_ocr):
    from api.schemas import IncompleteProfileResponse

    gen = stub_generator('{"diet": "mostly takeaway"}')
    response = client_with(gen, fake_ocr()).post(
        "/api/health-profile", data={"text": "mostly takeaway food"}
    )
    body = IncompleteProfileResponse(**response.json())
    assert body.reason == ">50% fields missing"
    assert body.step_1.missing_fields == ["age", "smoker", "exercise"]


def test_empty_text_field_is_too_short_not_rejected(client_with, stub_generator, fake_ocr):
    gen = stub_generator()
    response = client_with(gen, fake_ocr()).post("/api/health-profile", data={"text": ""})

    assert response.status_code == 200
    assert response.json() == {"status": "incomplete_profile", "reason": "Input too short."}
    assert gen.calls == []


def test_empty_text_field_in_multipart_is_too_short(client_with, stub_generator, fake_ocr):
    response = client_with(stub_generator(), fake_ocr()).post(
        "/api/health-profile",
        data={"text": ""},
        files={"unrelated": ("notes.txt", b"", "text/plain")},
    )
    assert response.status_code == 200
    assert response.json()["reason"] == "Input too short."


def test_error_and_incomplete_bodies_default_their_status():
    from api.schemas import ErrorResponse, IncompleteProfileResponse

    assert ErrorResponse(message="x").model_dump(mode="json") == {"status": "error", "message": "x"}
    assert IncompleteProfileResponse(reason="Input too short.").model_dump(mode="json")["status"] == "incomplete_profile"
