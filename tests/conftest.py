from __future__ import annotations

import sys
from pathlib import Path
from typing import List, Union

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from core.errors import ServiceError  # noqa: E402


class StubGenerator:
    """Scripted stand-in for the text-generation service.

    Each call pops the next scripted item: a string is returned, an
    exception instance is raised. An exhausted script raises ServiceError.
    """

    def __init__(self, *responses: Union[str, Exception]):
        self.responses: List[Union[str, Exception]] = list(responses)
        self.calls: List[dict] = []

    def complete(self, prompt: str, model: str, temperature: float) -> str:
        self.calls.append({"prompt": prompt, "model": model, "temperature": temperature})
        if not self.responses:
            raise ServiceError("service unavailable")
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


class FakeOCR:
    def __init__(self, text: str = "", error: Exception | None = None):
        self.text = text
        self.error = error
        self.calls = 0

    def _result(self) -> str:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.text

    def extract(self, image_path) -> str:
        return self._result()

    def extract_from_bytes(self, image_bytes: bytes, filename: str = "upload.png") -> str:
        return self._result()


@pytest.fixture
def stub_generator():
    def _make(*responses):
        return StubGenerator(*responses)

    return _make


@pytest.fixture
def unavailable_generator():
    return StubGenerator()


@pytest.fixture
def fake_ocr():
    def _make(text: str = "", error: Exception | None = None):
        return FakeOCR(text=text, error=error)

    return _make
