"""
Plum Health Profiler – JSON Helpers
====================================
Clean and decode JSON payloads returned by the generation service.
"""

from __future__ import annotations

import json
import re
from typing import Any

from core.errors import ServiceError

_FENCE_RE = re.compile(r"```(?:json)?", re.IGNORECASE)


def strip_code_fences(text: str) -> str:
    """Remove markdown code-fence decoration (```json / ```) and trim."""
    return _FENCE_RE.sub("", text or "").strip()


def decode_json(raw: str, expected: type, default: str) -> Any:
    """
    Strip fences from ``raw`` and decode it as JSON of type ``expected``.

    An empty response decodes as ``default``. Raises ServiceError when the
    remainder after stripping fences is empty, is not valid JSON, or
    decodes to the wrong top-level type.
    """
    cleaned = strip_code_fences(raw or default)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise ServiceError(f"Malformed JSON from generation service: {cleaned[:200]}") from e

    if not isinstance(data, expected):
        raise ServiceError(
            f"Expected JSON {expected.__name__}, got {type(data).__name__}"
        )
    return data
