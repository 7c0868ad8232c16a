"""
Plum Health Profiler – Text-Generation Clients
===============================================
Thin wrappers around the external text-generation service. Every backend
exposes the same call:

    complete(prompt, model, temperature) -> str

and raises ServiceError on any transport or API failure. Supported backends:

  - "groq"         : Groq chat completions (cloud, default)
  - "hf_endpoint"  : Dedicated HuggingFace Inference Endpoint over HTTP
  - "ollama"       : Local Ollama server via LangChain (fully offline)
"""

from __future__ import annotations

import logging
import os
from typing import Dict, Optional, Tuple

import groq
import requests

from core.errors import ServiceError

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "llama-3.3-70b-versatile"


class GroqGenerator:
    """Generation client backed by the Groq chat-completions API."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        max_tokens: int = 512,
        timeout: int = 60,
        **_,  # absorb extra kwargs from config dicts
    ):
        self.api_key = api_key or os.environ.get("GROQ_API_KEY")
        self.max_tokens = max_tokens
        self.timeout = timeout

        # Lazy – the SDK client is created on first use so a missing key only
        # fails the stage that needs it, not the whole app at startup.
        self._client = None

    def _ensure_client(self):
        if self._client is not None:
            return self._client

        if not self.api_key:
            raise ServiceError("GROQ_API_KEY is not set.")
        self._client = groq.Groq(api_key=self.api_key, timeout=self.timeout)
        return self._client

    def complete(self, prompt: str, model: str, temperature: float) -> str:
        client = self._ensure_client()
        logger.debug("Calling Groq model=%s temperature=%s", model, temperature)
        try:
            completion = client.chat.completions.create(
                messages=[{"role": "user", "content": prompt}],
                model=model,
                temperature=temperature,
                max_tokens=self.max_tokens,
            )
        except groq.GroqError as e:
            raise ServiceError(f"Groq request failed: {e}") from e

        if not completion.choices:
            return ""
        return completion.choices[0].message.content or ""


class HFEndpointGenerator:
    """Generation client for a dedicated HuggingFace Inference Endpoint."""

    def __init__(
        self,
        endpoint_url: Optional[str] = None,
        max_new_tokens: int = 512,
        timeout: int = 120,
        **_,
    ):
        self.endpoint_url = endpoint_url or os.environ.get("GENERATION_ENDPOINT_URL")
        if not self.endpoint_url:
            raise EnvironmentError(
                "GENERATION_ENDPOINT_URL is not set. "
                "Add it to your .env file or pass endpoint_url= to HFEndpointGenerator()."
            )
        self.max_new_tokens = max_new_tokens
        self.timeout = timeout

    def complete(self, prompt: str, model: str, temperature: float) -> str:
        # The endpoint serves a single model; ``model`` is informational only.
        token = os.environ.get("HF_API_TOKEN") or os.environ.get("HF_TOKEN")
        if not token:
            raise ServiceError("Set HF_API_TOKEN or HF_TOKEN in your .env file.")

        headers = {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        }
        payload = {
            "inputs": prompt,
            "parameters": {
                "max_new_tokens": self.max_new_tokens,
                "temperature": temperature,
                "do_sample": temperature > 0,
                "return_full_text": False,
            },
        }

        logger.info("Calling generation endpoint: %s (model=%s)", self.endpoint_url, model)
        try:
            response = requests.post(
                self.endpoint_url, headers=headers, json=payload, timeout=self.timeout
            )
            response.raise_for_status()
            result = response.json()
        except (requests.RequestException, ValueError) as e:
            raise ServiceError(f"Generation endpoint failed: {e}") from e

        if isinstance(result, list) and len(result) > 0:
            return result[0].get("generated_text", "")
        return str(result)


class OllamaGenerator:
    """
    Generation client backed by a local Ollama server via LangChain.

    Requires Ollama running locally (https://ollama.com/download) with the
    configured model pulled, and the ``langchain-ollama`` package.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        max_tokens: int = 512,
        **_,
    ):
        self.base_url = base_url or os.environ.get("OLLAMA_BASE_URL", "http://localhost:11434")
        self.max_tokens = max_tokens
        self._llms: Dict[Tuple[str, float], object] = {}

    def _llm_for(self, model: str, temperature: float):
        key = (model, temperature)
        if key not in self._llms:
            from langchain_ollama import ChatOllama

            self._llms[key] = ChatOllama(
                model=model,
                base_url=self.base_url,
                temperature=temperature,
                num_predict=self.max_tokens,
            )
            logger.info("OllamaGenerator initialised – model=%s temperature=%s", model, temperature)
        return self._llms[key]

    def complete(self, prompt: str, model: str, temperature: float) -> str:
        from langchain_core.messages import HumanMessage

        try:
            response = self._llm_for(model, temperature).invoke([HumanMessage(content=prompt)])
        except Exception as e:
            raise ServiceError(f"Ollama request failed: {e}") from e
        return response.content or ""


# ═══════════════════════════════════════════════════════════════════════════════
# Factory: selects backend from config
# ═══════════════════════════════════════════════════════════════════════════════

def create_generator(config: dict) -> "GroqGenerator | HFEndpointGenerator | OllamaGenerator":
    """
    Return the generation client selected by ``config["backend"]``.

    Example model_config.yaml entries:

      generation:
        backend: groq               # groq | hf_endpoint | ollama
        model: llama-3.3-70b-versatile
        timeout: 60
        parameters:
          max_new_tokens: 512
    """
    backend = config.get("backend", "groq")

    if backend == "hf_endpoint":
        return HFEndpointGenerator(
            endpoint_url=config.get("endpoint_url"),
            max_new_tokens=config.get("max_new_tokens", 512),
            timeout=config.get("timeout", 120),
        )

    if backend == "ollama":
        return OllamaGenerator(
            base_url=config.get("ollama_base_url"),
            max_tokens=config.get("max_new_tokens", 512),
        )

    return GroqGenerator(
        api_key=config.get("api_key"),
        max_tokens=config.get("max_new_tokens", 512),
        timeout=config.get("timeout", 60),
    )
