"""
Optional text enrichment for assistant replies.

After the interpreter has computed its data, an external text-generation
model can be asked to phrase a friendlier answer around it:

    query + data  →  prompt  →  provider  →  aiResponse

Two providers are supported, picked by ``ENRICHMENT_PROVIDER``:

    huggingface  – Hugging Face inference API over HTTP (``requests``)
    gemini       – Google Gemini through ``google-genai``

Enrichment is best-effort.  ``build_enricher`` returns ``None`` when the
provider is disabled or its key is missing, and every call is bounded by a
timeout.  Callers must treat any exception from ``generate`` as "no
enrichment".
"""

import json
import time
from abc import ABC, abstractmethod
from typing import Any, Optional

import requests
from google import genai
from google.genai import types

from config import (
    ENRICHMENT_PROVIDER,
    ENRICHMENT_TIMEOUT_S,
    GEMINI_API_KEY,
    GEMINI_MODEL,
    HUGGINGFACE_API_KEY,
    HUGGINGFACE_MODEL_URL,
)
from logger import logger

DEFAULT_REPLY = "AI processing complete"


def build_prompt(query: str, data: Any) -> str:
    """Prompt sent to the provider: the user's query plus the JSON data."""
    return f"Query: {query}\nData: {json.dumps(data, default=str)}\nProvide a helpful response."


class TextEnricher(ABC):
    """Text-generation capability used to phrase assistant replies."""

    name = "enricher"

    @abstractmethod
    def generate(self, prompt: str) -> str:
        ...


class HuggingFaceEnricher(TextEnricher):
    name = "huggingface"

    def __init__(
        self,
        api_key: str,
        model_url: str = HUGGINGFACE_MODEL_URL,
        timeout_s: float = ENRICHMENT_TIMEOUT_S,
    ):
        self.api_key = api_key
        self.model_url = model_url
        self.timeout_s = timeout_s

    def generate(self, prompt: str) -> str:
        start = time.time()
        response = requests.post(
            self.model_url,
            json={"inputs": prompt},
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            },
            timeout=self.timeout_s,
        )
        response.raise_for_status()
        payload = response.json()
        logger.info(
            "[ENRICH] Hugging Face responded in %.2fs", time.time() - start,
        )
        logger.debug("[ENRICH] Raw response: %s", str(payload)[:500])

        if isinstance(payload, list) and payload and isinstance(payload[0], dict):
            return payload[0].get("generated_text") or DEFAULT_REPLY
        return DEFAULT_REPLY


class GeminiEnricher(TextEnricher):
    name = "gemini"

    def __init__(
        self,
        api_key: str,
        model: str = GEMINI_MODEL,
        timeout_s: float = ENRICHMENT_TIMEOUT_S,
    ):
        self.api_key = api_key
        self.model = model
        self.timeout_s = timeout_s
        self._client = None

    def _get_client(self):
        if self._client is None:
            self._client = genai.Client(
                api_key=self.api_key,
                http_options=types.HttpOptions(timeout=int(self.timeout_s * 1000)),
            )
        return self._client

    def generate(self, prompt: str) -> str:
        start = time.time()
        response = self._get_client().models.generate_content(
            model=self.model,
            contents=prompt,
            config=types.GenerateContentConfig(
                temperature=0.0,
                max_output_tokens=512,
            ),
        )
        text = response.text or ""
        logger.info(
            "[ENRICH] Gemini responded in %.2fs (%d chars)",
            time.time() - start, len(text),
        )
        return text or DEFAULT_REPLY


def build_enricher(provider: Optional[str] = None) -> Optional[TextEnricher]:
    """Configured enricher, or ``None`` when enrichment is unavailable."""
    provider = (provider or ENRICHMENT_PROVIDER or "none").strip().lower()

    if provider == "huggingface":
        if not HUGGINGFACE_API_KEY.strip():
            logger.debug("No HUGGINGFACE_API_KEY: enrichment disabled")
            return None
        return HuggingFaceEnricher(HUGGINGFACE_API_KEY.strip())

    if provider == "gemini":
        if not GEMINI_API_KEY.strip():
            logger.debug("No GEMINI_API_KEY: enrichment disabled")
            return None
        return GeminiEnricher(GEMINI_API_KEY.strip())

    if provider != "none":
        logger.warning("Unknown ENRICHMENT_PROVIDER %r: enrichment disabled", provider)
    return None
