"""External suggestion providers.

A provider takes the user's trimmed search string and returns an
``ExternalSuggestions`` with up to three candidate translations
(literal, clinical, descriptive) and an optional spelling correction.
"""

import json
import logging
import os
from abc import ABC, abstractmethod
from typing import Any, Optional

import requests

from ..config import SuggestConfig
from ..models.suggestions import ExternalSuggestions

logger = logging.getLogger(__name__)

DEFAULT_GEMINI_MODEL = "gemini-2.5-flash"
DEFAULT_OPENAI_MODEL = "gpt-4o-mini"

SCRIPT_NAMES = {
    "traditional": "Traditional Chinese (繁體中文)",
    "simplified": "Simplified Chinese",
}


class SuggestionProviderError(RuntimeError):
    """The provider could not produce a suggestion set."""
    pass


class SuggestionProvider(ABC):
    """Abstract interface for translation suggestion providers."""

    @abstractmethod
    def suggest(self, term: str) -> ExternalSuggestions:
        """Suggest translations for a medical term.

        Args:
            term: Trimmed search string (Chinese or English)

        Returns:
            ExternalSuggestions; slots the provider could not fill are missing

        Raises:
            SuggestionProviderError: If the provider call fails
        """
        pass

    @property
    @abstractmethod
    def engine_name(self) -> str:
        """Return engine identifier (e.g., 'fake', 'gemini', 'openai')."""
        pass


class FakeSuggestionProvider(SuggestionProvider):
    """Deterministic offline provider backed by a small fixed table.

    Unknown terms produce an empty suggestion set.
    """

    DEFAULT_TABLE: dict[str, dict[str, Any]] = {
        "消瘦": {
            "clinical": {"term": "Emaciation", "context": "Abnormal thinness from loss of body tissue."},
            "literal": {"term": "Weight loss", "context": "Decrease in body weight."},
            "descriptive": {"term": "Wasting syndrome", "context": "Progressive loss of muscle and fat."},
        },
        "水腫": {
            "clinical": {"term": "Edema", "context": "Swelling from fluid in tissues."},
            "literal": {"term": "Swelling", "context": "Fluid buildup."},
            "descriptive": {"term": "Water retention", "context": "Excess fluid held in the body."},
        },
        "palpitations": {
            "clinical": {"term": "心悸", "context": "Awareness of abnormal heartbeat."},
            "literal": {"term": "心跳", "context": "Feeling the heart beat."},
            "descriptive": {"term": "心慌", "context": "Uneasy racing heart sensation."},
        },
    }

    def __init__(self, table: Optional[dict[str, dict[str, Any]]] = None):
        self.table = table if table is not None else self.DEFAULT_TABLE

    @property
    def engine_name(self) -> str:
        return "fake"

    def suggest(self, term: str) -> ExternalSuggestions:
        payload = self.table.get(term) or self.table.get(term.lower())
        return ExternalSuggestions.from_payload(payload or {})


class RealSuggestionProvider(SuggestionProvider):
    """Suggestion provider calling Gemini or OpenAI over HTTP.

    Requires GEMINI_API_KEY or OPENAI_API_KEY environment variable.
    """

    def __init__(
        self,
        provider: str = "gemini",
        model: Optional[str] = None,
        temperature: float = 0.3,
        timeout_seconds: int = 30,
        script: str = "traditional",
        api_key: Optional[str] = None,
    ):
        """Initialize real suggestion provider.

        Args:
            provider: 'gemini' or 'openai'
            model: Model name (defaults based on provider)
            temperature: Sampling temperature
            timeout_seconds: HTTP timeout
            script: Chinese script for Chinese output ('traditional' or 'simplified')
            api_key: API key; read from the provider's env var if omitted
        """
        self.provider = provider.lower()

        if self.provider == "gemini":
            self.api_key = api_key or os.environ.get("GEMINI_API_KEY")
            self.model = model or DEFAULT_GEMINI_MODEL
        elif self.provider == "openai":
            self.api_key = api_key or os.environ.get("OPENAI_API_KEY")
            self.model = model or DEFAULT_OPENAI_MODEL
        else:
            raise ValueError(f"Unsupported provider: {provider}")

        if not self.api_key:
            raise ValueError(f"Missing API key: set {self.provider.upper()}_API_KEY environment variable")

        self.temperature = temperature
        self.timeout_seconds = timeout_seconds
        self.script = script

    @property
    def engine_name(self) -> str:
        return self.provider

    @property
    def provider_model(self) -> str:
        return f"{self.provider}/{self.model}"

    def suggest(self, term: str) -> ExternalSuggestions:
        prompt = self._build_prompt(term)
        if self.provider == "gemini":
            text = self._call_gemini(prompt)
        else:
            text = self._call_openai(prompt)
        return ExternalSuggestions.from_payload(parse_json_text(text))

    def _build_prompt(self, term: str) -> str:
        script_name = SCRIPT_NAMES.get(self.script, SCRIPT_NAMES["traditional"])
        return f"""You are a bidirectional medical translator (English <-> Chinese).
User input: "{term}"
If outputting Chinese, use {script_name}.

If the input is a typo or a vague layman term, put the intended medical term in "correction".
If the input is Chinese give three English translations; if English give three Chinese translations:
- "literal": direct or patient-friendly translation
- "clinical": standard medical terminology
- "descriptive": descriptive term or specific condition name
Each has "term" and "context" (a definition of at most 15 words).

Return ONLY a JSON object:
{{"correction": null, "literal": {{"term": "", "context": ""}}, "clinical": {{"term": "", "context": ""}}, "descriptive": {{"term": "", "context": ""}}}}"""

    def _call_gemini(self, prompt: str) -> str:
        url = f"https://generativelanguage.googleapis.com/v1beta/models/{self.model}:generateContent"
        payload = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": self.temperature,
                "responseMimeType": "application/json",
            },
        }
        data = self._post(url, {"x-goog-api-key": self.api_key}, payload)
        try:
            for candidate in data.get("candidates") or []:
                for part in candidate["content"]["parts"]:
                    if "text" in part:
                        return str(part["text"])
        except (AttributeError, KeyError, TypeError) as e:
            raise SuggestionProviderError(f"Unexpected Gemini response: {e}") from e
        raise SuggestionProviderError("Unexpected Gemini response: no text")

    def _call_openai(self, prompt: str) -> str:
        url = "https://api.openai.com/v1/chat/completions"
        payload = {
            "model": self.model,
            "temperature": self.temperature,
            "response_format": {"type": "json_object"},
            "messages": [
                {"role": "system", "content": "You are a precise medical translation assistant that outputs JSON only."},
                {"role": "user", "content": prompt},
            ],
        }
        data = self._post(url, {"Authorization": f"Bearer {self.api_key}"}, payload)
        try:
            return data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise SuggestionProviderError(f"Unexpected OpenAI response: {e}") from e

    def _post(self, url: str, headers: dict, payload: dict) -> dict:
        try:
            response = requests.post(url, json=payload, headers=headers, timeout=self.timeout_seconds)
            response.raise_for_status()
            return response.json()
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else "?"
            raise SuggestionProviderError(f"API error {status}: {e}") from e
        except requests.RequestException as e:
            raise SuggestionProviderError(f"Network error: {e}") from e
        except ValueError as e:
            raise SuggestionProviderError(f"Invalid JSON from API: {e}") from e


def parse_json_text(text: str) -> dict:
    """Parse the model's JSON reply, tolerating Markdown code fences."""
    content = (text or "").strip().lstrip("\ufeff")
    if content.startswith("```"):
        lines = content.split("\n")
        content = "\n".join(lines[1:-1]) if lines[-1].strip() == "```" else "\n".join(lines[1:])

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise SuggestionProviderError(f"Could not parse model output: {e}") from e
    if not isinstance(data, dict):
        raise SuggestionProviderError("Model output is not a JSON object")
    return data


def get_suggestion_provider(engine: str = "auto", config: Optional[SuggestConfig] = None) -> SuggestionProvider:
    """Get a suggestion provider based on engine setting and available API keys.

    Args:
        engine: 'fake', 'gemini', 'openai' or 'auto'
                'auto' prefers Gemini, then OpenAI, else the fake provider
        config: Model settings passed to real providers

    Returns:
        SuggestionProvider implementation
    """
    config = config or SuggestConfig()
    options = {
        "model": config.model,
        "temperature": config.temperature,
        "timeout_seconds": config.timeout_seconds,
        "script": config.script,
    }

    if engine == "fake":
        return FakeSuggestionProvider()

    if engine in ("gemini", "openai"):
        if not os.environ.get(f"{engine.upper()}_API_KEY"):
            raise ValueError(f"{engine.upper()}_API_KEY not set")
        return RealSuggestionProvider(provider=engine, **options)

    if engine == "auto":
        if os.environ.get("GEMINI_API_KEY"):
            return RealSuggestionProvider(provider="gemini", **options)
        if os.environ.get("OPENAI_API_KEY"):
            return RealSuggestionProvider(provider="openai", **options)
        logger.info("No API key found, using fake suggestion provider")
        return FakeSuggestionProvider()

    raise ValueError(f"Unsupported engine: {engine}")
