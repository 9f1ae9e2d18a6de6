import json
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional

import requests
from django.conf import settings as django_settings
from pydantic import ValidationError as PydanticValidationError

from .errors import ConfigurationError, UpstreamError, ValidationError
from .prompts import MISSING_DETAILS, GenerationRequest, build_objective_prompt

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = (
    "https://generativelanguage.googleapis.com/v1beta/models/"
    "gemini-1.5-flash:generateContent"
)

HARM_CATEGORIES = (
    "HARM_CATEGORY_HARASSMENT",
    "HARM_CATEGORY_HATE_SPEECH",
    "HARM_CATEGORY_SEXUALLY_EXPLICIT",
    "HARM_CATEGORY_DANGEROUS_CONTENT",
)
DEFAULT_SAFETY_SETTINGS: List[Dict[str, str]] = [
    {"category": category, "threshold": "BLOCK_ONLY_HIGH"} for category in HARM_CATEGORIES
]

EXTRACTION_FAILED = "Could not extract objective text from Gemini API response."


@dataclass(frozen=True)
class GenerationConfig:
    api_key: str
    endpoint: str = DEFAULT_ENDPOINT
    safety_settings: List[Dict[str, str]] = field(
        default_factory=lambda: [dict(s) for s in DEFAULT_SAFETY_SETTINGS]
    )
    timeout: int = 30

    @classmethod
    def from_settings(cls, settings=django_settings) -> "GenerationConfig":
        return cls(
            api_key=getattr(settings, "GEMINI_API_KEY", "") or "",
            endpoint=getattr(settings, "GEMINI_API_ENDPOINT", DEFAULT_ENDPOINT),
            timeout=getattr(settings, "AI_HTTP_TIMEOUT", 30),
        )


def extract_text(data) -> Optional[str]:
    """Return ``candidates[0].content.parts[0].text`` or ``None``."""
    try:
        text = data["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return None
    return text if isinstance(text, str) and text else None


class GeminiClient:
    """Single-shot client for Gemini ``generateContent``."""

    def __init__(self, config: GenerationConfig, session: Optional[requests.Session] = None):
        self.config = config
        self._owns_session = session is None
        self.session = session or requests.Session()

    @classmethod
    def from_settings(cls) -> "GeminiClient":
        return cls(GenerationConfig.from_settings())

    def close(self) -> None:
        if self._owns_session:
            self.session.close()

    def __enter__(self) -> "GeminiClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def build_payload(self, prompt: str) -> dict:
        return {
            "contents": [{"parts": [{"text": prompt}]}],
            "safetySettings": self.config.safety_settings,
        }

    def ensure_configured(self) -> None:
        if not self.config.api_key:
            raise ConfigurationError(
                "Server configuration error: GEMINI_API_KEY is missing."
            )

    def generate(self, prompt: str) -> str:
        self.ensure_configured()
        logger.debug("POST %s (%d prompt chars)", self.config.endpoint, len(prompt))
        try:
            resp = self.session.post(
                self.config.endpoint,
                params={"key": self.config.api_key},
                json=self.build_payload(prompt),
                headers={"Content-Type": "application/json"},
                timeout=self.config.timeout,
            )
        except requests.RequestException as exc:
            raise UpstreamError(f"Gemini API request failed: {exc}") from exc

        if not resp.ok:
            try:
                body = json.dumps(resp.json())
            except ValueError:
                body = resp.text
            raise UpstreamError(
                f"Gemini API request failed: {resp.status_code} {resp.reason} - {body}"
            )

        try:
            data = resp.json()
        except ValueError as exc:
            raise UpstreamError(EXTRACTION_FAILED) from exc

        text = extract_text(data)
        if not text:
            raise UpstreamError(EXTRACTION_FAILED)
        return text


def generate_objective(client: GeminiClient, fields: Mapping) -> str:
    """Validate ``title``/``objective``/``description`` and ask Gemini for the paragraph."""
    try:
        request = GenerationRequest.model_validate(
            {key: fields.get(key) for key in ("title", "objective", "description")}
        )
    except PydanticValidationError:
        raise ValidationError(MISSING_DETAILS)
    return client.generate(build_objective_prompt(request))
