"""Google Gemini API wrapper with error handling."""

import json
import logging
from dataclasses import dataclass
from typing import Protocol

from google import genai
from google.genai import errors, types

from config import Settings
from services.exceptions import ExternalServiceError, ServiceNotConfiguredError

logger = logging.getLogger(__name__)

SERVICE_NAME = "gemini"


@dataclass
class Completion:
    content: str
    tokens_used: int = 0


class TextGenerator(Protocol):
    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        max_tokens: int,
        temperature: float,
        json_mode: bool = True,
    ) -> Completion: ...


class GeminiClient:
    """Text-generation service. One instance per process, passed in explicitly."""

    def __init__(self, client: genai.Client, model: str) -> None:
        self._client = client
        self.model = model

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        max_tokens: int,
        temperature: float,
        json_mode: bool = True,
    ) -> Completion:
        config = types.GenerateContentConfig(
            system_instruction=system_prompt,
            temperature=temperature,
            max_output_tokens=max_tokens,
            response_mime_type="application/json" if json_mode else None,
        )
        try:
            response = await self._client.aio.models.generate_content(
                model=self.model,
                contents=user_prompt,
                config=config,
            )
        except errors.APIError as e:
            logger.error("Gemini API error (%s): %s", e.code, e)
            raise ExternalServiceError(
                f"Gemini API error: {e}", service_name=SERVICE_NAME, status_code=e.code, cause=e
            ) from e
        except Exception as e:
            logger.error("Gemini call failed: %s", e)
            raise ExternalServiceError(
                f"Gemini call failed: {e}", service_name=SERVICE_NAME, cause=e
            ) from e

        usage = getattr(response, "usage_metadata", None)
        tokens_used = getattr(usage, "total_token_count", None) or 0
        return Completion(content=response.text or "", tokens_used=tokens_used)


def create_client(settings: Settings) -> GeminiClient:
    if not settings.gemini_api_key:
        logger.warning("No GEMINI_API_KEY set - Gemini features disabled")
        raise ServiceNotConfiguredError(
            "Text-generation service is not configured", service_name=SERVICE_NAME
        )
    return GeminiClient(genai.Client(api_key=settings.gemini_api_key), settings.gemini_model)


def parse_json(text: str) -> dict | list:
    """Extract and parse JSON from a reply that may carry markdown fences.

    Raises ValueError when nothing parseable is found.
    """
    if not text or not text.strip():
        raise ValueError("Empty response from API")

    text = text.strip()
    # Strip markdown code fences if present
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else text[3:]
        if text.endswith("```"):
            text = text[:-3]
        text = text.strip()

    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass

    # Fall back to the outermost object embedded in prose
    start, end = text.find("{"), text.rfind("}")
    if start != -1 and end > start:
        try:
            return json.loads(text[start : end + 1])
        except json.JSONDecodeError:
            pass

    raise ValueError(f"Could not parse JSON from response: {text[:200]}")
