"""Google Gemini text generation with per-user API keys and classified errors."""

import logging
from typing import Protocol

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from services.errors import ContentBlockedError, CredentialMissingError, ModelInvocationError
from services.pipeline.base import TextGenerator

logger = logging.getLogger(__name__)

_BLOCKED_FINISH_REASONS = {"SAFETY", "PROHIBITED_CONTENT", "BLOCKLIST", "SPII"}


class CredentialStore(Protocol):
    def get_api_key(self, user_id: str) -> str | None:
        ...


class SettingsCredentialStore:
    """Looks a user's key up in ``user_api_keys``, falling back to the shared key."""

    def __init__(self, user_api_keys: dict[str, str] | None = None, default_api_key: str = "") -> None:
        self._user_api_keys = dict(user_api_keys or {})
        self._default_api_key = default_api_key

    def get_api_key(self, user_id: str) -> str | None:
        return self._user_api_keys.get(user_id) or self._default_api_key or None


def _reason_name(reason) -> str:
    return getattr(reason, "name", None) or str(reason)


def _blocked_reason(response: types.GenerateContentResponse) -> str | None:
    feedback = response.prompt_feedback
    if feedback is not None and feedback.block_reason:
        return _reason_name(feedback.block_reason)
    for candidate in response.candidates or []:
        if candidate.finish_reason and _reason_name(candidate.finish_reason) in _BLOCKED_FINISH_REASONS:
            return _reason_name(candidate.finish_reason)
    return None


class GeminiTextGenerator(TextGenerator):
    def __init__(
        self,
        credentials: CredentialStore,
        model: str = "gemini-2.5-flash",
        temperature: float = 0.2,
        max_output_tokens: int = 8192,
    ) -> None:
        self._credentials = credentials
        self.model = model
        self._config = types.GenerateContentConfig(
            temperature=temperature,
            max_output_tokens=max_output_tokens,
        )
        self._clients: dict[str, genai.Client] = {}

    def _client_for(self, api_key: str) -> genai.Client:
        client = self._clients.get(api_key)
        if client is None:
            client = genai.Client(api_key=api_key)
            self._clients[api_key] = client
        return client

    async def generate(self, user_id: str, prompt: str) -> str:
        api_key = self._credentials.get_api_key(user_id)
        if not api_key:
            raise CredentialMissingError(
                "No AI provider configured. Please add a Gemini API key in Settings."
            )

        client = self._client_for(api_key)
        try:
            response = await client.aio.models.generate_content(
                model=self.model,
                contents=prompt,
                config=self._config,
            )
        except genai_errors.APIError as e:
            logger.error("Gemini API error (%s): %s", e.code, e.message)
            raise ModelInvocationError(f"AI service error: {e.message or e}") from e
        except httpx.HTTPError as e:
            logger.error("Gemini transport error: %s", e)
            raise ModelInvocationError(f"Could not reach the AI service: {e}") from e

        blocked = _blocked_reason(response)
        if blocked:
            logger.warning("Gemini blocked the extraction prompt: %s", blocked)
            raise ContentBlockedError(
                f"AI content generation blocked during extraction: {blocked}",
                block_reason=blocked,
            )

        text = response.text
        if not text or not text.strip():
            raise ModelInvocationError("AI service returned an empty response.")
        return text

    async def aclose(self) -> None:
        for client in self._clients.values():
            await client.aio.aclose()
        self._clients.clear()
