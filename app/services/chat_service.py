"""Adapter for OpenAI chat completions."""

from __future__ import annotations

import logging

import httpx

from app.config import Settings
from app.exceptions import (
    ConfigurationError,
    UnknownUpstreamError,
    UpstreamEmptyResponseError,
    UpstreamQuotaError,
)

logger = logging.getLogger(__name__)

QUOTA_MESSAGE = "OpenAI quota exceeded. Please check your plan and billing details."


class ChatService:
    """Wrapper around OpenAI's chat completions endpoint."""

    _endpoint = "https://api.openai.com/v1/chat/completions"

    def __init__(self, client: httpx.AsyncClient, settings: Settings) -> None:
        self._client = client
        self._settings = settings

    def require_credentials(self) -> str:
        """Return the configured API key or raise ConfigurationError."""

        api_key = self._settings.openai_api_key
        if not api_key:
            logger.error("OPENAI_API_KEY is not set")
            raise ConfigurationError("Server configuration error: Missing API key")
        return api_key

    async def complete(self, prompt: str) -> str:
        """Generate a single completion for ``prompt``."""

        api_key = self.require_credentials()

        payload = {
            "model": self._settings.chat_model,
            "messages": [{"role": "user", "content": prompt}],
            "max_tokens": self._settings.chat_max_tokens,
        }

        headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }

        try:
            response = await self._client.post(self._endpoint, headers=headers, json=payload)
            response.raise_for_status()
        except httpx.TimeoutException as exc:
            logger.warning("Chat completion timed out", exc_info=exc)
            raise UnknownUpstreamError("Chat service timed out") from exc
        except httpx.HTTPStatusError as exc:
            status_code = exc.response.status_code
            logger.error(
                "Chat completion failed",
                extra={"status_code": status_code, "response_text": exc.response.text},
            )
            if status_code == 429:
                raise UpstreamQuotaError(QUOTA_MESSAGE) from exc
            raise UnknownUpstreamError(
                f"Chat service returned status {status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            logger.exception("Unexpected chat HTTP error")
            raise UnknownUpstreamError("Chat service request failed") from exc

        try:
            data = response.json()
        except ValueError as exc:
            logger.error("Chat response is not JSON", extra={"response_text": response.text})
            raise UnknownUpstreamError("Chat service returned an invalid payload") from exc

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            content = None

        if not content or not isinstance(content, str):
            logger.error("No response from OpenAI", extra={"raw_response": data})
            raise UpstreamEmptyResponseError("No response from assistant")

        return content
