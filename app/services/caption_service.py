"""Adapter for image captioning on Replicate."""

from __future__ import annotations

import base64
import logging
from typing import Any

import httpx

from app.config import Settings
from app.exceptions import (
    ConfigurationError,
    UnknownUpstreamError,
    UpstreamModelError,
    UpstreamQuotaError,
)

logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "image/jpeg"
FALLBACK_DESCRIPTION = "No description generated"
MODEL_MESSAGE = (
    "Invalid or inaccessible Replicate model version. "
    "Please check the model ID or permissions."
)
QUOTA_MESSAGE = "Replicate quota exceeded. Please check your account limits."


def encode_data_uri(data: bytes, content_type: str | None = None) -> str:
    """Encode image bytes as a base64 data URI.

    The declared content type is kept when it names an image type; anything
    else is labelled ``image/jpeg``.
    """

    mime_type = content_type if content_type and content_type.startswith("image/") else DEFAULT_MIME_TYPE
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def version_id(model_reference: str) -> str:
    """Extract the version id from ``owner/name:version`` or return it unchanged."""

    _, _, version = model_reference.rpartition(":")
    return version


def normalize_output(output: Any) -> str:
    """Turn a prediction's output into caption text."""

    if isinstance(output, list):
        output = "".join(str(part) for part in output)
    if not output:
        return FALLBACK_DESCRIPTION
    return str(output)


class CaptionService:
    """Wrapper around Replicate's synchronous predictions endpoint."""

    _endpoint = "https://api.replicate.com/v1/predictions"

    def __init__(self, client: httpx.AsyncClient, settings: Settings) -> None:
        self._client = client
        self._settings = settings

    def require_credentials(self) -> tuple[str, str]:
        """Return the API token and model reference or raise ConfigurationError."""

        token = self._settings.replicate_api_token
        if not token:
            logger.error("REPLICATE_API_TOKEN is not set")
            raise ConfigurationError("Server configuration error: Missing API token")

        model_reference = self._settings.caption_model_version
        if not model_reference:
            logger.error("CAPTION_MODEL_VERSION is not set")
            raise ConfigurationError(
                "Server configuration error: Missing caption model version"
            )
        return token, model_reference

    async def describe(self, image: bytes, content_type: str | None = None) -> str:
        """Caption ``image`` and return the generated text."""

        token, model_reference = self.require_credentials()

        payload = {
            "version": version_id(model_reference),
            "input": {
                "image": encode_data_uri(image, content_type),
                "task": self._settings.caption_task,
            },
        }

        headers = {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
            "Prefer": "wait",
        }

        try:
            response = await self._client.post(self._endpoint, headers=headers, json=payload)
            response.raise_for_status()
        except httpx.TimeoutException as exc:
            logger.warning("Caption prediction timed out", exc_info=exc)
            raise UnknownUpstreamError("Caption service timed out") from exc
        except httpx.HTTPStatusError as exc:
            status_code = exc.response.status_code
            logger.error(
                "Caption prediction failed",
                extra={"status_code": status_code, "response_text": exc.response.text},
            )
            if status_code == 422:
                raise UpstreamModelError(MODEL_MESSAGE) from exc
            if status_code == 429:
                raise UpstreamQuotaError(QUOTA_MESSAGE) from exc
            raise UnknownUpstreamError(
                f"Caption service returned status {status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            logger.exception("Unexpected caption HTTP error")
            raise UnknownUpstreamError("Caption service request failed") from exc

        try:
            data = response.json()
        except ValueError as exc:
            logger.error("Caption response is not JSON", extra={"response_text": response.text})
            raise UnknownUpstreamError("Caption service returned an invalid payload") from exc

        if not isinstance(data, dict):
            logger.error("Malformed caption response", extra={"raw_response": data})
            raise UnknownUpstreamError("Caption service returned an invalid payload")

        status = data.get("status")
        if status != "succeeded":
            logger.error(
                "Caption prediction did not succeed",
                extra={"prediction_status": status, "prediction_error": data.get("error")},
            )
            raise UnknownUpstreamError(f"Caption prediction {status}")

        description = normalize_output(data.get("output"))
        logger.info("Caption generated", extra={"prediction_status": status})
        return description
