"""Gemini image-editing client.

Sends one image plus an instruction to the ``generateContent`` endpoint and
returns the base64 payload of the first image part in the reply. Every failure
is raised as ``EditServiceError`` with a message fit for the user.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from promptedit.core.config import EditorSettings
from promptedit.core.errors import EditServiceError

logger = logging.getLogger(__name__)


class GeminiImageEditor:
    def __init__(self, settings: EditorSettings, client: Optional[httpx.AsyncClient] = None):
        self.settings = settings
        self._client = client

    @property
    def endpoint(self) -> str:
        return f"{self.settings.base_url}/models/{self.settings.model}:generateContent"

    def build_payload(self, encoded_payload: str, media_type: str, instruction: str) -> dict:
        return {
            "contents": [
                {
                    "role": "user",
                    "parts": [
                        {"inline_data": {"mime_type": media_type, "data": encoded_payload}},
                        {"text": instruction},
                    ],
                }
            ],
            "generationConfig": {"responseModalities": ["IMAGE", "TEXT"]},
        }

    async def edit_image(self, encoded_payload: str, media_type: str, instruction: str) -> str:
        """
        Ask the model to edit the image.

        Returns:
            Base64 payload of the edited image (no ``data:`` prefix).

        Raises:
            EditServiceError: missing API key, timeout, transport error, non-200
            status, or a reply that carries no image.
        """
        if not self.settings.api_key:
            raise EditServiceError("Gemini API key is not configured. Set GEMINI_API_KEY.")

        payload = self.build_payload(encoded_payload, media_type, instruction)
        headers = {
            "x-goog-api-key": self.settings.api_key,
            "Content-Type": "application/json",
        }

        try:
            if self._client is not None:
                response = await self._client.post(self.endpoint, json=payload, headers=headers)
            else:
                async with httpx.AsyncClient(timeout=self.settings.timeout) as client:
                    response = await client.post(self.endpoint, json=payload, headers=headers)
        except httpx.TimeoutException as e:
            raise EditServiceError("Request timed out - the image service may be slow. Please try again.") from e
        except httpx.HTTPError as e:
            raise EditServiceError(f"Could not reach the image service: {e}") from e

        if response.status_code != 200:
            message = _error_message(response)
            logger.warning("Gemini returned %s: %s", response.status_code, message)
            raise EditServiceError(message, status_code=response.status_code)

        try:
            data = response.json()
        except ValueError as e:
            raise EditServiceError("The image service returned an invalid response.") from e

        return extract_image_payload(data)


def _error_message(response: httpx.Response) -> str:
    fallback = f"Image service request failed with status {response.status_code}."
    try:
        body = response.json()
    except ValueError:
        return fallback
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
    return fallback


def extract_image_payload(data: Any) -> str:
    """Return the first inline image payload from a generateContent reply."""
    if not isinstance(data, dict):
        raise EditServiceError("The image service returned an invalid response.")

    candidates = data.get("candidates") or []
    if not candidates:
        feedback = data.get("promptFeedback")
        block_reason = feedback.get("blockReason") if isinstance(feedback, dict) else None
        if block_reason:
            raise EditServiceError(f"The request was blocked by the image service ({block_reason}).")
        raise EditServiceError("No edited image received from the image service.")

    texts = []
    try:
        parts = ((candidates[0] or {}).get("content") or {}).get("parts") or []
        for part in parts:
            inline = part.get("inlineData") or part.get("inline_data")
            if inline and inline.get("data"):
                payload = inline["data"]
                if not isinstance(payload, str):
                    raise TypeError("image data is not a string")
                return payload
            if part.get("text"):
                texts.append(str(part["text"]).strip())
    except (AttributeError, TypeError, KeyError, IndexError) as e:
        logger.warning("Malformed generateContent reply: %s", e)
        raise EditServiceError("The image service returned an invalid response.") from e

    if texts:
        raise EditServiceError(f"The model did not return an image: {' '.join(texts)}")
    raise EditServiceError("No edited image received from the image service.")
