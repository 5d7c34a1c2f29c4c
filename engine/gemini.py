"""Google Gemini subtitle service implementation."""

from __future__ import annotations

import logging
from typing import Any, Optional

from media.audio import EncodedPayload

from .base import ServiceResponse, SubtitleService
from .failures import EngineError, FailureKind


logger = logging.getLogger(__name__)

# Gemini reports a bad key as 400 INVALID_ARGUMENT; these are not format errors.
_AUTH_HINTS = (
    "api key",
    "api_key_invalid",
    "permission_denied",
    "unauthenticated",
)

_TOO_LARGE_HINTS = (
    "payload size",
    "too large",
    "too long",
    "exceeds the maximum",
    "request entity",
)

_UNSUPPORTED_HINTS = (
    "unsupported content",
    "unsupported mime",
    "invalid argument",
    "mime type",
)


class GeminiAudioService(SubtitleService):
    """Subtitle service backed by the `google-genai` SDK."""

    def __init__(self, model: str, api_key: Optional[str] = None, client: Any = None) -> None:
        """Create a GeminiAudioService.

        Args:
            model: Gemini model identifier (e.g. "gemini-2.5-flash").
            api_key: API key used when the client is created lazily.
            client: Optional pre-built ``genai.Client``.
        """

        self._model_name = model
        self._api_key = api_key
        self._client = client

    def generate(self, instruction: str, payload: EncodedPayload) -> ServiceResponse:
        """Send instruction text and audio to Gemini and normalize the reply."""

        try:
            audio = payload.decode()
        except ValueError as exc:
            raise EngineError(FailureKind.UNSUPPORTED_CONTENT, str(exc), cause=exc) from exc

        try:
            client = self._get_client()
        except ModuleNotFoundError:
            raise
        except Exception as exc:  # noqa: BLE001 - client construction boundary
            raise EngineError(
                FailureKind.SERVICE_ERROR, f"Could not create Gemini client: {exc}", cause=exc
            ) from exc

        from google.genai import errors, types

        audio_part = types.Part.from_bytes(data=audio, mime_type=payload.mime_type)
        logger.debug("Calling %s with %s audio", self._model_name, payload.mime_type)

        try:
            response = client.models.generate_content(
                model=self._model_name,
                contents=[instruction, audio_part],
            )
        except errors.APIError as exc:
            kind = classify_api_error(exc)
            raise EngineError(kind, f"Gemini API Error: {exc}", cause=exc) from exc
        except Exception as exc:  # noqa: BLE001 - transport boundary
            raise EngineError(
                FailureKind.SERVICE_ERROR, f"Gemini API Error: {exc}", cause=exc
            ) from exc

        return parse_response(response)

    def _get_client(self):
        """Lazily construct the underlying genai client."""

        if self._client is not None:
            return self._client

        try:
            from google import genai
        except ModuleNotFoundError as exc:
            raise ModuleNotFoundError(
                "Missing dependency: google-genai. Install with `pip install -e .`."
            ) from exc

        self._client = genai.Client(api_key=self._api_key)
        return self._client


def classify_api_error(exc: Exception) -> FailureKind:
    """Map a Gemini API error to a FailureKind."""

    code = getattr(exc, "code", None)
    status = str(getattr(exc, "status", None) or "").upper()
    message = str(exc).lower()

    if code in (401, 403) or any(hint in message for hint in _AUTH_HINTS):
        return FailureKind.SERVICE_ERROR
    if code == 413 or any(hint in message for hint in _TOO_LARGE_HINTS):
        return FailureKind.PAYLOAD_TOO_LARGE
    if status == "INVALID_ARGUMENT" or any(hint in message for hint in _UNSUPPORTED_HINTS):
        return FailureKind.UNSUPPORTED_CONTENT
    return FailureKind.SERVICE_ERROR


def parse_response(response: Any) -> ServiceResponse:
    """Extract text, finish reason and block reason from a GenerateContentResponse."""

    candidates = getattr(response, "candidates", None) or []
    candidate = candidates[0] if candidates else None

    finish_reason = _enum_name(getattr(candidate, "finish_reason", None))
    feedback = getattr(response, "prompt_feedback", None)
    block_reason = _enum_name(getattr(feedback, "block_reason", None))

    parts = []
    content = getattr(candidate, "content", None)
    for part in getattr(content, "parts", None) or []:
        text = getattr(part, "text", None)
        if isinstance(text, str) and not getattr(part, "thought", False):
            parts.append(text)

    return ServiceResponse(
        text="".join(parts),
        finish_reason=finish_reason,
        block_reason=block_reason,
    )


def _enum_name(value: Any) -> Optional[str]:
    if value is None:
        return None
    name = str(getattr(value, "value", value))
    if not name or name.endswith("_UNSPECIFIED"):
        return None
    return name
