from __future__ import annotations

from unittest.mock import MagicMock

from google.genai import errors, types
import pytest

from engine import GeminiAudioService, LanguageMode, SubtitleOrchestrator, create_engine
from engine.failures import EngineError, FailureKind
from engine.gemini import classify_api_error, parse_response
from app.config import EngineConfig
from media.audio import EncodedPayload


PAYLOAD = EncodedPayload(data="UklGRg==", mime_type="audio/wav")
SRT = "1\n00:00:01,000 --> 00:00:02,000\nHello"


def _response(*parts: types.Part, finish_reason=types.FinishReason.STOP) -> types.GenerateContentResponse:
    return types.GenerateContentResponse(
        candidates=[
            types.Candidate(
                content=types.Content(role="model", parts=list(parts)),
                finish_reason=finish_reason,
            )
        ]
    )


def _api_error(code: int, status: str, message: str) -> errors.APIError:
    return errors.ClientError(code, {"error": {"code": code, "status": status, "message": message}})


def test_generate_sends_text_then_audio() -> None:
    client = MagicMock()
    client.models.generate_content.return_value = _response(types.Part(text=SRT))
    service = GeminiAudioService(model="gemini-2.5-flash", client=client)

    response = service.generate("Transcribe.", PAYLOAD)

    assert response.text == SRT
    assert response.finish_reason == "STOP"
    assert not response.safety_blocked
    kwargs = client.models.generate_content.call_args.kwargs
    assert kwargs["model"] == "gemini-2.5-flash"
    instruction, audio_part = kwargs["contents"]
    assert instruction == "Transcribe."
    assert audio_part.inline_data.data == b"RIFF"
    assert audio_part.inline_data.mime_type == "audio/wav"


def test_parse_response_safety_finish_reason() -> None:
    response = parse_response(_response(types.Part(text=SRT), finish_reason=types.FinishReason.SAFETY))
    assert response.finish_reason == "SAFETY"
    assert response.safety_blocked


def test_parse_response_prompt_blocked() -> None:
    response = parse_response(
        types.GenerateContentResponse(
            prompt_feedback=types.GenerateContentResponsePromptFeedback(
                block_reason=types.BlockedReason.SAFETY
            )
        )
    )
    assert response.text == ""
    assert response.safety_blocked


def test_parse_response_skips_thoughts() -> None:
    response = parse_response(
        _response(types.Part(text="thinking...", thought=True), types.Part(text=SRT))
    )
    assert response.text == SRT


@pytest.mark.parametrize(
    ("code", "status", "message", "kind"),
    [
        (400, "INVALID_ARGUMENT", "Request payload size exceeds the limit", FailureKind.PAYLOAD_TOO_LARGE),
        (413, "", "Request Entity Too Large", FailureKind.PAYLOAD_TOO_LARGE),
        (400, "INVALID_ARGUMENT", "Unsupported MIME type: audio/x-foo", FailureKind.UNSUPPORTED_CONTENT),
        (429, "RESOURCE_EXHAUSTED", "Quota exceeded", FailureKind.SERVICE_ERROR),
        (400, "INVALID_ARGUMENT", "API key not valid. Please pass a valid API key.", FailureKind.SERVICE_ERROR),
        (403, "PERMISSION_DENIED", "Permission denied on resource project", FailureKind.SERVICE_ERROR),
    ],
)
def test_classify_api_error(code: int, status: str, message: str, kind: FailureKind) -> None:
    assert classify_api_error(_api_error(code, status, message)) is kind


def test_generate_wraps_api_error() -> None:
    client = MagicMock()
    error = _api_error(400, "INVALID_ARGUMENT", "Unsupported MIME type: audio/x-foo")
    client.models.generate_content.side_effect = error
    service = GeminiAudioService(model="gemini-2.5-flash", client=client)

    with pytest.raises(EngineError) as excinfo:
        service.generate("Transcribe.", PAYLOAD)

    assert excinfo.value.kind is FailureKind.UNSUPPORTED_CONTENT
    assert excinfo.value.cause is error
    assert str(excinfo.value).startswith("Gemini API Error:")


def test_generate_wraps_transport_error() -> None:
    client = MagicMock()
    client.models.generate_content.side_effect = ConnectionError("connection reset by peer")
    service = GeminiAudioService(model="gemini-2.5-flash", client=client)

    with pytest.raises(EngineError) as excinfo:
        service.generate("Transcribe.", PAYLOAD)

    assert excinfo.value.kind is FailureKind.SERVICE_ERROR
    assert "connection reset by peer" in str(excinfo.value)


def test_create_engine() -> None:
    assert isinstance(create_engine(EngineConfig(), api_key="key"), GeminiAudioService)
    with pytest.raises(ValueError, match="Unsupported engine backend"):
        create_engine(EngineConfig(backend="whisper"))


def test_malformed_payload_is_a_typed_failure() -> None:
    client = MagicMock()
    orchestrator = SubtitleOrchestrator(GeminiAudioService(model="gemini-2.5-flash", client=client))
    result = orchestrator.generate(
        EncodedPayload(data="not base64!!", mime_type="audio/wav"), LanguageMode.ORIGINAL
    )

    assert result.failure.kind is FailureKind.UNSUPPORTED_CONTENT
    client.models.generate_content.assert_not_called()


def test_client_construction_error_is_a_typed_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    def broken_client(self):
        raise ValueError("Missing key inputs argument!")

    monkeypatch.setattr(GeminiAudioService, "_get_client", broken_client)
    orchestrator = SubtitleOrchestrator(GeminiAudioService(model="gemini-2.5-flash"))
    result = orchestrator.generate(PAYLOAD, LanguageMode.ORIGINAL)

    assert result.failure.kind is FailureKind.SERVICE_ERROR
    assert "Missing key inputs" in result.failure.message
