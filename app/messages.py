"""User-facing sentences for generation failures."""

from __future__ import annotations

from engine.failures import FailureKind


FAILURE_MESSAGES = {
    FailureKind.READ_FAILURE: "The audio could not be read. Please choose the file again.",
    FailureKind.UNSUPPORTED_CONTENT: (
        "The audio format is not supported. Please use a common format like WAV, MP3, or WEBM."
    ),
    FailureKind.PAYLOAD_TOO_LARGE: (
        "The audio file is too large or too long. Please use a smaller file."
    ),
    FailureKind.SAFETY_BLOCKED: (
        "Could not generate subtitles as the audio content was flagged for safety reasons."
    ),
    FailureKind.NO_VALID_SRT: (
        "The AI could not process the audio. It might be silent, contain unsupported content, "
        "or be too complex."
    ),
    FailureKind.SERVICE_ERROR: "There was a problem with the AI service. Please try again later.",
}

LONG_AUDIO_HINT = "This may take a moment for longer audio."


def describe_failure(kind: FailureKind) -> str:
    """Return the sentence shown to the user for a failure kind."""

    return FAILURE_MESSAGES[FailureKind(kind)]
