"""Orchestrates one subtitle generation attempt."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Optional

from media.audio import AudioInput, AudioReadError, EncodedPayload, encode
from output.srt import SrtNotFoundError, extract_srt

from .base import LanguageMode, SubtitleService
from .failures import EngineError, Failure, FailureKind
from .prompts import build_instruction


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SubtitleResult:
    """Outcome of one attempt: an SRT document or a classified failure."""

    mode: LanguageMode
    srt: Optional[str] = None
    failure: Optional[Failure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @classmethod
    def succeeded(cls, mode: LanguageMode, srt: str) -> "SubtitleResult":
        return cls(mode=mode, srt=srt)

    @classmethod
    def failed(cls, mode: LanguageMode, failure: Failure) -> "SubtitleResult":
        return cls(mode=mode, failure=failure)


def _fail(mode: LanguageMode, failure: Failure) -> SubtitleResult:
    """Log a classified failure for operators and wrap it in a result."""

    logger.warning("Subtitle generation failed (%s): %s", failure.kind.value, failure.message)
    if failure.cause is not None:
        logger.debug("Underlying cause: %r", failure.cause, exc_info=failure.cause)
    return SubtitleResult.failed(mode, failure)


class SubtitleOrchestrator:
    """Turns encoded audio into a validated SRT document via a remote service.

    Holds no per-attempt state; every call builds its own request and
    returns a self-contained result.
    """

    def __init__(self, service: SubtitleService) -> None:
        self._service = service

    def generate(self, payload: EncodedPayload, mode: LanguageMode) -> SubtitleResult:
        """Run one request against the service and clean up its reply."""

        mode = LanguageMode(mode)
        instruction = build_instruction(mode)

        try:
            response = self._service.generate(instruction, payload)
        except EngineError as exc:
            return _fail(mode, exc.to_failure())

        if response.safety_blocked:
            reason = response.block_reason or response.finish_reason
            return _fail(
                mode,
                Failure(
                    kind=FailureKind.SAFETY_BLOCKED,
                    message=f"The request was blocked due to safety concerns (reason: {reason}).",
                ),
            )

        try:
            srt = extract_srt(response.text)
        except SrtNotFoundError as exc:
            return _fail(
                mode,
                Failure(kind=FailureKind.NO_VALID_SRT, message=str(exc), cause=exc),
            )

        logger.info("Generated %s subtitles (%d characters)", mode.value, len(srt))
        return SubtitleResult.succeeded(mode, srt)

    def run(self, audio: AudioInput, mode: LanguageMode) -> SubtitleResult:
        """Encode a fresh payload for ``audio`` and generate subtitles from it."""

        mode = LanguageMode(mode)
        try:
            payload = encode(audio)
        except AudioReadError as exc:
            return _fail(
                mode,
                Failure(kind=FailureKind.READ_FAILURE, message=str(exc), cause=exc),
            )
        return self.generate(payload, mode)
