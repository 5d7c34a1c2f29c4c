"""Caller-side state for working with one audio clip."""

from __future__ import annotations

import logging
import threading
from typing import Optional

from engine import LanguageMode, SubtitleOrchestrator, SubtitleResult
from media.audio import AudioInput, is_long_audio, probe_duration


logger = logging.getLogger(__name__)


class SessionBusyError(RuntimeError):
    """Raised when an attempt is started while another is still running."""


class SubtitleSession:
    """Tracks the subtitles currently shown for one AudioInput.

    The orchestrator is stateless; this object owns sequencing. Only one
    attempt may run at a time, and a failed attempt leaves the previously
    displayed SRT and its language untouched.
    """

    def __init__(
        self,
        orchestrator: SubtitleOrchestrator,
        audio: AudioInput,
        duration: Optional[float] = None,
    ) -> None:
        self._orchestrator = orchestrator
        self._lock = threading.Lock()
        self.audio = audio
        self.mode = LanguageMode.ORIGINAL
        self.srt: Optional[str] = None
        self.last_result: Optional[SubtitleResult] = None
        self.duration = duration

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    @property
    def long_audio(self) -> bool:
        return self.duration is not None and is_long_audio(self.duration)

    def measure_duration(self) -> float:
        """Probe and cache the clip duration (runs ffprobe; call off the UI thread)."""

        if self.duration is None:
            self.duration = probe_duration(self.audio)
        return self.duration

    def generate(self, mode: Optional[LanguageMode] = None) -> SubtitleResult:
        """Run one attempt for ``mode`` (defaults to the current mode).

        Raises:
            SessionBusyError: If an attempt is already in flight.
        """

        target = LanguageMode(mode) if mode is not None else self.mode
        if not self._lock.acquire(blocking=False):
            raise SessionBusyError("A subtitle generation attempt is already in progress.")
        try:
            result = self._orchestrator.run(self.audio, target)
        finally:
            self._lock.release()

        self.last_result = result
        if result.ok:
            self.mode = target
            self.srt = result.srt
        else:
            logger.info("Keeping %s subtitles after failed %s attempt", self.mode.value, target.value)
        return result

    def switch_language(self, mode: LanguageMode) -> Optional[SubtitleResult]:
        """Regenerate subtitles in another language.

        Returns None when ``mode`` is already displayed.
        """

        mode = LanguageMode(mode)
        if self.srt is not None and mode is self.mode:
            return None
        return self.generate(mode)
