"""Base interfaces for remote subtitle generation services."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from media.audio import EncodedPayload


# Finish/block reasons that mean content was withheld for policy reasons.
SAFETY_REASONS = frozenset({"SAFETY", "PROHIBITED_CONTENT", "BLOCKLIST", "SPII"})


class LanguageMode(str, Enum):
    """Language of the generated subtitles."""

    ORIGINAL = "original"
    ENGLISH = "english"


@dataclass(frozen=True, slots=True)
class ServiceResponse:
    """Normalized response from a generative service."""

    text: str
    finish_reason: Optional[str] = None
    block_reason: Optional[str] = None

    @property
    def safety_blocked(self) -> bool:
        if self.block_reason:
            return True
        return (self.finish_reason or "").upper() in SAFETY_REASONS


class SubtitleService(ABC):
    """Interface for generative audio-to-text services."""

    @abstractmethod
    def generate(self, instruction: str, payload: EncodedPayload) -> ServiceResponse:
        """Send one request with instruction text and audio, and wait for the reply.

        Args:
            instruction: Natural-language instruction for the model.
            payload: Encoded audio and its MIME type.

        Returns:
            The normalized service response.

        Raises:
            EngineError: If the request fails; the error carries its FailureKind.
        """
