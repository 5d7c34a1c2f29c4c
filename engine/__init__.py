"""Subtitle engine factory and exports."""

from __future__ import annotations

from typing import Optional

from app.config import EngineConfig

from .base import LanguageMode, ServiceResponse, SubtitleService
from .failures import EngineError, Failure, FailureKind
from .gemini import GeminiAudioService
from .orchestrator import SubtitleOrchestrator, SubtitleResult


def create_engine(config: EngineConfig, api_key: Optional[str] = None) -> SubtitleService:
    """Create a subtitle service from configuration.

    This factory allows adding future backends without changing CLI logic.
    """

    backend = (config.backend or "").strip().lower()
    if backend in {"gemini", "google", "google-genai"}:
        return GeminiAudioService(model=config.model, api_key=api_key)
    raise ValueError(f"Unsupported engine backend: {config.backend!r}")


__all__ = [
    "EngineError",
    "Failure",
    "FailureKind",
    "GeminiAudioService",
    "LanguageMode",
    "ServiceResponse",
    "SubtitleOrchestrator",
    "SubtitleResult",
    "SubtitleService",
    "create_engine",
]
