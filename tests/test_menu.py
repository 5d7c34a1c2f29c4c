from __future__ import annotations

from pathlib import Path

import pytest

from app.config import AppConfig
from app.menu import GenerateScreen, _open_session
from engine import LanguageMode


def test_open_session_does_not_probe(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    def fail_probe(audio):
        raise AssertionError("ffprobe should not run while opening a session")

    monkeypatch.setattr("app.session.probe_duration", fail_probe)
    monkeypatch.setenv("GEMINI_API_KEY", "test-key")
    path = tmp_path / "talk.mp3"
    path.write_bytes(b"ID3-audio")

    session = _open_session(AppConfig(), path)

    assert session.duration is None
    assert session.audio.path == path


def test_launch_without_session_does_nothing() -> None:
    screen = GenerateScreen()
    assert screen._launch(LanguageMode.ENGLISH) is None
