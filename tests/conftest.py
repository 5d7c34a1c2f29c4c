from __future__ import annotations

from typing import Callable, Union

import pytest

from engine.base import ServiceResponse, SubtitleService
from engine.failures import EngineError
from media.audio import EncodedPayload


Reply = Union[ServiceResponse, EngineError]


class StubService(SubtitleService):
    """Deterministic service returning queued replies (last one repeats)."""

    def __init__(self, *replies: Reply) -> None:
        self._replies = list(replies)
        self.calls: list[tuple[str, EncodedPayload]] = []

    def generate(self, instruction: str, payload: EncodedPayload) -> ServiceResponse:
        self.calls.append((instruction, payload))
        reply = self._replies.pop(0) if len(self._replies) > 1 else self._replies[0]
        if isinstance(reply, EngineError):
            raise reply
        return reply


@pytest.fixture
def stub_service() -> Callable[..., StubService]:
    return StubService
