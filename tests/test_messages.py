from __future__ import annotations

from app.messages import describe_failure
from engine.failures import FailureKind


def test_every_failure_kind_has_a_message() -> None:
    messages = {kind: describe_failure(kind) for kind in FailureKind}
    assert all(messages.values())
    assert len(set(messages.values())) == len(FailureKind)


def test_safety_message_is_distinct() -> None:
    assert "safety" in describe_failure(FailureKind.SAFETY_BLOCKED)
    assert "safety" not in describe_failure(FailureKind.SERVICE_ERROR)
