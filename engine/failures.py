"""Failure taxonomy for subtitle generation attempts."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class FailureKind(str, Enum):
    """Why an attempt produced no SRT document."""

    READ_FAILURE = "read_failure"
    UNSUPPORTED_CONTENT = "unsupported_content"
    PAYLOAD_TOO_LARGE = "payload_too_large"
    SAFETY_BLOCKED = "safety_blocked"
    NO_VALID_SRT = "no_valid_srt"
    SERVICE_ERROR = "service_error"


@dataclass(frozen=True, slots=True)
class Failure:
    """A classified failure plus its diagnostic detail for logs."""

    kind: FailureKind
    message: str
    cause: Optional[BaseException] = None


class EngineError(RuntimeError):
    """Raised by service backends with the failure already classified."""

    def __init__(self, kind: FailureKind, message: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.kind = kind
        self.cause = cause

    def to_failure(self) -> Failure:
        return Failure(kind=self.kind, message=str(self), cause=self.cause or self)
