"""SubRip (.srt) extraction from model responses, and SRT file output.

Model output is requested as raw SRT but not guaranteed to be. Cleaning runs
as a small state machine:

    RAW -> MARKDOWN_UNWRAPPED -> CUE_ANCHORED -> VALIDATED

Each stage is a plain function over ``CleanupState`` so that every failure
point can be exercised on its own. Only the leading cue header is validated;
content after the last cue is left untouched.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
import re


FENCED_BLOCK_RE = re.compile(r"```(?i:srt)?[ \t]*\n(.+?)\s*```", re.DOTALL)

CUE_HEADER_RE = re.compile(
    r"\d+\s*\n\d{2}:\d{2}:\d{2}[,.]\d{3} --> \d{2}:\d{2}:\d{2}[,.]\d{3}"
)


class SrtNotFoundError(ValueError):
    """Raised when no SRT cue header can be found in a response."""


class CleanupStage(str, Enum):
    RAW = "raw"
    MARKDOWN_UNWRAPPED = "markdown_unwrapped"
    CUE_ANCHORED = "cue_anchored"
    VALIDATED = "validated"


@dataclass(frozen=True, slots=True)
class CleanupState:
    """Text at a given cleanup stage."""

    stage: CleanupStage
    text: str


def start(text: str) -> CleanupState:
    return CleanupState(stage=CleanupStage.RAW, text=text.strip())


def unwrap_markdown(state: CleanupState) -> CleanupState:
    """Replace the text with the interior of its first fenced code block, if any."""

    match = FENCED_BLOCK_RE.search(state.text)
    text = match.group(1).strip() if match else state.text
    return CleanupState(stage=CleanupStage.MARKDOWN_UNWRAPPED, text=text)


def anchor_first_cue(state: CleanupState) -> CleanupState:
    """Drop everything before the first cue header.

    Raises:
        SrtNotFoundError: If the text contains no cue header.
    """

    match = CUE_HEADER_RE.search(state.text)
    if match is None:
        preview = state.text[:80]
        raise SrtNotFoundError(f"No SRT cue header found in response: {preview!r}")
    return CleanupState(stage=CleanupStage.CUE_ANCHORED, text=state.text[match.start():])


def validate(state: CleanupState) -> CleanupState:
    """Confirm the anchored text starts with a cue header and trim it."""

    text = state.text.strip()
    if not text or CUE_HEADER_RE.match(text) is None:
        raise SrtNotFoundError("Anchored text does not start with an SRT cue header.")
    return CleanupState(stage=CleanupStage.VALIDATED, text=text)


def extract_srt(text: str) -> str:
    """Extract an SRT document from free-form model output.

    Raises:
        SrtNotFoundError: If no SRT cue header is present.
    """

    state = start(text)
    for step in (unwrap_markdown, anchor_first_cue, validate):
        state = step(state)
    return state.text


def srt_output_path(input_path: Path, output_dir: Path, suffix: str = "") -> Path:
    """Return ``<output_dir>/<stem>[.suffix].srt`` for an input file."""

    stem = f"{input_path.stem}.{suffix}" if suffix else input_path.stem
    return output_dir / f"{stem}.srt"


def write_srt_file(output_path: Path, srt: str) -> None:
    """Write an SRT document to disk, ending with a newline.

    Args:
        output_path: Destination `.srt` path.
        srt: Validated SRT content.
    """

    output_path.parent.mkdir(parents=True, exist_ok=True)
    content = srt if srt.endswith("\n") else f"{srt}\n"
    output_path.write_text(content, encoding="utf-8")
