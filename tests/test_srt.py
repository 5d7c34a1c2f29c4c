from __future__ import annotations

from pathlib import Path

import pytest

from output.srt import (
    CleanupStage,
    SrtNotFoundError,
    anchor_first_cue,
    extract_srt,
    srt_output_path,
    start,
    unwrap_markdown,
    write_srt_file,
)


CUE = "1\n00:00:01,000 --> 00:00:02,000\nHello"


def test_markdown_fence_after_preamble() -> None:
    text = "Sure! ```srt\n1\n00:00:01,000 --> 00:00:02,000\nHello\n```"
    assert extract_srt(text) == CUE


@pytest.mark.parametrize("tag", ["srt", ""])
def test_unwrap_yields_trimmed_interior(tag: str) -> None:
    text = f"\n\n   ```{tag}\n  {CUE}  \n```   \n"
    state = unwrap_markdown(start(text))
    assert state.stage is CleanupStage.MARKDOWN_UNWRAPPED
    assert state.text == CUE


def test_unwrap_leaves_unfenced_text() -> None:
    state = unwrap_markdown(start(CUE))
    assert state.text == CUE


def test_preamble_is_discarded() -> None:
    text = "Here are the subtitles:\n1\n00:00:00,500 --> 00:00:01,500\nHi there\n"
    assert extract_srt(text) == "1\n00:00:00,500 --> 00:00:01,500\nHi there"


def test_period_millisecond_separator() -> None:
    text = "1\n00:00:01.000 --> 00:00:02.000\nHello"
    assert extract_srt(text) == text


def test_refusal_has_no_cue() -> None:
    with pytest.raises(SrtNotFoundError):
        extract_srt("I cannot process this audio.")


def test_empty_response_has_no_cue() -> None:
    with pytest.raises(SrtNotFoundError):
        extract_srt("   ")


def test_fenced_block_without_cue() -> None:
    with pytest.raises(SrtNotFoundError):
        extract_srt("```srt\nnothing useful here\n```")


def test_anchor_keeps_trailing_content() -> None:
    text = "Intro\n1\n00:00:01,000 --> 00:00:02,000\nHello\n\nThanks for listening!"
    state = anchor_first_cue(unwrap_markdown(start(text)))
    assert state.stage is CleanupStage.CUE_ANCHORED
    assert state.text.startswith("1\n00:00:01,000")
    assert state.text.endswith("Thanks for listening!")


def test_multiple_cues_are_kept() -> None:
    text = (
        "1\n00:00:01,234 --> 00:00:03,456\nFirst.\n\n"
        "2\n00:00:04,567 --> 00:00:06,789\nSecond.\n"
    )
    assert extract_srt(text) == text.strip()


def test_srt_output_path() -> None:
    assert srt_output_path(Path("in/talk.mp3"), Path("out")) == Path("out/talk.srt")
    assert srt_output_path(Path("in/talk.mp3"), Path("out"), "en") == Path("out/talk.en.srt")


def test_write_srt_file_creates_parent_dirs(tmp_path: Path) -> None:
    out = tmp_path / "nested" / "talk.srt"
    write_srt_file(out, CUE)
    assert out.read_text(encoding="utf-8") == f"{CUE}\n"


def test_uppercase_fence_tag() -> None:
    assert extract_srt(f"```SRT\n{CUE}\n```") == CUE


def test_fence_closed_on_same_line() -> None:
    assert extract_srt(f"```srt\n{CUE}```") == CUE
