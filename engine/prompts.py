"""Instruction text sent alongside the audio."""

from __future__ import annotations

from .base import LanguageMode


_ORIGINAL_INTRO = (
    "You are an expert audio transcriber. Your task is to transcribe the given audio and "
    "format the output as a standard SubRip (.srt) file. The transcription must be in the "
    "original language spoken in the audio."
)

_ENGLISH_INTRO = (
    "You are an expert audio transcriber and translator. Your primary task is to generate "
    "ENGLISH subtitles for the provided audio. The audio's original language may not be "
    "English. You must first transcribe the audio and then accurately translate it into "
    "English. Format the final translated English text as a standard SubRip (.srt) file."
)

_FORMAT_RULES = """\
- Ensure timestamps are accurate (HH:MM:SS,mmm --> HH:MM:SS,mmm) and correspond to the original audio's timing.
- The format must be strictly SRT.
- Do not include any additional explanatory text, greetings, apologies, or markdown formatting. Only the raw SRT content is allowed.

Example of the required format:
1
00:00:01,234 --> 00:00:03,456
This is the first subtitle.

2
00:00:04,567 --> 00:00:06,789
This is the second subtitle.
"""


def build_instruction(mode: LanguageMode) -> str:
    """Return the instruction text for a language mode."""

    intro = _ENGLISH_INTRO if LanguageMode(mode) is LanguageMode.ENGLISH else _ORIGINAL_INTRO
    return f"{intro}\n{_FORMAT_RULES}"
