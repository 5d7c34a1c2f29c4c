"""Audio ingestion: read, encode and probe audio inputs."""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
import logging
import mimetypes
from pathlib import Path
import shutil
import subprocess
from typing import Optional


logger = logging.getLogger(__name__)

AUDIO_MIME_TYPES = {
    ".mp3": "audio/mpeg",
    ".wav": "audio/wav",
    ".webm": "audio/webm",
    ".ogg": "audio/ogg",
    ".oga": "audio/ogg",
    ".opus": "audio/ogg",
    ".m4a": "audio/mp4",
    ".aac": "audio/aac",
    ".flac": "audio/flac",
    ".aif": "audio/aiff",
    ".aiff": "audio/aiff",
}

# Above this many seconds callers show a "this may take a moment" hint.
LONG_AUDIO_SECONDS = 60.0


class MediaError(RuntimeError):
    """Base error for media handling failures."""


class UnsupportedMediaError(MediaError):
    """Raised when the input file type is not supported."""


class AudioReadError(MediaError):
    """Raised when the audio bytes cannot be read to completion."""


class FfprobeNotFoundError(MediaError):
    """Raised when ffprobe is not available on PATH."""


class FfprobeFailedError(MediaError):
    """Raised when an ffprobe command fails."""


@dataclass(frozen=True, slots=True)
class AudioInput:
    """A single user-selected audio clip.

    Exactly one of ``path`` or ``data`` is set. Bytes are only read when the
    input is encoded, so an unreadable file surfaces as ``AudioReadError``
    at that point rather than at selection time.
    """

    mime_type: str
    filename: Optional[str] = None
    path: Optional[Path] = None
    data: Optional[bytes] = None

    @classmethod
    def from_path(cls, path: Path) -> "AudioInput":
        """Create an input backed by a file on disk."""

        return cls(mime_type=guess_mime_type(path), filename=path.name, path=path)

    @classmethod
    def from_bytes(cls, data: bytes, mime_type: str, filename: Optional[str] = None) -> "AudioInput":
        """Create an input from an in-memory clip (e.g. a finished recording)."""

        return cls(mime_type=mime_type, filename=filename, data=data)

    def read_bytes(self) -> bytes:
        """Return the full byte content.

        Raises:
            AudioReadError: If the source cannot be read or is empty.
        """

        if self.data is not None:
            content = self.data
        elif self.path is not None:
            try:
                content = self.path.read_bytes()
            except OSError as exc:
                raise AudioReadError(f"Failed to read audio file {self.path}: {exc}") from exc
        else:
            raise AudioReadError("Audio input has no byte source.")

        if not content:
            raise AudioReadError(f"Audio input {self.display_name!r} is empty.")
        return content

    @property
    def display_name(self) -> str:
        if self.filename:
            return self.filename
        if self.path is not None:
            return self.path.name
        return "recording"


@dataclass(frozen=True, slots=True)
class EncodedPayload:
    """Transmission-safe (base64) audio content and its MIME type."""

    data: str
    mime_type: str

    def decode(self) -> bytes:
        """Return the raw audio bytes."""

        try:
            return base64.b64decode(self.data, validate=True)
        except binascii.Error as exc:
            raise ValueError(f"Payload is not valid base64: {exc}") from exc


def is_supported_media(path: Path) -> bool:
    """Return True if the file looks like an audio file we can send."""

    try:
        guess_mime_type(path)
    except UnsupportedMediaError:
        return False
    return True


def guess_mime_type(path: Path) -> str:
    """Return the audio MIME type for a path, based on its extension.

    Raises:
        UnsupportedMediaError: If the extension is not a known audio type.
    """

    suffix = path.suffix.lower()
    if suffix in AUDIO_MIME_TYPES:
        return AUDIO_MIME_TYPES[suffix]

    guessed, _encoding = mimetypes.guess_type(path.name)
    if guessed and guessed.startswith("audio/"):
        return guessed

    raise UnsupportedMediaError(
        f"Unsupported input type: {path.suffix!r}. Supported: {sorted(AUDIO_MIME_TYPES)}"
    )


def encode(audio: AudioInput) -> EncodedPayload:
    """Read the whole clip and encode it for transmission.

    Raises:
        AudioReadError: If the bytes cannot be read to completion.
    """

    content = audio.read_bytes()
    logger.debug("Encoded %s (%d bytes, %s)", audio.display_name, len(content), audio.mime_type)
    return EncodedPayload(
        data=base64.standard_b64encode(content).decode("ascii"),
        mime_type=audio.mime_type,
    )


def find_ffprobe() -> str:
    """Return the ffprobe executable path (or raise if missing)."""

    ffprobe = shutil.which("ffprobe")
    if not ffprobe:
        raise FfprobeNotFoundError(
            "ffprobe not found on PATH. Install FFmpeg and ensure `ffprobe` is available."
        )
    return ffprobe


def read_duration(audio: AudioInput) -> float:
    """Return the playback duration in seconds as reported by ffprobe.

    Raises:
        FfprobeNotFoundError: If ffprobe is not found.
        FfprobeFailedError: If ffprobe fails or reports no usable duration.
        AudioReadError: If an in-memory input has no bytes.
    """

    ffprobe = find_ffprobe()
    cmd = [
        ffprobe,
        "-v",
        "error",
        "-show_entries",
        "format=duration",
        "-of",
        "default=noprint_wrappers=1:nokey=1",
    ]
    if audio.path is not None:
        cmd.append(str(audio.path))
        stdin_data = None
    else:
        cmd.append("pipe:0")
        stdin_data = audio.read_bytes()

    try:
        result = subprocess.run(
            cmd,
            check=True,
            input=stdin_data,
            capture_output=True,
        )
    except subprocess.CalledProcessError as exc:
        details = (exc.stderr or b"").decode("utf-8", errors="replace").strip()
        raise FfprobeFailedError(f"ffprobe failed for {audio.display_name}: {details}") from exc

    output = result.stdout.decode("utf-8", errors="replace").strip()
    try:
        return float(output.splitlines()[0])
    except (IndexError, ValueError) as exc:
        raise FfprobeFailedError(f"ffprobe reported no duration: {output!r}") from exc


def probe_duration(audio: AudioInput) -> float:
    """Best-effort duration in seconds; 0.0 when it cannot be determined."""

    try:
        return read_duration(audio)
    except (MediaError, OSError) as exc:
        logger.debug("Could not determine duration of %s: %s", audio.display_name, exc)
        return 0.0


def is_long_audio(seconds: float) -> bool:
    """Return True when a clip is long enough to warrant a wait hint."""

    return seconds > LONG_AUDIO_SECONDS
