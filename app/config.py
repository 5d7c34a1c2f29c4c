"""Configuration handling for Subtitler.

Subtitler loads an optional TOML file from OS-specific locations:

- Linux: ~/.config/subtitler/config.toml
- Windows: %APPDATA%\\subtitler\\config.toml

The API key itself is never stored in the file; ``[engine].api_key_env``
names the environment variable it is read from.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import os
from pathlib import Path
import platform
from typing import Any, Mapping, Optional

try:  # Python 3.11+
    import tomllib  # type: ignore
except ModuleNotFoundError:  # Python 3.10
    import tomli as tomllib  # type: ignore


LANGUAGES = ("original", "english")


@dataclass(frozen=True, slots=True)
class EngineConfig:
    """Configuration for the remote subtitle service."""

    backend: str = "gemini"
    model: str = "gemini-2.5-flash"
    api_key_env: str = "GEMINI_API_KEY"


@dataclass(frozen=True, slots=True)
class SubtitlesConfig:
    """Defaults for subtitle generation."""

    language: str = "original"


@dataclass(frozen=True, slots=True)
class OutputConfig:
    """Configuration for subtitle output."""

    extension: str = "srt"


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Top-level application configuration."""

    engine: EngineConfig = field(default_factory=EngineConfig)
    subtitles: SubtitlesConfig = field(default_factory=SubtitlesConfig)
    output: OutputConfig = field(default_factory=OutputConfig)


def get_config_path() -> Path:
    """Return the default configuration file path for the current OS."""

    system = platform.system().lower()
    if system == "windows":
        appdata = os.environ.get("APPDATA")
        if appdata:
            return Path(appdata) / "subtitler" / "config.toml"

        return Path.home() / "AppData" / "Roaming" / "subtitler" / "config.toml"

    return Path.home() / ".config" / "subtitler" / "config.toml"


def load_config(path: Path | None = None) -> AppConfig:
    """Load config from a TOML file, falling back to defaults if missing.

    Args:
        path: Optional explicit config path. When None, uses the OS default.

    Raises:
        ValueError: If the config contains unsupported values.
    """

    config_path = path or get_config_path()
    if not config_path.exists():
        return AppConfig()

    with config_path.open("rb") as f:
        try:
            raw = tomllib.load(f)
        except tomllib.TOMLDecodeError as exc:
            raise ValueError(f"Invalid TOML in {config_path}: {exc}") from exc

    defaults = AppConfig()
    engine_raw = _get_table(raw, "engine")
    subtitles_raw = _get_table(raw, "subtitles")
    output_raw = _get_table(raw, "output")

    engine = EngineConfig(
        backend=_get_str(engine_raw, "backend", default=defaults.engine.backend),
        model=_get_str(engine_raw, "model", default=defaults.engine.model),
        api_key_env=_get_str(engine_raw, "api_key_env", default=defaults.engine.api_key_env),
    )

    language = _get_str(subtitles_raw, "language", default=defaults.subtitles.language).lower()
    _check_language(language)

    extension = _get_str(output_raw, "extension", default=defaults.output.extension)
    _check_extension(extension)

    return AppConfig(
        engine=engine,
        subtitles=SubtitlesConfig(language=language),
        output=OutputConfig(extension="srt"),
    )


def save_config(config: AppConfig, path: Path | None = None) -> Path:
    """Save configuration to a TOML file.

    Args:
        config: Configuration values to persist.
        path: Optional explicit config path. When None, uses the OS default.

    Returns:
        The path that was written.

    Raises:
        ValueError: If unsupported values are provided.
    """

    _check_extension(config.output.extension)
    _check_language(config.subtitles.language)

    config_path = path or get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    content = _to_toml(config)
    config_path.write_text(content, encoding="utf-8")
    return config_path


def resolve_api_key(config: EngineConfig, environ: Optional[Mapping[str, str]] = None) -> str:
    """Return the API key from the environment variable named in config.

    Raises:
        ValueError: If the variable is unset or empty.
    """

    env = os.environ if environ is None else environ
    value = (env.get(config.api_key_env) or "").strip()
    if not value:
        raise ValueError(f"Missing API key: set the {config.api_key_env} environment variable.")
    return value


def _check_extension(extension: str) -> None:
    if extension.lower() != "srt":
        raise ValueError("Only SubRip output is supported: set [output].extension = 'srt'.")


def _check_language(language: str) -> None:
    if language not in LANGUAGES:
        raise ValueError(f"Invalid config: [subtitles].language must be one of {list(LANGUAGES)}.")


def _get_table(raw: dict[str, Any], key: str) -> dict[str, Any]:
    """Internal helper to get a TOML table as a dict."""

    value = raw.get(key)
    if value is None:
        return {}
    if isinstance(value, dict):
        return value
    raise ValueError(f"Invalid config: [{key}] must be a table.")


def _get_str(raw: dict[str, Any], key: str, default: str) -> str:
    """Internal helper to get a TOML string with a default."""

    value = raw.get(key)
    if value is None:
        return default
    if isinstance(value, str) and value.strip():
        return value.strip()
    raise ValueError(f"Invalid config: {key} must be a non-empty string.")


def _to_toml(config: AppConfig) -> str:
    """Serialize config data to TOML."""

    return (
        "[engine]\n"
        f'backend = "{config.engine.backend}"\n'
        f'model = "{config.engine.model}"\n'
        f'api_key_env = "{config.engine.api_key_env}"\n'
        "\n"
        "[subtitles]\n"
        f'language = "{config.subtitles.language}"\n'
        "\n"
        "[output]\n"
        'extension = "srt"\n'
    )
