"""CLI commands for Subtitler."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer

from .config import EngineConfig, get_config_path, load_config, resolve_api_key
from .logging import configure_logging
from .messages import LONG_AUDIO_HINT, describe_failure
from engine import LanguageMode, SubtitleOrchestrator, create_engine
from media.audio import AudioInput, MediaError, is_long_audio, probe_duration
from output.srt import srt_output_path, write_srt_file


def output_suffix(mode: LanguageMode) -> str:
    """Filename suffix for a language mode ("" keeps ``<stem>.srt``)."""

    return "en" if mode is LanguageMode.ENGLISH else ""


def create_cli_app() -> typer.Typer:
    """Create the Typer CLI app (kept as a factory to avoid global state)."""

    app = typer.Typer(
        add_completion=False,
        help="Generate SubRip (.srt) subtitles from audio using Google Gemini.",
        no_args_is_help=True,
    )

    @app.command("run")
    def run(
        input_file: Path = typer.Argument(
            ...,
            exists=True,
            readable=True,
            dir_okay=False,
            help="Path to an audio file (.mp3, .wav, .webm, .ogg, .m4a, .flac, ...).",
        ),
        out: Optional[Path] = typer.Option(
            None,
            "--out",
            "-o",
            file_okay=False,
            dir_okay=True,
            help="Output directory for the .srt file (defaults to input file directory).",
        ),
        language: Optional[LanguageMode] = typer.Option(
            None,
            "--language",
            "-l",
            case_sensitive=False,
            help="Keep the spoken language or translate to English (default from config).",
        ),
        model: Optional[str] = typer.Option(
            None,
            "--model",
            help="Gemini model identifier (overrides config; default: gemini-2.5-flash).",
        ),
        stdout: bool = typer.Option(
            False,
            "--stdout",
            help="Print the subtitles instead of writing a file.",
        ),
        verbose: bool = typer.Option(
            False,
            "--verbose",
            help="Enable debug logging.",
        ),
    ) -> None:
        """Generate subtitles for a single audio file."""

        configure_logging(verbose=verbose)
        logger = logging.getLogger("subtitler")

        try:
            config = load_config()
            engine_config = EngineConfig(
                backend=config.engine.backend,
                model=model or config.engine.model,
                api_key_env=config.engine.api_key_env,
            )
            api_key = resolve_api_key(engine_config)
            service = create_engine(engine_config, api_key=api_key)
        except ValueError as exc:
            typer.secho(f"Config error: {exc}", fg=typer.colors.RED, err=True)
            typer.secho(f"Config path: {get_config_path()}", fg=typer.colors.RED, err=True)
            raise typer.Exit(code=2) from exc

        mode = language or LanguageMode(config.subtitles.language)

        try:
            audio = AudioInput.from_path(input_file)
        except MediaError as exc:
            typer.secho(f"Media error: {exc}", fg=typer.colors.RED, err=True)
            raise typer.Exit(code=2) from exc

        if is_long_audio(probe_duration(audio)):
            typer.echo(LONG_AUDIO_HINT, err=True)

        try:
            logger.info("Generating %s subtitles: %s", mode.value, input_file.name)
            result = SubtitleOrchestrator(service).run(audio, mode)
        except ModuleNotFoundError as exc:
            typer.secho(str(exc), fg=typer.colors.RED, err=True)
            raise typer.Exit(code=2) from exc
        except Exception as exc:  # noqa: BLE001 - intentional CLI boundary
            typer.secho(f"Error: {exc}", fg=typer.colors.RED, err=True)
            raise typer.Exit(code=1) from exc

        if not result.ok:
            typer.secho(describe_failure(result.failure.kind), fg=typer.colors.RED, err=True)
            raise typer.Exit(code=1)

        if stdout:
            typer.echo(result.srt)
            return

        output_path = srt_output_path(input_file, out or input_file.parent, output_suffix(mode))
        try:
            write_srt_file(output_path, result.srt)
        except OSError as exc:
            typer.secho(f"Error: {exc}", fg=typer.colors.RED, err=True)
            raise typer.Exit(code=1) from exc

        typer.echo(str(output_path))

    @app.command("menu")
    def menu() -> None:
        """Open the interactive menu."""

        configure_logging(verbose=False)
        from .menu import run_menu

        run_menu()

    return app
