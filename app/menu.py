"""Interactive TUI menu for Subtitler."""

from __future__ import annotations

import os
from pathlib import Path
import platform
import shutil
import threading
from typing import Optional

from textual.app import App, ComposeResult
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.screen import Screen
from textual.widgets import Button, Footer, Header, Input, Static

from .cli import output_suffix
from .config import (
    AppConfig,
    EngineConfig,
    OutputConfig,
    SubtitlesConfig,
    get_config_path,
    load_config,
    resolve_api_key,
    save_config,
)
from .messages import LONG_AUDIO_HINT, describe_failure
from .session import SessionBusyError, SubtitleSession
from engine import LanguageMode, SubtitleOrchestrator, SubtitleResult, create_engine
from media.audio import AudioInput, MediaError, is_supported_media
from output.srt import srt_output_path, write_srt_file


def run_menu() -> None:
    """Run the interactive menu."""

    MenuApp().run()


def _open_session(config: AppConfig, input_path: Path) -> SubtitleSession:
    """Build a session for one audio file; duration is measured later, off the UI thread."""

    api_key = resolve_api_key(config.engine)
    service = create_engine(config.engine, api_key=api_key)
    return SubtitleSession(SubtitleOrchestrator(service), AudioInput.from_path(input_path))


def _environment_status(config: AppConfig) -> str:
    """Return a formatted snapshot of what subtitle generation depends on."""

    api_key_set = bool(os.environ.get(config.engine.api_key_env, "").strip())
    lines = [
        f"Config: {get_config_path()}",
        f"Backend: {config.engine.backend} ({config.engine.model})",
        f"API key ({config.engine.api_key_env}): {'set' if api_key_set else 'not set'}",
        f"Default language: {config.subtitles.language}",
        f"Python: {platform.python_version()}",
        f"ffprobe: {'found' if shutil.which('ffprobe') else 'not found (no duration hints)'}",
    ]
    return "\n".join(lines)


class MenuApp(App[None]):
    """Top-level Textual app for the Subtitler menu."""

    CSS = """
    Screen {
        align: center middle;
    }

    .title {
        text-style: bold;
        margin: 0 0 1 0;
    }

    #menu, #form, #panel {
        width: 80;
    }

    #preview {
        height: 12;
        border: round $accent;
    }

    #message {
        margin-top: 1;
    }

    .error {
        color: red;
    }
    """

    BINDINGS = [("q", "quit", "Quit")]

    def on_mount(self) -> None:
        """Start at the main menu."""

        self.push_screen(MainMenuScreen())


class MainMenuScreen(Screen):
    """Main menu screen with navigation options."""

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        yield Static("Subtitler Menu", classes="title")
        with Vertical(id="menu"):
            yield Button("1) Generate subtitles", id="generate")
            yield Button("2) Settings", id="settings")
            yield Button("3) Status", id="status")
            yield Button("4) Exit", id="exit")
        yield Footer()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id
        if button_id == "generate":
            self.app.push_screen(GenerateScreen())
        elif button_id == "settings":
            self.app.push_screen(SettingsScreen())
        elif button_id == "status":
            self.app.push_screen(StatusScreen())
        elif button_id == "exit":
            self.app.exit()


class GenerateScreen(Screen):
    """Screen for generating subtitles and switching their language."""

    def __init__(self) -> None:
        super().__init__()
        self._config: AppConfig = AppConfig()
        self._session: Optional[SubtitleSession] = None
        self._output_dir: Optional[Path] = None

    def compose(self) -> ComposeResult:
        yield Header()
        yield Static("Generate subtitles", classes="title")
        with Vertical(id="form"):
            yield Static("Audio file:")
            yield Input(placeholder="/path/to/audio.mp3", id="input_path")
            yield Static("Output directory (optional):")
            yield Input(placeholder="Leave blank to use input folder", id="output_dir")
            with Horizontal():
                yield Button("Generate", id="run")
                yield Button("Original", id="original")
                yield Button("English", id="english")
                yield Button("Back", id="back")
            yield Static("", id="message")
            with VerticalScroll(id="preview"):
                yield Static("", id="srt", markup=False)
        yield Footer()

    def on_show(self) -> None:
        try:
            self._config = load_config()
        except ValueError as exc:
            self._set_message(f"Config error: {exc}", error=True)
            self._config = AppConfig()
        self._refresh_language_buttons()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id
        if button_id == "back":
            self.app.pop_screen()
        elif button_id == "run":
            self._start_new()
        elif button_id in {"original", "english"}:
            self._switch_language(LanguageMode(button_id))

    def _start_new(self) -> None:
        if self._session is not None and self._session.busy:
            return

        input_value = self.query_one("#input_path", Input).value.strip()
        if not input_value:
            self._set_message("Enter an audio file path.", error=True)
            return

        input_path = Path(input_value).expanduser()
        if not input_path.is_file():
            self._set_message(f"Input file does not exist: {input_path}", error=True)
            return
        if not is_supported_media(input_path):
            self._set_message("Unsupported file type. Use a common audio format.", error=True)
            return

        output_value = self.query_one("#output_dir", Input).value.strip()
        self._output_dir = Path(output_value).expanduser() if output_value else input_path.parent

        try:
            self._session = _open_session(self._config, input_path)
        except (ValueError, MediaError) as exc:
            self._set_message(str(exc), error=True)
            return

        self.query_one("#srt", Static).update("")
        self._launch(LanguageMode(self._config.subtitles.language))

    def _switch_language(self, mode: LanguageMode) -> None:
        session = self._session
        if session is None or session.srt is None or session.busy:
            return
        if mode is session.mode:
            return
        self._launch(mode)

    def _launch(self, mode: LanguageMode) -> None:
        session = self._session
        if session is None:
            return
        message = f"Generating {mode.value} subtitles..."
        self._set_message(message)
        self._set_busy(True)
        threading.Thread(
            target=self._generate_thread, args=(session, mode, message), daemon=True
        ).start()

    def _generate_thread(self, session: SubtitleSession, mode: LanguageMode, message: str) -> None:
        try:
            session.measure_duration()
            if session.long_audio:
                self.app.call_from_thread(self._set_message, f"{message} {LONG_AUDIO_HINT}", False)
            result = session.generate(mode)
            self.app.call_from_thread(self._show_result, session, result)
        except SessionBusyError as exc:
            self.app.call_from_thread(self._set_message, str(exc), True)
        except ModuleNotFoundError as exc:
            self.app.call_from_thread(self._set_message, str(exc), True)
        except Exception as exc:  # noqa: BLE001 - UI boundary
            self.app.call_from_thread(self._set_message, f"Error: {exc}", True)
        finally:
            self.app.call_from_thread(self._set_busy, False)

    def _show_result(self, session: SubtitleSession, result: SubtitleResult) -> None:
        if not result.ok:
            self._set_message(describe_failure(result.failure.kind), error=True)
            self._refresh_language_buttons()
            return

        self.query_one("#srt", Static).update(result.srt)
        self._refresh_language_buttons()
        if self._output_dir is None or session.audio.path is None:
            self._set_message("Subtitles generated.")
            return

        output_path = srt_output_path(session.audio.path, self._output_dir, output_suffix(session.mode))
        try:
            write_srt_file(output_path, result.srt)
        except OSError as exc:
            self._set_message(f"Error: {exc}", error=True)
            return
        self._set_message(f"Saved subtitles: {output_path}")

    def _refresh_language_buttons(self) -> None:
        session = self._session
        ready = session is not None and session.srt is not None and not session.busy
        for mode in LanguageMode:
            button = self.query_one(f"#{mode.value}", Button)
            button.disabled = not ready or (session is not None and session.mode is mode)

    def _set_message(self, text: str, error: bool = False) -> None:
        message = self.query_one("#message", Static)
        message.update(text)
        message.remove_class("error")
        if error:
            message.add_class("error")

    def _set_busy(self, busy: bool) -> None:
        self.query_one("#run", Button).disabled = busy
        if busy:
            for mode in LanguageMode:
                self.query_one(f"#{mode.value}", Button).disabled = True
        else:
            self._refresh_language_buttons()


class SettingsScreen(Screen):
    """Screen for viewing and updating config values."""

    def __init__(self) -> None:
        super().__init__()
        self._config: AppConfig = AppConfig()

    def compose(self) -> ComposeResult:
        yield Header()
        yield Static("Settings", classes="title")
        with Vertical(id="form"):
            yield Static("", id="config_path")
            yield Static("Model:")
            yield Input(id="model")
            yield Static("API key environment variable:")
            yield Input(id="api_key_env")
            yield Static("Default language (original or english):")
            yield Input(id="language")
            with Horizontal():
                yield Button("Save", id="save")
                yield Button("Reset to defaults", id="reset")
                yield Button("Back", id="back")
            yield Static("", id="message")
        yield Footer()

    def on_show(self) -> None:
        self._reload_config()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id
        if button_id == "back":
            self.app.pop_screen()
        elif button_id == "save":
            self._save()
        elif button_id == "reset":
            self._reset()

    def _reload_config(self) -> None:
        try:
            self._config = load_config()
        except ValueError as exc:
            self._set_message(f"Config error: {exc}", error=True)
            self._config = AppConfig()

        self.query_one("#config_path", Static).update(f"Config: {get_config_path()}")
        self._fill(self._config)

    def _fill(self, config: AppConfig) -> None:
        self.query_one("#model", Input).value = config.engine.model
        self.query_one("#api_key_env", Input).value = config.engine.api_key_env
        self.query_one("#language", Input).value = config.subtitles.language

    def _save(self) -> None:
        model = self.query_one("#model", Input).value.strip() or self._config.engine.model
        api_key_env = (
            self.query_one("#api_key_env", Input).value.strip() or self._config.engine.api_key_env
        )
        language = (
            self.query_one("#language", Input).value.strip().lower() or self._config.subtitles.language
        )

        new_config = AppConfig(
            engine=EngineConfig(
                backend=self._config.engine.backend,
                model=model,
                api_key_env=api_key_env,
            ),
            subtitles=SubtitlesConfig(language=language),
            output=OutputConfig(extension="srt"),
        )

        try:
            path = save_config(new_config)
        except ValueError as exc:
            self._set_message(f"Config error: {exc}", error=True)
            return

        self._config = new_config
        self._set_message(f"Saved: {path}")

    def _reset(self) -> None:
        defaults = AppConfig()
        try:
            path = save_config(defaults)
        except ValueError as exc:
            self._set_message(f"Config error: {exc}", error=True)
            return

        self._config = defaults
        self._fill(defaults)
        self._set_message(f"Reset to defaults: {path}")

    def _set_message(self, text: str, error: bool = False) -> None:
        message = self.query_one("#message", Static)
        message.update(text)
        message.remove_class("error")
        if error:
            message.add_class("error")


class StatusScreen(Screen):
    """Screen showing configuration and tool availability."""

    def compose(self) -> ComposeResult:
        yield Header()
        yield Static("Status", classes="title")
        with Vertical(id="panel"):
            yield Static("", id="stats")
            with Horizontal():
                yield Button("Refresh", id="refresh")
                yield Button("Back", id="back")
        yield Footer()

    def on_mount(self) -> None:
        self._refresh()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "back":
            self.app.pop_screen()
        elif event.button.id == "refresh":
            self._refresh()

    def _refresh(self) -> None:
        try:
            config = load_config()
        except ValueError as exc:
            self.query_one("#stats", Static).update(f"Config error: {exc}")
            return
        self.query_one("#stats", Static).update(_environment_status(config))
