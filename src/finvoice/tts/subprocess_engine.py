"""Speech engine backed by the system TTS command.

Uses macOS ``say`` or Linux ``espeak-ng``/``espeak``. The command runs
as a child process: pausing stops the process with SIGSTOP, resuming
continues it and cancelling terminates it.
"""

import logging
import platform
import shutil
import signal
import subprocess
import threading

from ..errors import EngineError
from .engine import SpeechListener

logger = logging.getLogger(__name__)

# Default system voices per language for macOS `say`
SAY_VOICES: dict[str, str] = {"es": "Paulina", "en": "Samantha"}


def find_tts_command() -> str | None:
    """Locate a usable TTS command for this platform."""
    if platform.system() == "Darwin":
        return shutil.which("say")
    return shutil.which("espeak-ng") or shutil.which("espeak")


class SubprocessSpeechEngine:
    """Speaks through a system TTS command in a child process."""

    def __init__(self, command: str | None = None) -> None:
        """Initialize subprocess speech engine.

        Args:
            command: Path to ``say``, ``espeak-ng`` or ``espeak``; detected if None
        """
        self._command = command or find_tts_command()
        self._process: subprocess.Popen[bytes] | None = None
        self._lock = threading.Lock()

    @property
    def is_available(self) -> bool:
        return self._command is not None

    def _build_command(
        self, text: str, language: str, words_per_minute: int, voice: str | None
    ) -> list[str]:
        if self._command.endswith("say"):
            return [
                self._command,
                "-v",
                voice or SAY_VOICES.get(language, SAY_VOICES["en"]),
                "-r",
                str(words_per_minute),
                text,
            ]
        return [self._command, "-v", voice or language, "-s", str(words_per_minute), text]

    def speak(
        self,
        text: str,
        language: str,
        listener: SpeechListener,
        words_per_minute: int = 150,
        voice: str | None = None,
    ) -> None:
        if not self.is_available:
            raise EngineError("No system TTS command found", engine="subprocess")

        self.cancel()
        cmd = self._build_command(text, language, words_per_minute, voice)
        try:
            process = subprocess.Popen(
                cmd,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.PIPE,
            )
        except OSError as e:
            raise EngineError(f"Could not start {cmd[0]}: {e}", engine="subprocess") from e

        with self._lock:
            self._process = process

        listener.on_start()
        threading.Thread(
            target=self._wait,
            args=(process, listener),
            daemon=True,
            name="finvoice-tts",
        ).start()

    def _wait(self, process: subprocess.Popen[bytes], listener: SpeechListener) -> None:
        _, stderr = process.communicate()
        with self._lock:
            if self._process is not process:
                # Cancelled or replaced
                return
            self._process = None

        if process.returncode == 0:
            listener.on_end()
        else:
            message = stderr.decode(errors="replace").strip() or f"exit code {process.returncode}"
            logger.error(f"TTS command failed: {message}")
            listener.on_error(message)

    def _signal(self, sig: signal.Signals) -> None:
        with self._lock:
            process = self._process
        if process is not None and process.poll() is None:
            process.send_signal(sig)

    def pause(self) -> None:
        self._signal(signal.SIGSTOP)

    def resume(self) -> None:
        self._signal(signal.SIGCONT)

    def cancel(self) -> None:
        with self._lock:
            process, self._process = self._process, None
        if process is None or process.poll() is not None:
            return
        # A stopped process must be continued before it can handle SIGTERM
        process.send_signal(signal.SIGCONT)
        process.terminate()
        try:
            process.wait(timeout=2.0)
        except subprocess.TimeoutExpired:
            process.kill()


__all__ = ["SAY_VOICES", "SubprocessSpeechEngine", "find_tts_command"]
