"""Speech engine that prints instead of speaking.

Used by the CLI when no system voice is available.
"""

import sys
from typing import TextIO

from .engine import SpeechListener


class ConsoleSpeechEngine:
    """Writes each utterance to a stream and ends it immediately."""

    def __init__(self, stream: TextIO | None = None, prefix: str = "🔊 ") -> None:
        self._stream = stream or sys.stdout
        self._prefix = prefix

    @property
    def is_available(self) -> bool:
        return True

    def speak(
        self,
        text: str,
        language: str,
        listener: SpeechListener,
        words_per_minute: int = 150,
        voice: str | None = None,
    ) -> None:
        listener.on_start()
        print(f"{self._prefix}{text}", file=self._stream, flush=True)
        listener.on_end()

    def pause(self) -> None:
        pass

    def resume(self) -> None:
        pass

    def cancel(self) -> None:
        pass


__all__ = ["ConsoleSpeechEngine"]
