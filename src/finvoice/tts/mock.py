"""Mock speech engine for testing.

``speak`` emits the start event synchronously; tests then end the
utterance with ``finish()`` or ``fail()``.
"""

from ..errors import EngineError
from .engine import SpeechListener


class MockSpeechEngine:
    """Mock speech engine for testing.

    Records every utterance so tests can assert on what was spoken.
    """

    def __init__(self) -> None:
        """Initialize mock speech engine."""
        self.spoken: list[tuple[str, str]] = []
        self.pause_count = 0
        self.resume_count = 0
        self.cancel_count = 0
        self._listener: SpeechListener | None = None
        self._error_message: str | None = None

    @property
    def is_available(self) -> bool:
        return True

    @property
    def is_speaking(self) -> bool:
        return self._listener is not None

    @property
    def last_text(self) -> str | None:
        return self.spoken[-1][0] if self.spoken else None

    def set_error(self, message: str | None) -> None:
        """Make the next ``speak`` calls raise EngineError (None clears)."""
        self._error_message = message

    def speak(
        self,
        text: str,
        language: str,
        listener: SpeechListener,
        words_per_minute: int = 150,
        voice: str | None = None,
    ) -> None:
        if self._error_message:
            raise EngineError(self._error_message, engine="mock")
        self.spoken.append((text, language))
        self._listener = listener
        listener.on_start()

    def pause(self) -> None:
        self.pause_count += 1

    def resume(self) -> None:
        self.resume_count += 1

    def cancel(self) -> None:
        self.cancel_count += 1
        self._listener = None

    def finish(self) -> None:
        """End the current utterance normally."""
        listener, self._listener = self._listener, None
        if listener is not None:
            listener.on_end()

    def fail(self, message: str = "synthesis failed") -> None:
        """End the current utterance with an error."""
        listener, self._listener = self._listener, None
        if listener is not None:
            listener.on_error(message)

    def clear(self) -> None:
        """Forget recorded utterances and counters."""
        self.spoken.clear()
        self.pause_count = 0
        self.resume_count = 0
        self.cancel_count = 0


__all__ = ["MockSpeechEngine"]
