"""Speech synthesis engine protocol.

Engines report only lifecycle events (start, end, error). None of them
exposes a timeline, so playback progress is estimated by the caller.
"""

from typing import Protocol


class SpeechListener(Protocol):
    """Receiver of one utterance's lifecycle events."""

    def on_start(self) -> None:
        """Audio output began."""
        ...

    def on_end(self) -> None:
        """The utterance finished playing."""
        ...

    def on_error(self, message: str) -> None:
        """Synthesis failed."""
        ...


class SpeechEngine(Protocol):
    """Interface for speech synthesis engines.

    One utterance plays at a time; ``speak`` replaces whatever is playing.
    Cancelled utterances emit no further events.
    """

    def speak(
        self,
        text: str,
        language: str,
        listener: SpeechListener,
        words_per_minute: int = 150,
        voice: str | None = None,
    ) -> None:
        """Start speaking text without blocking.

        Raises:
            EngineError: If synthesis cannot start
        """
        ...

    def pause(self) -> None:
        """Pause the current utterance."""
        ...

    def resume(self) -> None:
        """Resume a paused utterance."""
        ...

    def cancel(self) -> None:
        """Stop the current utterance. Safe to call when idle."""
        ...

    @property
    def is_available(self) -> bool:
        """Return True if the engine can speak on this system."""
        ...


__all__ = ["SpeechEngine", "SpeechListener"]
