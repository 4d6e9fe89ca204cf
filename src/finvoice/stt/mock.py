"""Mock recognizer for testing.

Events are emitted synchronously from the calling thread, so tests can
script an engine session step by step.
"""

from ..errors import EngineError
from .recognizer import RecognitionListener, RecognitionResult


class MockRecognizer:
    """Controllable recognizer for unit and integration testing."""

    def __init__(self, end_on_stop: bool = True) -> None:
        """Initialize mock recognizer.

        Args:
            end_on_stop: Emit the end event from inside ``stop()``
        """
        self._listener: RecognitionListener | None = None
        self._active = False
        self._end_on_stop = end_on_stop
        self._start_error: str | None = None
        self.language: str = "es"
        self.start_count: int = 0
        self.stop_count: int = 0
        self._results: list[RecognitionResult] = []

    def set_listener(self, listener: RecognitionListener | None) -> None:
        self._listener = listener

    def set_language(self, language: str) -> None:
        self.language = language

    def set_start_error(self, message: str | None) -> None:
        """Make the next ``start()`` calls raise EngineError (None clears)."""
        self._start_error = message

    @property
    def is_active(self) -> bool:
        return self._active

    def start(self) -> None:
        if self._start_error:
            raise EngineError(self._start_error, engine="mock")
        if self._active:
            raise EngineError("Recognition already started", engine="mock")
        self._active = True
        self._results = []
        self.start_count += 1

    def stop(self) -> None:
        self.stop_count += 1
        if not self._active:
            return
        if self._end_on_stop:
            self.emit_end()

    def emit_result(self, text: str, is_final: bool = True, confidence: float = 0.9) -> None:
        """Emit a result as the next entry of the session's result list."""
        result = RecognitionResult(alternatives=[text], is_final=is_final, confidence=confidence)
        if self._results and not self._results[-1].is_final:
            self._results[-1] = result
        else:
            self._results.append(result)
        if self._listener is not None:
            self._listener.on_results(len(self._results) - 1, list(self._results))

    def emit_error(self, code: str, end: bool = True) -> None:
        """Emit an error code, followed by the end event unless ``end`` is False."""
        if self._listener is not None:
            self._listener.on_error(code)
        if end:
            self.emit_end()

    def emit_end(self) -> None:
        """End the session as the engine would on its own."""
        self._active = False
        if self._listener is not None:
            self._listener.on_end()

    def clear(self) -> None:
        """Reset counters and error state."""
        self.start_count = 0
        self.stop_count = 0
        self._start_error = None


__all__ = ["MockRecognizer"]
