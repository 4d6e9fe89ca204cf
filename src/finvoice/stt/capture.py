"""Utterance capture over an unreliable recognition engine.

The engine may end a session on its own after silence while the caller
still wants to listen. While the restart flag is set, such drops are
restarted transparently. Only final fragments are appended to the
transcript; interim text is reported but never accumulated. A wall-clock
cutoff ends every session after the configured maximum, however many
restarts happened.
"""

import logging
import threading
import time
from collections.abc import Callable

from ..audio.resources import AudioOwner, AudioResourceManager
from ..errors import EngineError
from .recognizer import CaptureErrorKind, RecognitionResult, Recognizer, map_error_code

logger = logging.getLogger(__name__)

MAX_CAPTURE_DURATION_S: float = 60.0

_RECOVERABLE = (None, CaptureErrorKind.NO_SPEECH)


class UtteranceCapture:
    """Continuous capture session with restart-on-drop.

    Example:
        capture = UtteranceCapture(recognizer, on_result=handle)
        capture.start()
        ...
        capture.stop()
    """

    def __init__(
        self,
        recognizer: Recognizer,
        language: str = "es",
        max_duration_seconds: float = MAX_CAPTURE_DURATION_S,
        on_result: Callable[[str, bool], None] | None = None,
        on_error: Callable[[CaptureErrorKind], None] | None = None,
        on_end: Callable[[], None] | None = None,
        resources: AudioResourceManager | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize utterance capture.

        Args:
            recognizer: Recognition engine
            language: Two-letter recognition language
            max_duration_seconds: Hard cap on a session, restarts included
            on_result: Called with (text, is_final) for every result
            on_error: Called with the kind of a non-recoverable error
            on_end: Called once when a session finishes
            resources: Audio channel manager shared with playback
            clock: Monotonic time source
        """
        self._recognizer = recognizer
        self._language = language
        self._max_duration = max_duration_seconds
        self.on_result = on_result
        self.on_error = on_error
        self.on_end = on_end
        self._resources = resources
        self._clock = clock

        self._lock = threading.Lock()
        self._listening = False
        self._should_restart = False
        self._last_error: CaptureErrorKind | None = None
        self._started_at = 0.0
        self._restart_count = 0
        self._timer: threading.Timer | None = None
        self._final_parts: list[str] = []
        self._interim = ""

        self._recognizer.set_language(language)
        self._recognizer.set_listener(_EngineListener(self))

    @property
    def is_listening(self) -> bool:
        """Return True while a session is in progress."""
        with self._lock:
            return self._listening

    @property
    def transcript(self) -> str:
        """Final text accumulated over the session."""
        with self._lock:
            return " ".join(self._final_parts)

    @property
    def interim(self) -> str:
        """Current interim fragment, not yet final."""
        with self._lock:
            return self._interim

    @property
    def restart_count(self) -> int:
        """Automatic restarts in the current or last session."""
        with self._lock:
            return self._restart_count

    @property
    def language(self) -> str:
        return self._language

    def set_language(self, language: str) -> None:
        """Change the recognition language for the next session."""
        self._language = language
        self._recognizer.set_language(language)

    def clear_transcript(self) -> None:
        """Empty the accumulated transcript."""
        with self._lock:
            self._final_parts.clear()
            self._interim = ""

    def start(self) -> bool:
        """Start a capture session.

        Returns:
            True if a new session started, False if one was already running
            or the engine refused to start.
        """
        with self._lock:
            if self._listening:
                return False
            self._listening = True
            self._should_restart = True
            self._last_error = None
            self._restart_count = 0
            self._interim = ""
            self._started_at = self._clock()
            self._cancel_timer_unsafe()
            self._timer = threading.Timer(self._max_duration, self._handle_max_duration)
            self._timer.daemon = True
            self._timer.start()

        if self._resources is not None:
            self._resources.acquire(AudioOwner.CAPTURE, self.stop)

        try:
            self._recognizer.start()
        except EngineError as e:
            logger.error(f"Recognition engine failed to start: {e}")
            self._finish()
            self._emit_error(CaptureErrorKind.UNKNOWN)
            return False

        logger.info(f"Capture started (language={self._language})")
        return True

    def stop(self) -> None:
        """Stop the session. The restart flag is cleared before anything else.

        The session ends on the engine's end event. The cutoff timer stays
        armed until then, so an engine that never reports the end still
        cannot hold the session open past the maximum duration.
        """
        with self._lock:
            self._should_restart = False
            listening = self._listening
        if not listening:
            return
        logger.info("Capture stop requested")
        self._recognizer.stop()

    def toggle(self) -> bool:
        """Stop if listening, otherwise start.

        Returns:
            True if capture is listening afterwards.
        """
        if self.is_listening:
            self.stop()
            return False
        return self.start()

    # Engine events

    def _handle_results(self, result_index: int, results: list[RecognitionResult]) -> None:
        emitted: list[tuple[str, bool]] = []
        with self._lock:
            if not self._listening:
                return
            for result in results[result_index:]:
                text = result.transcript.strip()
                if not text:
                    continue
                if result.is_final:
                    self._final_parts.append(text)
                    self._interim = ""
                    emitted.append((text, True))
                else:
                    self._interim = text
                    preview = " ".join([*self._final_parts, text])
                    emitted.append((preview, False))

        for text, is_final in emitted:
            logger.debug(f"Capture result (final={is_final}): {text}")
            if self.on_result is not None:
                self.on_result(text, is_final)

    def _handle_error(self, code: str) -> None:
        kind = map_error_code(code)
        with self._lock:
            if not self._listening:
                return
            if code == "aborted" and not self._should_restart:
                return
            self._last_error = kind
            if kind is not CaptureErrorKind.NO_SPEECH:
                self._should_restart = False

        if kind is CaptureErrorKind.NO_SPEECH:
            logger.debug("No speech detected, session will restart")
            return
        logger.warning(f"Capture error: {code} ({kind.value})")
        self._emit_error(kind)

    def _handle_end(self) -> None:
        with self._lock:
            if not self._listening:
                return
            elapsed = self._clock() - self._started_at
            restart = (
                self._should_restart
                and self._last_error in _RECOVERABLE
                and elapsed < self._max_duration
            )
            if restart:
                self._last_error = None
                self._restart_count += 1

        if not restart:
            self._finish()
            return

        logger.debug(f"Engine ended on its own, restarting (#{self._restart_count})")
        try:
            self._recognizer.start()
        except EngineError as e:
            logger.error(f"Recognition engine failed to restart: {e}")
            self._finish()
            self._emit_error(CaptureErrorKind.UNKNOWN)
            return

        # stop() may have run while the engine was restarting
        with self._lock:
            stopped = not self._should_restart
        if stopped:
            self._recognizer.stop()

    def close(self) -> None:
        """Stop capture and detach from the engine."""
        self.stop()
        self._finish()
        self._recognizer.set_listener(None)

    # Internals

    def _handle_max_duration(self) -> None:
        """Hard cutoff: end the session whatever the engine is doing."""
        with self._lock:
            if not self._listening:
                return
            stop_requested = not self._should_restart
            self._should_restart = False
            self._timer = None
        if stop_requested:
            logger.warning("Recognition engine never reported the end of the session")
        else:
            logger.info(f"Capture reached {self._max_duration:.0f}s limit, stopping")
        self._recognizer.stop()
        self._finish()

    def _finish(self) -> None:
        with self._lock:
            if not self._listening:
                return
            self._listening = False
            self._should_restart = False
            self._interim = ""
            self._cancel_timer_unsafe()

        if self._resources is not None:
            self._resources.release(AudioOwner.CAPTURE)
        logger.info("Capture ended")
        if self.on_end is not None:
            self.on_end()

    def _emit_error(self, kind: CaptureErrorKind) -> None:
        if self.on_error is not None:
            self.on_error(kind)

    def _cancel_timer_unsafe(self) -> None:
        """Cancel timer without lock (must hold lock when calling)."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None


class _EngineListener:
    """Forwards recognizer events to the capture's handlers."""

    def __init__(self, capture: UtteranceCapture) -> None:
        self._capture = capture

    def on_results(self, result_index: int, results: list[RecognitionResult]) -> None:
        self._capture._handle_results(result_index, results)

    def on_error(self, code: str) -> None:
        self._capture._handle_error(code)

    def on_end(self) -> None:
        self._capture._handle_end()


__all__ = ["MAX_CAPTURE_DURATION_S", "UtteranceCapture"]
