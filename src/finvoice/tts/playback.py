"""Spoken response playback with estimated progress.

Synthesis engines expose start/end/error events but no timeline. The
duration is therefore estimated from the word count and progress is
computed from elapsed wall-clock time against that estimate. Progress is
an approximation, and so is seeking: audio cannot be repositioned
mid-utterance, so seeks only move the estimate, except that seeking back
to the start replays the utterance and seeking past the end stops it.
"""

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from ..audio.resources import AudioOwner, AudioResourceManager
from ..errors import EngineError
from .engine import SpeechEngine
from .sanitize import WORDS_PER_MINUTE, estimate_duration, sanitize_for_speech

logger = logging.getLogger(__name__)

SEEK_STEP_S: float = 10.0
PROGRESS_INTERVAL_S: float = 0.1


class PlaybackStatus(Enum):
    """Playback states. STOPPED is reachable from every state."""

    STOPPED = "stopped"
    PLAYING = "playing"
    PAUSED = "paused"


@dataclass(frozen=True)
class PlaybackState:
    """Snapshot of playback.

    Attributes:
        status: Current playback status
        current_time: Estimated seconds spoken so far
        duration: Estimated total seconds
        progress: Percent of the estimate elapsed (0-100)
        text: Sanitized text being spoken (kept after stop for replay)
        message_index: Index of the message being spoken, if given
    """

    status: PlaybackStatus = PlaybackStatus.STOPPED
    current_time: float = 0.0
    duration: float = 0.0
    progress: float = 0.0
    text: str = ""
    message_index: int | None = None

    @property
    def is_playing(self) -> bool:
        return self.status is not PlaybackStatus.STOPPED

    @property
    def is_paused(self) -> bool:
        return self.status is PlaybackStatus.PAUSED


class ResponseSpeech:
    """Controls playback of spoken responses.

    Example:
        speech = ResponseSpeech(engine, language="es")
        speech.play("Tu balance es $1,200")
        speech.pause()
        speech.resume()
        speech.seek_backward()
    """

    def __init__(
        self,
        engine: SpeechEngine,
        language: str = "es",
        words_per_minute: int = WORDS_PER_MINUTE,
        seek_step_seconds: float = SEEK_STEP_S,
        progress_interval_seconds: float = PROGRESS_INTERVAL_S,
        voice: str | None = None,
        on_progress: Callable[[PlaybackState], None] | None = None,
        resources: AudioResourceManager | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize response speech.

        Args:
            engine: Speech synthesis engine
            language: Two-letter synthesis language
            words_per_minute: Speaking rate used for the duration estimate
            seek_step_seconds: Seconds moved by one seek
            progress_interval_seconds: Period of progress updates while playing
            voice: Engine voice name, or None for the language default
            on_progress: Called with a state snapshot on every tick
            resources: Audio channel manager shared with capture
            clock: Monotonic time source
        """
        self._engine = engine
        self.language = language
        self._wpm = words_per_minute
        self._seek_step = seek_step_seconds
        self._interval = progress_interval_seconds
        self._voice = voice
        self.on_progress = on_progress
        self._resources = resources
        self._clock = clock

        self._lock = threading.Lock()
        self._status = PlaybackStatus.STOPPED
        self._text = ""
        self._message_index: int | None = None
        self._duration = 0.0
        self._start_time = 0.0
        self._paused_elapsed = 0.0
        self._utterance_id = 0
        self._ticker: tuple[threading.Thread, threading.Event] | None = None

    # Readouts

    def _elapsed_unsafe(self) -> float:
        """Estimated elapsed seconds (must hold lock when calling)."""
        if self._status is PlaybackStatus.STOPPED:
            return 0.0
        if self._status is PlaybackStatus.PAUSED:
            elapsed = self._paused_elapsed
        else:
            elapsed = self._clock() - self._start_time
        return min(max(elapsed, 0.0), self._duration)

    def _state_unsafe(self) -> PlaybackState:
        current = self._elapsed_unsafe()
        progress = current / self._duration * 100 if self._duration > 0 else 0.0
        return PlaybackState(
            status=self._status,
            current_time=current,
            duration=self._duration,
            progress=min(100.0, progress),
            text=self._text,
            message_index=self._message_index,
        )

    @property
    def engine(self) -> SpeechEngine:
        return self._engine

    @property
    def state(self) -> PlaybackState:
        """Snapshot of the current playback state."""
        with self._lock:
            return self._state_unsafe()

    @property
    def status(self) -> PlaybackStatus:
        with self._lock:
            return self._status

    @property
    def current_time(self) -> float:
        return self.state.current_time

    @property
    def duration(self) -> float:
        return self.state.duration

    @property
    def progress(self) -> float:
        return self.state.progress

    # Controls

    def play(self, text: str, message_index: int | None = None) -> bool:
        """Speak text, replacing anything already playing.

        Returns:
            True if playback started.
        """
        cleaned = sanitize_for_speech(text)
        if not cleaned:
            return False

        self.stop()
        if self._resources is not None:
            self._resources.acquire(AudioOwner.PLAYBACK, self.stop)

        with self._lock:
            self._utterance_id += 1
            utterance_id = self._utterance_id
            self._text = cleaned
            self._message_index = message_index
            self._duration = estimate_duration(cleaned, self._wpm)
            self._start_time = self._clock()
            self._paused_elapsed = 0.0
            self._status = PlaybackStatus.PLAYING
            duration = self._duration

        self._start_ticker()
        logger.info(f"Playing response ({duration:.1f}s estimated)")
        logger.debug(f"Speaking: {cleaned}")

        try:
            self._engine.speak(
                cleaned,
                self.language,
                _UtteranceListener(self, utterance_id),
                words_per_minute=self._wpm,
                voice=self._voice,
            )
        except EngineError as e:
            logger.error(f"Speech engine failed: {e}")
            self.stop()
            return False
        return True

    def pause(self) -> None:
        """Pause playback and freeze progress."""
        with self._lock:
            if self._status is not PlaybackStatus.PLAYING:
                return
            self._paused_elapsed = self._elapsed_unsafe()
            self._status = PlaybackStatus.PAUSED
        self._stop_ticker()
        self._engine.pause()
        logger.debug("Playback paused")

    def resume(self) -> None:
        """Resume paused playback."""
        with self._lock:
            if self._status is not PlaybackStatus.PAUSED:
                return
            self._start_time = self._clock() - self._paused_elapsed
            self._status = PlaybackStatus.PLAYING
        self._engine.resume()
        self._start_ticker()
        logger.debug("Playback resumed")

    def stop(self) -> None:
        """Stop playback. Safe from any state."""
        with self._lock:
            was_active = self._status is not PlaybackStatus.STOPPED
            self._reset_unsafe()
        self._stop_ticker()
        if was_active:
            self._engine.cancel()
            logger.debug("Playback stopped")
        if self._resources is not None:
            self._resources.release(AudioOwner.PLAYBACK)

    def seek_backward(self) -> None:
        """Move back one step; at or before the start, replay from 0."""
        with self._lock:
            if not self._text:
                return
            target = self._elapsed_unsafe() - self._seek_step
            restart = target <= 0
            if not restart:
                self._shift_unsafe(-self._seek_step)
            text, index = self._text, self._message_index

        if restart:
            self.stop()
            self.play(text, index)

    def seek_forward(self) -> None:
        """Move forward one step; past the estimated end, stop."""
        with self._lock:
            if self._status is PlaybackStatus.STOPPED:
                return
            target = self._elapsed_unsafe() + self._seek_step
            finished = target >= self._duration
            if not finished:
                self._shift_unsafe(self._seek_step)

        if finished:
            self.stop()

    def replay(self) -> None:
        """Speak the last text again from the start."""
        with self._lock:
            text, index = self._text, self._message_index
        if text:
            self.play(text, index)

    def close(self) -> None:
        """Stop playback and release the audio channel."""
        self.stop()

    # Engine events

    def _handle_start(self, utterance_id: int) -> None:
        with self._lock:
            if utterance_id != self._utterance_id or self._status is PlaybackStatus.STOPPED:
                return
            if self._status is PlaybackStatus.PLAYING:
                self._start_time = self._clock()

    def _handle_end(self, utterance_id: int, error: str | None = None) -> None:
        with self._lock:
            if utterance_id != self._utterance_id or self._status is PlaybackStatus.STOPPED:
                return
            final = PlaybackState(
                status=PlaybackStatus.STOPPED,
                current_time=self._duration,
                duration=self._duration,
                progress=100.0,
                text=self._text,
                message_index=self._message_index,
            )
            self._reset_unsafe()

        self._stop_ticker()
        if self._resources is not None:
            self._resources.release(AudioOwner.PLAYBACK)

        if error is not None:
            logger.error(f"Speech synthesis error: {error}")
            return
        logger.debug("Playback finished")
        if self.on_progress is not None:
            self.on_progress(final)

    # Internals

    def _shift_unsafe(self, seconds: float) -> None:
        """Move the estimate by seconds (must hold lock when calling)."""
        if self._status is PlaybackStatus.PAUSED:
            self._paused_elapsed = min(max(self._paused_elapsed + seconds, 0.0), self._duration)
        else:
            self._start_time -= seconds

    def _reset_unsafe(self) -> None:
        """Return to Stopped, keeping the text for replay (must hold lock)."""
        self._status = PlaybackStatus.STOPPED
        self._utterance_id += 1
        self._start_time = 0.0
        self._paused_elapsed = 0.0
        self._duration = 0.0
        self._message_index = None

    def _start_ticker(self) -> None:
        self._stop_ticker()
        stop_event = threading.Event()
        thread = threading.Thread(
            target=self._tick_loop,
            args=(stop_event,),
            daemon=True,
            name="finvoice-playback-progress",
        )
        with self._lock:
            self._ticker = (thread, stop_event)
        thread.start()

    def _stop_ticker(self) -> None:
        with self._lock:
            ticker, self._ticker = self._ticker, None
        if ticker is None:
            return
        thread, stop_event = ticker
        stop_event.set()
        if thread is not threading.current_thread():
            thread.join(timeout=1.0)

    def _tick_loop(self, stop_event: threading.Event) -> None:
        while not stop_event.wait(timeout=self._interval):
            state = self.state
            if state.status is not PlaybackStatus.PLAYING or self.on_progress is None:
                continue
            try:
                self.on_progress(state)
            except Exception as e:
                logger.warning(f"Progress callback failed: {e}")


class _UtteranceListener:
    """Forwards one utterance's engine events; stale utterances are ignored."""

    def __init__(self, speech: ResponseSpeech, utterance_id: int) -> None:
        self._speech = speech
        self._utterance_id = utterance_id

    def on_start(self) -> None:
        self._speech._handle_start(self._utterance_id)

    def on_end(self) -> None:
        self._speech._handle_end(self._utterance_id)

    def on_error(self, message: str) -> None:
        self._speech._handle_end(self._utterance_id, error=message)


__all__ = [
    "PROGRESS_INTERVAL_S",
    "SEEK_STEP_S",
    "PlaybackState",
    "PlaybackStatus",
    "ResponseSpeech",
]
