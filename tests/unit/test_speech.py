"""Unit tests for spoken response playback."""

import io
import time
from collections.abc import Iterator
from unittest.mock import MagicMock

import pytest

from finvoice.audio import AudioOwner, AudioResourceManager
from finvoice.config import SpeechConfig
from finvoice.tts import (
    ConsoleSpeechEngine,
    MockSpeechEngine,
    PlaybackStatus,
    ResponseSpeech,
    create_speech_engine,
)

# 60 words at 150 wpm: 24 seconds estimated
LONG_TEXT = " ".join(["palabra"] * 60)


@pytest.fixture
def engine() -> MockSpeechEngine:
    """Create a mock speech engine."""
    return MockSpeechEngine()


@pytest.fixture
def speech(engine: MockSpeechEngine, clock) -> Iterator[ResponseSpeech]:
    """Create response speech over the mock engine and a fake clock."""
    speech = ResponseSpeech(engine, language="es", progress_interval_seconds=5.0, clock=clock)
    yield speech
    speech.close()


class TestPlay:
    """Tests for starting playback."""

    def test_play_speaks_sanitized_text(self, speech: ResponseSpeech, engine: MockSpeechEngine) -> None:
        """Test markdown and emoji are removed before speaking."""
        assert speech.play("**Hola** mundo 😀")

        assert engine.spoken == [("Hola mundo", "es")]
        assert speech.status == PlaybackStatus.PLAYING
        assert speech.state.is_playing

    def test_play_empty_after_sanitizing(self, speech: ResponseSpeech, engine: MockSpeechEngine) -> None:
        """Test text that sanitizes to nothing is not spoken."""
        assert not speech.play("😀 ✨")
        assert engine.spoken == []
        assert speech.status == PlaybackStatus.STOPPED

    def test_duration_is_estimated(self, speech: ResponseSpeech) -> None:
        """Test the duration comes from the word count."""
        speech.play(LONG_TEXT)
        assert speech.duration == pytest.approx(24.0)
        assert speech.current_time == 0.0

    def test_progress_follows_clock(self, speech: ResponseSpeech, clock) -> None:
        """Test progress is elapsed time against the estimate."""
        speech.play(LONG_TEXT)
        clock.advance(6)
        assert speech.progress == pytest.approx(25.0)

    def test_play_replaces_current(self, speech: ResponseSpeech, engine: MockSpeechEngine) -> None:
        """Test a new reply cancels the one playing."""
        speech.play("primero")
        speech.play("segundo")

        assert engine.cancel_count == 1
        assert engine.last_text == "segundo"
        assert speech.state.text == "segundo"

    def test_engine_failure_on_speak(self, speech: ResponseSpeech, engine: MockSpeechEngine) -> None:
        """Test an engine that refuses to speak leaves playback stopped."""
        engine.set_error("no voice")
        assert not speech.play("hola")
        assert speech.status == PlaybackStatus.STOPPED


class TestPauseResume:
    """Tests for pausing playback."""

    def test_pause_freezes_progress(
        self, speech: ResponseSpeech, engine: MockSpeechEngine, clock
    ) -> None:
        """Test the position does not move while paused."""
        speech.play(LONG_TEXT)
        clock.advance(5)

        speech.pause()
        clock.advance(10)

        assert speech.status == PlaybackStatus.PAUSED
        assert speech.state.is_paused
        assert speech.current_time == pytest.approx(5.0)
        assert engine.pause_count == 1

        speech.resume()
        clock.advance(2)

        assert speech.status == PlaybackStatus.PLAYING
        assert speech.current_time == pytest.approx(7.0)
        assert engine.resume_count == 1

    def test_pause_when_stopped_is_noop(self, speech: ResponseSpeech, engine: MockSpeechEngine) -> None:
        """Test pause and resume do nothing without playback."""
        speech.pause()
        speech.resume()
        assert engine.pause_count == 0
        assert engine.resume_count == 0


class TestSeek:
    """Tests for seeking."""

    def test_seek_backward_near_start_restarts(
        self, speech: ResponseSpeech, engine: MockSpeechEngine, clock
    ) -> None:
        """Test seeking back from 10s or less replays from the beginning."""
        speech.play(LONG_TEXT)
        clock.advance(10)

        speech.seek_backward()

        assert len(engine.spoken) == 2
        assert speech.status == PlaybackStatus.PLAYING
        assert speech.current_time == 0.0

    def test_seek_backward_moves_estimate(
        self, speech: ResponseSpeech, engine: MockSpeechEngine, clock
    ) -> None:
        """Test seeking back mid-utterance moves the position by one step."""
        speech.play(LONG_TEXT)
        clock.advance(15)

        speech.seek_backward()

        assert len(engine.spoken) == 1
        assert speech.current_time == pytest.approx(5.0)

    def test_seek_forward_moves_estimate(self, speech: ResponseSpeech, clock) -> None:
        """Test seeking forward moves the position by one step."""
        speech.play(LONG_TEXT)
        clock.advance(5)

        speech.seek_forward()

        assert speech.current_time == pytest.approx(15.0)

    def test_seek_forward_past_end_stops(
        self, speech: ResponseSpeech, engine: MockSpeechEngine, clock
    ) -> None:
        """Test seeking past the estimated end stops playback."""
        speech.play(LONG_TEXT)
        clock.advance(20)

        speech.seek_forward()

        assert speech.status == PlaybackStatus.STOPPED
        assert engine.cancel_count == 1

    def test_seek_while_paused(self, speech: ResponseSpeech, clock) -> None:
        """Test seeking moves the frozen position while paused."""
        speech.play(LONG_TEXT)
        clock.advance(3)
        speech.pause()

        speech.seek_forward()

        assert speech.status == PlaybackStatus.PAUSED
        assert speech.current_time == pytest.approx(13.0)


class TestStopAndEvents:
    """Tests for stopping and engine events."""

    def test_stop_from_playing(self, speech: ResponseSpeech, engine: MockSpeechEngine) -> None:
        """Test stop cancels the engine and resets the position."""
        speech.play("hola")

        speech.stop()

        assert speech.status == PlaybackStatus.STOPPED
        assert speech.current_time == 0.0
        assert engine.cancel_count == 1

    def test_stop_when_stopped(self, speech: ResponseSpeech, engine: MockSpeechEngine) -> None:
        """Test stop is safe with nothing playing."""
        speech.stop()
        assert engine.cancel_count == 0

    def test_replay_after_stop(self, speech: ResponseSpeech, engine: MockSpeechEngine) -> None:
        """Test the last text is kept for replay."""
        speech.play("hola")
        speech.stop()

        speech.replay()

        assert engine.spoken == [("hola", "es"), ("hola", "es")]

    def test_natural_end_reports_completion(self, engine: MockSpeechEngine, clock) -> None:
        """Test a finished utterance reports 100% and stops."""
        on_progress = MagicMock()
        speech = ResponseSpeech(
            engine, progress_interval_seconds=5.0, on_progress=on_progress, clock=clock
        )
        speech.play("hola mundo")

        engine.finish()

        assert speech.status == PlaybackStatus.STOPPED
        final = on_progress.call_args[0][0]
        assert final.progress == 100.0
        assert final.status == PlaybackStatus.STOPPED
        speech.close()

    def test_engine_error_stops_without_completion(self, engine: MockSpeechEngine, clock) -> None:
        """Test a synthesis error stops playback without a completion report."""
        on_progress = MagicMock()
        speech = ResponseSpeech(
            engine, progress_interval_seconds=5.0, on_progress=on_progress, clock=clock
        )
        speech.play("hola mundo")

        engine.fail("device lost")

        assert speech.status == PlaybackStatus.STOPPED
        on_progress.assert_not_called()
        speech.close()

    def test_stale_events_are_ignored(self, clock) -> None:
        """Test events from a replaced utterance do not touch the new one."""
        engine = MagicMock()
        speech = ResponseSpeech(engine, progress_interval_seconds=5.0, clock=clock)

        speech.play("primero")
        first_listener = engine.speak.call_args[0][2]
        speech.play("segundo")

        first_listener.on_end()
        first_listener.on_error("late failure")

        assert speech.status == PlaybackStatus.PLAYING
        assert speech.state.text == "segundo"
        speech.close()

    def test_progress_ticks_while_playing(self, engine: MockSpeechEngine) -> None:
        """Test progress callbacks arrive while playing."""
        on_progress = MagicMock()
        speech = ResponseSpeech(engine, progress_interval_seconds=0.02, on_progress=on_progress)
        speech.play(LONG_TEXT)

        time.sleep(0.2)
        speech.stop()

        assert on_progress.call_count >= 1
        assert on_progress.call_args_list[0][0][0].status == PlaybackStatus.PLAYING


class TestAudioChannel:
    """Tests for sharing the audio channel with capture."""

    def test_playback_holds_channel(self, engine: MockSpeechEngine, clock) -> None:
        """Test the channel is held while playing and released on end."""
        resources = AudioResourceManager()
        speech = ResponseSpeech(engine, resources=resources, progress_interval_seconds=5.0, clock=clock)

        speech.play("hola")
        assert resources.holder == AudioOwner.PLAYBACK

        engine.finish()
        assert resources.holder is None
        speech.close()

    def test_capture_stops_playback(self, engine: MockSpeechEngine, clock) -> None:
        """Test taking the channel for capture stops playback."""
        resources = AudioResourceManager()
        speech = ResponseSpeech(engine, resources=resources, progress_interval_seconds=5.0, clock=clock)
        speech.play("hola")

        resources.acquire(AudioOwner.CAPTURE, MagicMock())

        assert speech.status == PlaybackStatus.STOPPED
        assert engine.cancel_count == 1


class TestEngines:
    """Tests for engine selection and the console engine."""

    def test_create_mock(self) -> None:
        """Test the mock engine by flag and by config."""
        assert isinstance(create_speech_engine(use_mock=True), MockSpeechEngine)
        assert isinstance(create_speech_engine(SpeechConfig(engine="mock")), MockSpeechEngine)

    def test_create_console(self) -> None:
        """Test the console engine by config."""
        assert isinstance(create_speech_engine(SpeechConfig(engine="console")), ConsoleSpeechEngine)

    def test_console_engine_prints_and_ends(self) -> None:
        """Test the console engine writes the text and ends at once."""
        stream = io.StringIO()
        speech = ResponseSpeech(ConsoleSpeechEngine(stream=stream, prefix="> "))

        speech.play("Te llevo a **Gastos**.")

        assert stream.getvalue() == "> Te llevo a Gastos.\n"
        assert speech.status == PlaybackStatus.STOPPED
        speech.close()
