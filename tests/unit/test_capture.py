"""Unit tests for utterance capture and the recognizer layer."""

import time
from unittest.mock import MagicMock, call

import pytest

from finvoice.audio import AudioOwner, AudioResourceManager
from finvoice.config import STTConfig
from finvoice.stt import (
    CaptureErrorKind,
    MockRecognizer,
    UtteranceCapture,
    create_recognizer,
    error_message,
    map_error_code,
)


@pytest.fixture
def recognizer() -> MockRecognizer:
    """Create a mock recognizer."""
    return MockRecognizer()


class TestErrorMapping:
    """Tests for engine error codes."""

    @pytest.mark.parametrize(
        "code,kind",
        [
            ("not-allowed", CaptureErrorKind.PERMISSION_DENIED),
            ("service-not-allowed", CaptureErrorKind.PERMISSION_DENIED),
            ("no-speech", CaptureErrorKind.NO_SPEECH),
            ("network", CaptureErrorKind.NETWORK),
            ("audio-capture", CaptureErrorKind.UNKNOWN),
        ],
    )
    def test_map_error_code(self, code: str, kind: CaptureErrorKind) -> None:
        """Test each code maps to its kind."""
        assert map_error_code(code) == kind

    def test_error_messages_are_bilingual(self) -> None:
        """Test every kind has Spanish and English text."""
        for kind in CaptureErrorKind:
            assert error_message(kind, "es") != error_message(kind, "en")


class TestCaptureLifecycle:
    """Tests for starting and stopping a session."""

    def test_start_sets_listening(self, recognizer: MockRecognizer) -> None:
        """Test start opens a session on the engine."""
        capture = UtteranceCapture(recognizer, language="en")

        assert capture.start()
        assert capture.is_listening
        assert recognizer.is_active
        assert recognizer.language == "en"
        capture.close()

    def test_start_twice_is_refused(self, recognizer: MockRecognizer) -> None:
        """Test a second start while listening does nothing."""
        capture = UtteranceCapture(recognizer)
        capture.start()

        assert not capture.start()
        assert recognizer.start_count == 1
        capture.close()

    def test_stop_prevents_restart(self, recognizer: MockRecognizer) -> None:
        """Test an explicit stop ends the session without restarting."""
        on_end = MagicMock()
        capture = UtteranceCapture(recognizer, on_end=on_end)
        capture.start()

        capture.stop()

        assert not capture.is_listening
        assert recognizer.start_count == 1
        on_end.assert_called_once()

    def test_end_after_stop_does_not_restart(self) -> None:
        """Test a late end event after stop is not treated as a drop."""
        recognizer = MockRecognizer(end_on_stop=False)
        capture = UtteranceCapture(recognizer)
        capture.start()

        capture.stop()
        assert capture.is_listening
        recognizer.emit_end()

        assert not capture.is_listening
        assert recognizer.start_count == 1

    def test_stop_without_end_event_ends_at_cutoff(self) -> None:
        """Test a session whose end event never arrives still ends at the cutoff."""
        recognizer = MockRecognizer(end_on_stop=False)
        on_end = MagicMock()
        capture = UtteranceCapture(recognizer, max_duration_seconds=0.2, on_end=on_end)
        capture.start()

        capture.stop()
        time.sleep(0.5)

        assert not capture.is_listening
        on_end.assert_called_once()
        assert recognizer.stop_count == 2

        recognizer.emit_end()
        assert capture.start()
        capture.close()

    def test_toggle(self, recognizer: MockRecognizer) -> None:
        """Test toggling starts and stops."""
        capture = UtteranceCapture(recognizer)
        assert capture.toggle()
        assert not capture.toggle()
        assert not capture.is_listening

    def test_engine_refuses_to_start(self, recognizer: MockRecognizer) -> None:
        """Test an engine start failure is reported and ends the session."""
        on_error, on_end = MagicMock(), MagicMock()
        capture = UtteranceCapture(recognizer, on_error=on_error, on_end=on_end)
        recognizer.set_start_error("microphone busy")

        assert not capture.start()
        assert not capture.is_listening
        on_error.assert_called_once_with(CaptureErrorKind.UNKNOWN)
        on_end.assert_called_once()

    def test_set_language_forwards_to_engine(self, recognizer: MockRecognizer) -> None:
        """Test the language reaches the recognizer."""
        capture = UtteranceCapture(recognizer)
        capture.set_language("en")
        assert capture.language == "en"
        assert recognizer.language == "en"


class TestTranscript:
    """Tests for final and interim results."""

    def test_finals_accumulate_interims_do_not(self, recognizer: MockRecognizer) -> None:
        """Test only final fragments enter the transcript."""
        on_result = MagicMock()
        capture = UtteranceCapture(recognizer, on_result=on_result)
        capture.start()

        recognizer.emit_result("cuánto", is_final=False)
        assert capture.transcript == ""
        assert capture.interim == "cuánto"

        recognizer.emit_result("cuánto gasté", is_final=True)
        recognizer.emit_result("este", is_final=False)

        assert capture.transcript == "cuánto gasté"
        assert on_result.call_args_list == [
            call("cuánto", False),
            call("cuánto gasté", True),
            call("cuánto gasté este", False),
        ]
        capture.close()

    def test_transcript_spans_restarts(self, recognizer: MockRecognizer) -> None:
        """Test finals from before and after a restart are joined."""
        capture = UtteranceCapture(recognizer)
        capture.start()

        recognizer.emit_result("ir a", is_final=True)
        recognizer.emit_error("no-speech")
        recognizer.emit_result("gastos", is_final=True)

        assert capture.transcript == "ir a gastos"
        capture.close()

    def test_clear_transcript(self, recognizer: MockRecognizer) -> None:
        """Test the transcript can be emptied."""
        capture = UtteranceCapture(recognizer)
        capture.start()
        recognizer.emit_result("hola", is_final=True)

        capture.clear_transcript()

        assert capture.transcript == ""
        capture.close()

    def test_results_ignored_when_not_listening(self, recognizer: MockRecognizer) -> None:
        """Test stray results after the session are dropped."""
        on_result = MagicMock()
        capture = UtteranceCapture(recognizer, on_result=on_result)

        recognizer.emit_result("hola", is_final=True)

        on_result.assert_not_called()
        assert capture.transcript == ""


class TestRestartAndErrors:
    """Tests for restart-on-drop and error handling."""

    def test_no_speech_restarts_silently(self, recognizer: MockRecognizer) -> None:
        """Test a silence drop restarts without reporting an error."""
        on_error, on_end = MagicMock(), MagicMock()
        capture = UtteranceCapture(recognizer, on_error=on_error, on_end=on_end)
        capture.start()

        recognizer.emit_error("no-speech")

        assert capture.is_listening
        assert capture.restart_count == 1
        assert recognizer.start_count == 2
        on_error.assert_not_called()
        on_end.assert_not_called()
        capture.close()

    def test_engine_end_restarts(self, recognizer: MockRecognizer) -> None:
        """Test an engine ending on its own is restarted."""
        capture = UtteranceCapture(recognizer)
        capture.start()

        recognizer.emit_end()
        recognizer.emit_end()

        assert capture.is_listening
        assert capture.restart_count == 2
        capture.close()

    def test_restarts_bounded_by_max_duration(self, recognizer: MockRecognizer, clock) -> None:
        """Test repeated silence cannot extend a session past the cutoff."""
        on_end = MagicMock()
        capture = UtteranceCapture(recognizer, max_duration_seconds=5, on_end=on_end, clock=clock)
        capture.start()

        for _ in range(10):
            clock.advance(1)
            if not capture.is_listening:
                break
            recognizer.emit_error("no-speech")

        assert not capture.is_listening
        assert capture.restart_count == 4
        on_end.assert_called_once()

    def test_max_duration_timer_ends_session(self, recognizer: MockRecognizer) -> None:
        """Test the wall-clock cutoff ends a session the engine never ends."""
        on_end = MagicMock()
        capture = UtteranceCapture(recognizer, max_duration_seconds=0.1, on_end=on_end)
        capture.start()

        time.sleep(0.4)

        assert not capture.is_listening
        on_end.assert_called_once()
        assert recognizer.stop_count >= 1

    @pytest.mark.parametrize(
        "code,kind",
        [
            ("not-allowed", CaptureErrorKind.PERMISSION_DENIED),
            ("network", CaptureErrorKind.NETWORK),
            ("audio-capture", CaptureErrorKind.UNKNOWN),
        ],
    )
    def test_fatal_errors_end_session(
        self, recognizer: MockRecognizer, code: str, kind: CaptureErrorKind
    ) -> None:
        """Test non-silence errors are reported and not restarted."""
        on_error, on_end = MagicMock(), MagicMock()
        capture = UtteranceCapture(recognizer, on_error=on_error, on_end=on_end)
        capture.start()

        recognizer.emit_error(code)

        on_error.assert_called_once_with(kind)
        on_end.assert_called_once()
        assert not capture.is_listening
        assert recognizer.start_count == 1

    def test_aborted_while_stopping_is_ignored(self) -> None:
        """Test the abort caused by our own stop is not an error."""
        recognizer = MockRecognizer(end_on_stop=False)
        on_error = MagicMock()
        capture = UtteranceCapture(recognizer, on_error=on_error)
        capture.start()

        capture.stop()
        recognizer.emit_error("aborted")

        on_error.assert_not_called()
        assert not capture.is_listening

    def test_restart_failure_ends_session(self, recognizer: MockRecognizer) -> None:
        """Test a failed restart is reported once."""
        on_error = MagicMock()
        capture = UtteranceCapture(recognizer, on_error=on_error)
        capture.start()
        recognizer.set_start_error("device lost")

        recognizer.emit_end()

        assert not capture.is_listening
        on_error.assert_called_once_with(CaptureErrorKind.UNKNOWN)


class TestAudioChannel:
    """Tests for sharing the audio channel with playback."""

    def test_capture_holds_channel_while_listening(self, recognizer: MockRecognizer) -> None:
        """Test the channel is taken on start and given back on end."""
        resources = AudioResourceManager()
        capture = UtteranceCapture(recognizer, resources=resources)

        capture.start()
        assert resources.holder == AudioOwner.CAPTURE

        capture.stop()
        assert resources.holder is None

    def test_playback_stops_capture(self, recognizer: MockRecognizer) -> None:
        """Test taking the channel for playback stops capture."""
        resources = AudioResourceManager()
        capture = UtteranceCapture(recognizer, resources=resources)
        capture.start()

        resources.acquire(AudioOwner.PLAYBACK, MagicMock())

        assert not capture.is_listening
        assert resources.holder == AudioOwner.PLAYBACK


class TestCreateRecognizer:
    """Tests for the recognizer factory."""

    def test_mock_by_flag(self) -> None:
        """Test use_mock forces the mock."""
        assert isinstance(create_recognizer(STTConfig(engine="whisper"), use_mock=True), MockRecognizer)

    def test_mock_by_config(self) -> None:
        """Test the mock engine setting."""
        assert isinstance(create_recognizer(STTConfig(engine="mock")), MockRecognizer)
        assert isinstance(create_recognizer(None), MockRecognizer)
