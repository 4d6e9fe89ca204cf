"""Faster-whisper recognizer over a PyAudio microphone stream.

Whisper has no streaming API, so audio is read in fixed windows and each
window is transcribed as one final result. A window with no speech ends
the session with a ``no-speech`` error, the same way hosted engines give
up after silence.
"""

import logging
import threading
import time
from typing import Any

from ..errors import EngineError
from .recognizer import RecognitionListener, RecognitionResult

try:
    from faster_whisper import WhisperModel

    FASTER_WHISPER_AVAILABLE = True
except ImportError:
    FASTER_WHISPER_AVAILABLE = False
    WhisperModel = None  # type: ignore

try:
    import pyaudio

    PYAUDIO_AVAILABLE = True
except ImportError:
    PYAUDIO_AVAILABLE = False
    pyaudio = None

logger = logging.getLogger(__name__)

_CHUNK_FRAMES = 1024
_SAMPLE_WIDTH = 2  # 16-bit audio


class WhisperRecognizer:
    """Speech recognizer using faster-whisper on microphone audio."""

    def __init__(
        self,
        model_size: str = "base",
        device: str = "cpu",
        compute_type: str = "int8",
        window_seconds: float = 4.0,
        sample_rate: int = 16000,
    ) -> None:
        """Initialize Whisper recognizer.

        Args:
            model_size: Whisper model size (tiny, base, small, etc.)
            device: Device to run on ("cpu", "cuda", "auto")
            compute_type: Computation type ("float16", "int8", "float32")
            window_seconds: Audio transcribed per result
            sample_rate: Microphone sample rate in Hz

        Raises:
            RuntimeError: If faster-whisper or PyAudio is not available
        """
        if not FASTER_WHISPER_AVAILABLE:
            raise RuntimeError(
                "faster-whisper not available. Install with: pip install faster-whisper"
            )
        if not PYAUDIO_AVAILABLE:
            raise RuntimeError("PyAudio not available. Install with: pip install pyaudio")

        self._model_size = model_size
        self._device = device
        self._compute_type = compute_type
        self._window_seconds = window_seconds
        self._sample_rate = sample_rate
        self._model: Any = None
        self._language = "es"
        self._listener: RecognitionListener | None = None
        self._thread: threading.Thread | None = None
        self._stop_event = threading.Event()
        self._active = False

    def set_listener(self, listener: RecognitionListener | None) -> None:
        self._listener = listener

    def set_language(self, language: str) -> None:
        self._language = language

    @property
    def is_active(self) -> bool:
        return self._active

    def _ensure_model_loaded(self) -> None:
        """Load model if not already loaded."""
        if self._model is not None:
            return

        logger.info(
            f"Loading Whisper model: {self._model_size} "
            f"(device={self._device}, compute={self._compute_type})"
        )
        start = time.time()
        self._model = WhisperModel(
            self._model_size,
            device=self._device,
            compute_type=self._compute_type,
        )
        load_time = (time.time() - start) * 1000
        logger.info(f"Whisper model loaded in {load_time:.0f}ms")

    def start(self) -> None:
        if self._active:
            raise EngineError("Recognition already started", engine="whisper")
        try:
            self._ensure_model_loaded()
        except Exception as e:
            raise EngineError(f"Could not load Whisper model: {e}", engine="whisper") from e

        self._active = True
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run_session,
            daemon=True,
            name="finvoice-whisper",
        )
        self._thread.start()

    def stop(self) -> None:
        self._stop_event.set()

    def _run_session(self) -> None:
        pa: Any = None
        stream: Any = None
        error_code: str | None = None
        try:
            pa = pyaudio.PyAudio()
            stream = pa.open(
                format=pyaudio.paInt16,
                channels=1,
                rate=self._sample_rate,
                input=True,
                frames_per_buffer=_CHUNK_FRAMES,
            )
            results: list[RecognitionResult] = []
            while not self._stop_event.is_set():
                audio = self._read_window(stream)
                text = self._transcribe(audio)
                if not text:
                    if not self._stop_event.is_set():
                        error_code = "no-speech"
                    break
                results.append(RecognitionResult(alternatives=[text], is_final=True))
                if self._listener is not None:
                    self._listener.on_results(len(results) - 1, list(results))
        except OSError as e:
            logger.error(f"Microphone unavailable: {e}")
            error_code = "not-allowed"
        except Exception:
            logger.exception("Whisper recognition failed")
            error_code = "unknown"
        finally:
            if stream is not None:
                stream.stop_stream()
                stream.close()
            if pa is not None:
                pa.terminate()
            self._active = False

        if error_code is not None and self._listener is not None:
            self._listener.on_error(error_code)
        if self._listener is not None:
            self._listener.on_end()

    def _read_window(self, stream: Any) -> bytes:
        frames_needed = int(self._window_seconds * self._sample_rate)
        chunks: list[bytes] = []
        frames = 0
        while frames < frames_needed and not self._stop_event.is_set():
            chunks.append(stream.read(_CHUNK_FRAMES, exception_on_overflow=False))
            frames += _CHUNK_FRAMES
        return b"".join(chunks)

    def _transcribe(self, audio: bytes) -> str:
        if len(audio) < _SAMPLE_WIDTH * _CHUNK_FRAMES:
            return ""

        import numpy as np

        audio_array = np.frombuffer(audio, dtype=np.int16).astype(np.float32) / 32768.0
        if self._sample_rate != 16000:
            ratio = 16000 / self._sample_rate
            new_length = int(len(audio_array) * ratio)
            indices = np.linspace(0, len(audio_array) - 1, new_length).astype(int)
            audio_array = audio_array[indices]

        start_time = time.time()
        segments, _info = self._model.transcribe(
            audio_array,
            language=self._language,
            beam_size=1,
            vad_filter=True,
        )
        text = " ".join(segment.text.strip() for segment in segments).strip()
        latency_ms = int((time.time() - start_time) * 1000)
        logger.debug(f"Transcribed window in {latency_ms}ms: '{text[:50]}'")
        return text


__all__ = ["FASTER_WHISPER_AVAILABLE", "PYAUDIO_AVAILABLE", "WhisperRecognizer"]
