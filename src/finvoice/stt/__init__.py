"""Speech-to-text module for finvoice.

Provides utterance capture over a recognition engine, with a
faster-whisper engine or a mock implementation.
"""

import logging
from typing import TYPE_CHECKING

from .capture import MAX_CAPTURE_DURATION_S, UtteranceCapture
from .mock import MockRecognizer
from .recognizer import (
    CaptureErrorKind,
    RecognitionListener,
    RecognitionResult,
    Recognizer,
    error_message,
    map_error_code,
)

if TYPE_CHECKING:
    from ..config import STTConfig

logger = logging.getLogger(__name__)


def create_recognizer(
    config: "STTConfig | None" = None,
    use_mock: bool = False,
) -> Recognizer:
    """Create a recognizer instance.

    Args:
        config: STT configuration
        use_mock: If True, return mock implementation for testing

    Returns:
        Recognizer implementation
    """
    if use_mock or config is None or config.engine == "mock":
        return MockRecognizer()

    try:
        from .whisper import WhisperRecognizer

        return WhisperRecognizer(
            model_size=config.model,
            device=config.device,
            compute_type=config.compute_type,
            window_seconds=config.window_seconds,
            sample_rate=config.sample_rate,
        )
    except RuntimeError as e:
        logger.warning(f"{e}; using mock recognizer")
        return MockRecognizer()


__all__ = [
    "MAX_CAPTURE_DURATION_S",
    "CaptureErrorKind",
    "MockRecognizer",
    "RecognitionListener",
    "RecognitionResult",
    "Recognizer",
    "UtteranceCapture",
    "create_recognizer",
    "error_message",
    "map_error_code",
]
