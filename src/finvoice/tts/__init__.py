"""Text-to-speech module for finvoice.

Provides response playback over a platform speech engine:
- macOS: native ``say`` command
- Linux: ``espeak-ng`` or ``espeak``
- Other: console output, or the mock engine for tests
"""

import logging
from typing import TYPE_CHECKING

from .console import ConsoleSpeechEngine
from .engine import SpeechEngine, SpeechListener
from .mock import MockSpeechEngine
from .playback import PlaybackState, PlaybackStatus, ResponseSpeech
from .sanitize import estimate_duration, sanitize_for_speech
from .subprocess_engine import SubprocessSpeechEngine

if TYPE_CHECKING:
    from ..config import SpeechConfig

logger = logging.getLogger(__name__)


def create_speech_engine(
    config: "SpeechConfig | None" = None,
    use_mock: bool = False,
) -> SpeechEngine:
    """Create the speech engine selected by configuration.

    Args:
        config: Speech configuration (optional)
        use_mock: If True, force the mock engine for testing

    Returns:
        SpeechEngine implementation. Falls back to the console engine
        when no system voice is available.
    """
    engine_name = config.engine if config is not None else "auto"

    if use_mock or engine_name == "mock":
        logger.info("TTS: Using MockSpeechEngine")
        return MockSpeechEngine()

    if engine_name == "console":
        return ConsoleSpeechEngine()

    engine = SubprocessSpeechEngine()
    if engine.is_available:
        logger.info("TTS: Using SubprocessSpeechEngine (system voice)")
        return engine

    if engine_name == "subprocess":
        logger.warning("TTS: No system TTS command found")
    logger.info("TTS: Using ConsoleSpeechEngine (fallback)")
    return ConsoleSpeechEngine()


__all__ = [
    "ConsoleSpeechEngine",
    "MockSpeechEngine",
    "PlaybackState",
    "PlaybackStatus",
    "ResponseSpeech",
    "SpeechEngine",
    "SpeechListener",
    "SubprocessSpeechEngine",
    "create_speech_engine",
    "estimate_duration",
    "sanitize_for_speech",
]
