"""Process-wide exclusive access to the audio channel.

Only one of capture and playback may use audio at a time. Acquiring the
channel first releases the current holder so the assistant never hears
its own voice.
"""

import logging
import threading
from collections.abc import Callable
from enum import Enum

logger = logging.getLogger(__name__)


class AudioOwner(Enum):
    """Components that can hold the audio channel."""

    CAPTURE = "capture"
    PLAYBACK = "playback"


class AudioResourceManager:
    """Hands the audio channel between capture and playback.

    Example:
        resources = AudioResourceManager()
        resources.acquire(AudioOwner.PLAYBACK, speech.stop)
        resources.acquire(AudioOwner.CAPTURE, capture.stop)  # calls speech.stop()
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._holder: AudioOwner | None = None
        self._release: Callable[[], None] | None = None

    @property
    def holder(self) -> AudioOwner | None:
        """Current owner of the channel, if any."""
        with self._lock:
            return self._holder

    def acquire(self, owner: AudioOwner, release: Callable[[], None]) -> None:
        """Take the channel, stopping the previous holder first.

        Args:
            owner: Component taking the channel
            release: Called when another component takes the channel
        """
        with self._lock:
            previous, previous_release = self._holder, self._release
            self._holder = owner
            self._release = release

        if previous is not None and previous is not owner and previous_release is not None:
            logger.debug(f"Audio channel handed from {previous.value} to {owner.value}")
            previous_release()

    def release(self, owner: AudioOwner) -> None:
        """Give up the channel. No-op unless ``owner`` holds it."""
        with self._lock:
            if self._holder is not owner:
                return
            self._holder = None
            self._release = None


_default: AudioResourceManager | None = None
_default_lock = threading.Lock()


def default_resources() -> AudioResourceManager:
    """Return the process-wide resource manager."""
    global _default
    with _default_lock:
        if _default is None:
            _default = AudioResourceManager()
        return _default


__all__ = ["AudioOwner", "AudioResourceManager", "default_resources"]
