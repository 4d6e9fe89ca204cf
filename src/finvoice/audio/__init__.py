"""Audio module for finvoice.

Provides the exclusive hand-off of the audio channel between utterance
capture and response playback.
"""

from .resources import AudioOwner, AudioResourceManager, default_resources

__all__ = ["AudioOwner", "AudioResourceManager", "default_resources"]
