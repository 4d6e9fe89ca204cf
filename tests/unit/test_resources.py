"""Unit tests for the shared audio channel."""

from unittest.mock import MagicMock

from finvoice.audio import AudioOwner, AudioResourceManager, default_resources


class TestAudioResourceManager:
    """Tests for AudioResourceManager."""

    def test_starts_free(self) -> None:
        """Verify nobody holds a new channel."""
        assert AudioResourceManager().holder is None

    def test_acquire_releases_previous_holder(self) -> None:
        """Test taking the channel stops the other component."""
        resources = AudioResourceManager()
        stop_capture, stop_playback = MagicMock(), MagicMock()

        resources.acquire(AudioOwner.CAPTURE, stop_capture)
        resources.acquire(AudioOwner.PLAYBACK, stop_playback)

        stop_capture.assert_called_once()
        stop_playback.assert_not_called()
        assert resources.holder == AudioOwner.PLAYBACK

    def test_reacquire_by_same_owner(self) -> None:
        """Test an owner taking the channel again does not stop itself."""
        resources = AudioResourceManager()
        stop_playback = MagicMock()

        resources.acquire(AudioOwner.PLAYBACK, stop_playback)
        resources.acquire(AudioOwner.PLAYBACK, stop_playback)

        stop_playback.assert_not_called()

    def test_release_by_non_holder_is_noop(self) -> None:
        """Test only the holder can release the channel."""
        resources = AudioResourceManager()
        resources.acquire(AudioOwner.PLAYBACK, MagicMock())

        resources.release(AudioOwner.CAPTURE)
        assert resources.holder == AudioOwner.PLAYBACK

        resources.release(AudioOwner.PLAYBACK)
        assert resources.holder is None

    def test_release_callback_may_release(self) -> None:
        """Test a release callback that gives the channel back does not deadlock."""
        resources = AudioResourceManager()
        resources.acquire(AudioOwner.CAPTURE, lambda: resources.release(AudioOwner.CAPTURE))

        resources.acquire(AudioOwner.PLAYBACK, MagicMock())

        assert resources.holder == AudioOwner.PLAYBACK

    def test_default_resources_is_shared(self) -> None:
        """Test the process-wide manager is a single instance."""
        assert default_resources() is default_resources()
