"""Media playback package."""

from .playback import PlaybackSynchronizer, NullPlayback, QtMediaPlayback

__all__ = ["PlaybackSynchronizer", "NullPlayback", "QtMediaPlayback"]
