"""Audio package."""

from .sounds import SoundManager, SoundKind

__all__ = ["SoundManager", "SoundKind"]
