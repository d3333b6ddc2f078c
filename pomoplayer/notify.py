"""Notification side effects: sounds, toasts, window title.

The engine only talks to a ``NotificationSink``.  ``QtNotificationSink``
routes to a ``SoundManager`` and a ``QMainWindow`` (title + status bar);
``NullNotificationSink`` does nothing, for headless use.
"""

from __future__ import annotations

from typing import Protocol

from PyQt6.QtWidgets import QMainWindow

from .audio.sounds import SoundKind, SoundManager


TOAST_TIMEOUT_MS = 4000


class NotificationSink(Protocol):
    def play_sound(self, kind: SoundKind) -> None: ...

    def show_toast(self, message: str) -> None: ...

    def set_document_title(self, text: str) -> None: ...


class NullNotificationSink:
    def play_sound(self, kind: SoundKind) -> None:
        pass

    def show_toast(self, message: str) -> None:
        pass

    def set_document_title(self, text: str) -> None:
        pass


class QtNotificationSink:
    """Plays cues through *sounds* and writes text onto *window*."""

    def __init__(self, window: QMainWindow, sounds: SoundManager | None = None) -> None:
        self._window = window
        self._sounds = sounds

    def play_sound(self, kind: SoundKind) -> None:
        if self._sounds is not None:
            self._sounds.play(kind)

    def show_toast(self, message: str) -> None:
        self._window.statusBar().showMessage(message, TOAST_TIMEOUT_MS)

    def set_document_title(self, text: str) -> None:
        self._window.setWindowTitle(text)

    def apply_settings(self, settings) -> None:
        """Follow the sound preferences in *settings*."""
        if self._sounds is None:
            return
        self._sounds.set_enabled(settings.sounds_enabled)
        self._sounds.set_cue(SoundKind.SESSION_END, settings.session_end_sound)
        self._sounds.set_cue(SoundKind.PAUSE_PROMPT, settings.pause_prompt_sound)
