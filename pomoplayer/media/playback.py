"""External media player seam.

The engine never owns playback state; it asks a ``PlaybackSynchronizer``
to play or pause and listens for state changes the player reports.
"""

from __future__ import annotations

from typing import Callable, Protocol

from PyQt6.QtCore import QObject, QUrl
from PyQt6.QtMultimedia import QAudioOutput, QMediaPlayer


PlaybackCallback = Callable[[bool], None]


class PlaybackSynchronizer(Protocol):
    def play(self) -> None: ...

    def pause(self) -> None: ...

    def is_playing(self) -> bool: ...

    def on_playback_state_change(self, callback: PlaybackCallback) -> None: ...


class NullPlayback:
    """Player stand-in that only remembers what it was told."""

    def __init__(self) -> None:
        self._playing = False
        self._callbacks: list[PlaybackCallback] = []

    def play(self) -> None:
        self._set_playing(True)

    def pause(self) -> None:
        self._set_playing(False)

    def is_playing(self) -> bool:
        return self._playing

    def on_playback_state_change(self, callback: PlaybackCallback) -> None:
        self._callbacks.append(callback)

    def _set_playing(self, playing: bool) -> None:
        if playing == self._playing:
            return
        self._playing = playing
        for cb in list(self._callbacks):
            cb(playing)


class QtMediaPlayback(QObject):
    """``PlaybackSynchronizer`` on top of ``QMediaPlayer``.

    Plays any source Qt Multimedia can open (local file or direct
    stream URL).  Page URLs such as video-site links need an embedding
    player and are outside what this adapter handles.
    """

    def __init__(self, source: str = "", parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._player = QMediaPlayer(self)
        self._audio = QAudioOutput(self)
        self._player.setAudioOutput(self._audio)
        self._callbacks: list[PlaybackCallback] = []
        self._player.playbackStateChanged.connect(self._on_state_changed)
        if source:
            self.set_source(source)

    def set_source(self, source: str) -> None:
        if not source:
            self._player.setSource(QUrl())
            return
        url = QUrl(source)
        if url.isRelative():
            url = QUrl.fromLocalFile(source)
        self._player.setSource(url)

    def play(self) -> None:
        self._player.play()

    def pause(self) -> None:
        self._player.pause()

    def is_playing(self) -> bool:
        return self._player.playbackState() == QMediaPlayer.PlaybackState.PlayingState

    def on_playback_state_change(self, callback: PlaybackCallback) -> None:
        self._callbacks.append(callback)

    def _on_state_changed(self, state: QMediaPlayer.PlaybackState) -> None:
        playing = state == QMediaPlayer.PlaybackState.PlayingState
        for cb in list(self._callbacks):
            cb(playing)
