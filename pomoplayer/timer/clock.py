"""Countdown clock — the only thing in PomoPlayer that decrements time."""

from __future__ import annotations

from PyQt6.QtCore import QObject, QTimer, pyqtSignal


TICK_INTERVAL_MS = 1000


class Clock(QObject):
    """Second-granularity countdown driven by a single ``QTimer``.

    Signals
    -------
    tick(remaining_seconds: int)
        Emitted after every decrement and after ``reset_to``.
    running_changed(is_running: bool)
        Emitted when ``start``/``pause``/``reset_to`` flip the running
        flag.  Reaching zero does *not* emit it — ``completed`` does.
    completed()
        Emitted exactly once when the countdown reaches zero.  The
        interval is already stopped when handlers run.
    """

    tick = pyqtSignal(int)
    running_changed = pyqtSignal(bool)
    completed = pyqtSignal()

    def __init__(self, seconds: int, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._remaining: int = seconds
        self._running: bool = False
        self._has_ever_started: bool = False

        self._qt_timer = QTimer(self)
        self._qt_timer.setInterval(TICK_INTERVAL_MS)
        self._qt_timer.timeout.connect(self._on_tick)

    @property
    def remaining(self) -> int:
        return self._remaining

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def has_ever_started(self) -> bool:
        return self._has_ever_started

    def clear_started(self) -> None:
        """Forget that this session was ever started.  Ignored while running."""
        if not self._running:
            self._has_ever_started = False

    def start(self) -> None:
        if self._running:
            return
        self._running = True
        self._has_ever_started = True
        self._qt_timer.start()
        self.running_changed.emit(True)

    def pause(self) -> None:
        self._qt_timer.stop()
        if self._running:
            self._running = False
            self.running_changed.emit(False)

    def reset_to(self, seconds: int) -> None:
        self._qt_timer.stop()
        self._remaining = seconds
        was_running = self._running
        self._running = False
        self.tick.emit(self._remaining)
        if was_running:
            self.running_changed.emit(False)

    def _on_tick(self) -> None:
        if not self._running:
            return
        self._remaining = max(0, self._remaining - 1)
        if self._remaining == 0:
            self._qt_timer.stop()
            self._running = False
            self.tick.emit(0)
            self.completed.emit()
            return
        self.tick.emit(self._remaining)
