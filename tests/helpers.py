"""Shared test helpers for PomoPlayer."""

from pomoplayer.engine import SessionEngine
from pomoplayer.media.playback import NullPlayback
from pomoplayer.settings import ConfigStoreError, Settings


class SignalCollector:
    """Utility to capture pyqtSignal emissions into a list."""

    def __init__(self):
        self.items: list = []

    def slot(self, *args):
        self.items.append(args if len(args) > 1 else args[0] if args else None)

    def __call__(self, *args):
        self.slot(*args)

    def __len__(self):
        return len(self.items)

    def __getitem__(self, idx):
        return self.items[idx]

    @property
    def last(self):
        return self.items[-1] if self.items else None

    def clear(self):
        self.items.clear()


class RecordingSink:
    """NotificationSink that remembers every request."""

    def __init__(self):
        self.sounds: list = []
        self.toasts: list[str] = []
        self.titles: list[str] = []

    def play_sound(self, kind):
        self.sounds.append(kind)

    def show_toast(self, message):
        self.toasts.append(message)

    def set_document_title(self, text):
        self.titles.append(text)


class FailingSink:
    """NotificationSink whose every call blows up."""

    def play_sound(self, kind):
        raise RuntimeError("audio device unavailable")

    def show_toast(self, message):
        raise RuntimeError("no toast host")

    def set_document_title(self, text):
        raise RuntimeError("no window")


class RecordingPlayer(NullPlayback):
    """NullPlayback that logs play/pause requests."""

    def __init__(self):
        super().__init__()
        self.calls: list[str] = []

    def play(self):
        self.calls.append("play")
        super().play()

    def pause(self):
        self.calls.append("pause")
        super().pause()


class SourcedPlayer(RecordingPlayer):
    """RecordingPlayer that also remembers every source it was given."""

    def __init__(self):
        super().__init__()
        self.sources: list[str] = []

    def set_source(self, source):
        self.sources.append(source)


class FailingPlayer(NullPlayback):
    def play(self):
        raise RuntimeError("player gone")

    def pause(self):
        raise RuntimeError("player gone")


class FailingStore:
    """PersistentConfigStore that loads defaults and never saves."""

    def __init__(self):
        self.save_attempts = 0

    def load(self):
        return Settings()

    def save(self, settings):
        self.save_attempts += 1
        raise ConfigStoreError("disk full")


def complete_session(engine: SessionEngine) -> None:
    """Fast-complete the current session by jumping to the last tick.

    Starts the clock first when it is stopped.
    """
    if not engine.is_running:
        engine.toggle()
    engine.clock._remaining = 1
    engine.clock._on_tick()


def pause_mid_session(engine: SessionEngine, ticks: int = 1) -> None:
    """Start, let *ticks* seconds pass, then pause."""
    if not engine.is_running:
        engine.toggle()
    for _ in range(ticks):
        engine.clock._on_tick()
    engine.toggle()


def fire_prompt_delay(scheduler) -> None:
    """Run the armed one-shot callback as if its delay had elapsed."""
    assert scheduler.pending_epoch is not None, "no prompt delay armed"
    scheduler._on_delay_elapsed(scheduler.pending_epoch)
