"""Session engine — wires the clock, the cycle, and the pause prompt.

Controls
--------
toggle()                 start / pause (marks the session started)
reset()                  back to the full duration, prompt cancelled
skip()                   advance like a natural finish, silently
change_session_type(t)   jump to another session type, stopped
apply_settings(s)        validate, apply, persist
respond_to_prompt(a)     CONTINUE / RESET / REMIND on the pause prompt

Side effects (sounds, toasts, window title, media play/pause) are
requests to collaborators.  A collaborator that raises is logged and
ignored; the countdown and the prompt timers carry on untouched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from PyQt6.QtCore import QObject, pyqtSignal

from .audio.sounds import SoundKind
from .media.playback import PlaybackSynchronizer
from .notify import NotificationSink, NullNotificationSink
from .settings import (
    ConfigStoreError,
    PersistentConfigStore,
    Settings,
    ensure_valid,
)
from .timer.clock import Clock
from .timer.cycle import CycleConfig, SessionType, advance
from .timer.idle_prompt import IdlePromptScheduler, PromptAction

logger = logging.getLogger(__name__)


APP_NAME = "PomoPlayer"

TOAST_MESSAGES: dict[SessionType, str] = {
    SessionType.SHORT_BREAK: "Time for a short break!",
    SessionType.LONG_BREAK: "Time for a long break!",
    SessionType.WORK: "Time to focus!",
}


def format_time(seconds: int) -> str:
    """``MM:SS``, or ``H:MM:SS`` once an hour or more is left."""
    hrs, rest = divmod(max(0, seconds), 3600)
    mins, secs = divmod(rest, 60)
    formatted = f"{mins:02d}:{secs:02d}"
    return f"{hrs}:{formatted}" if hrs > 0 else formatted


def window_title(remaining: int, session_type: SessionType) -> str:
    label = "Focus" if session_type == SessionType.WORK else "Break"
    return f"{format_time(remaining)} - {label} | {APP_NAME}"


@dataclass(frozen=True)
class EngineSnapshot:
    session_type: SessionType
    remaining_seconds: int
    is_running: bool
    completed_work_sessions: int
    prompt_visible: bool


class SessionEngine(QObject):
    """Pomodoro session orchestrator.

    Signals
    -------
    tick(remaining_seconds: int)
        Emitted every second while running and whenever the clock is reset.
    state_changed(snapshot: EngineSnapshot)
        Emitted after every control operation and session transition.
    session_completed(data: dict)
        Emitted when a session finishes or is skipped.  Keys:
        ``session_type``, ``next_session_type``,
        ``completed_work_sessions``, ``skipped``.
    prompt_visibility_changed(visible: bool)
    settings_applied(settings: Settings)
    media_state_changed(playing: bool)
    """

    tick = pyqtSignal(int)
    state_changed = pyqtSignal(object)
    session_completed = pyqtSignal(object)
    prompt_visibility_changed = pyqtSignal(bool)
    settings_applied = pyqtSignal(object)
    media_state_changed = pyqtSignal(bool)

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        settings: Settings | None = None,
        store: PersistentConfigStore | None = None,
        notifier: NotificationSink | None = None,
        playback: PlaybackSynchronizer | None = None,
    ) -> None:
        super().__init__(parent)

        self._store = store
        if settings is None:
            settings = self._load_settings()
        ensure_valid(settings)
        self._settings: Settings = settings.copy()

        # ── cycle state ───────────────────────────────────────────────
        self._session_type: SessionType = SessionType.WORK
        self._completed_work: int = 0
        # length the clock was last reset to; differs from the settings
        # while a running session defers a duration change
        self._session_length: int = self._settings.work_duration

        # ── collaborators ─────────────────────────────────────────────
        self._notifier: NotificationSink = notifier or NullNotificationSink()
        self._playback: PlaybackSynchronizer | None = None
        self._media_playing: bool = False

        # ── clock + prompt ────────────────────────────────────────────
        self._clock = Clock(self._settings.work_duration, self)
        self._clock.tick.connect(self._on_clock_tick)
        self._clock.completed.connect(self._on_clock_completed)

        self._scheduler = IdlePromptScheduler(
            self._clock,
            self._current_session_length,
            self,
            enabled=self._settings.pause_prompt_enabled,
            delay_minutes=self._settings.pause_prompt_delay,
        )
        self._scheduler.visibility_changed.connect(self._on_prompt_visibility)
        self._scheduler.reminder.connect(self._on_prompt_reminder)
        self._scheduler.resume_requested.connect(self._resume)
        self._scheduler.reset_requested.connect(self.reset)

        if playback is not None:
            self.attach_playback(playback)

        self._update_title()

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def settings(self) -> Settings:
        """A copy of the live settings."""
        return self._settings.copy()

    @property
    def session_type(self) -> SessionType:
        return self._session_type

    @property
    def remaining(self) -> int:
        return self._clock.remaining

    @property
    def is_running(self) -> bool:
        return self._clock.is_running

    @property
    def has_ever_started(self) -> bool:
        return self._clock.has_ever_started

    @property
    def completed_work_sessions(self) -> int:
        return self._completed_work

    @property
    def prompt_visible(self) -> bool:
        return self._scheduler.visible

    @property
    def media_playing(self) -> bool:
        return self._media_playing

    @property
    def has_playback(self) -> bool:
        return self._playback is not None

    @property
    def clock(self) -> Clock:
        return self._clock

    @property
    def scheduler(self) -> IdlePromptScheduler:
        return self._scheduler

    def duration_for(self, session_type: SessionType) -> int:
        return self._settings.duration_for(session_type)

    def snapshot(self) -> EngineSnapshot:
        return EngineSnapshot(
            session_type=self._session_type,
            remaining_seconds=self._clock.remaining,
            is_running=self._clock.is_running,
            completed_work_sessions=self._completed_work,
            prompt_visible=self._scheduler.visible,
        )

    # ══════════════════════════════════════════════════════════════════
    #  CONTROLS
    # ══════════════════════════════════════════════════════════════════

    def toggle(self) -> None:
        """Start or pause.  Media plays only while a work session runs."""
        if self._clock.is_running:
            self._clock.pause()
            self._sync_playback(False)
        else:
            self._clock.start()
            self._sync_playback(self._session_type == SessionType.WORK)
        self._emit_state()

    def reset(self) -> None:
        """Restore the full duration of the current session type."""
        self._restart_clock()
        self._clock.clear_started()
        self._scheduler.cancel()
        self._sync_playback(False)
        self._emit_state()

    def skip(self) -> None:
        """Advance to the next session without sound or toast."""
        self._complete_session(announce=False)

    def change_session_type(self, session_type: SessionType) -> None:
        if session_type == self._session_type:
            return
        self._session_type = session_type
        self._clamp_completed_work()
        self._restart_clock()
        self._clock.clear_started()
        self._scheduler.cancel()
        self._sync_playback(False)
        self._emit_state()

    def apply_settings(self, settings: Settings) -> None:
        """Validate and apply *settings*, then persist them.

        Raises :class:`~pomoplayer.settings.SettingsValidationError`
        before touching anything if a field is invalid.

        A new duration for the current session type resets the clock
        only while it is stopped; a running session keeps its
        countdown and the new value applies from the next transition.
        """
        ensure_valid(settings)
        old = self._settings
        new = settings.copy()
        current = self._session_type

        duration_changed = old.duration_for(current) != new.duration_for(current)
        prompt_changed = (
            old.pause_prompt_enabled != new.pause_prompt_enabled
            or old.pause_prompt_delay != new.pause_prompt_delay
        )

        self._settings = new

        self._clamp_completed_work()

        if duration_changed and not self._clock.is_running:
            self._restart_clock()
            self._clock.clear_started()

        if prompt_changed:
            self._scheduler.configure(new.pause_prompt_enabled, new.pause_prompt_delay)
        elif duration_changed:
            self._scheduler.reevaluate()

        if self._store is not None:
            try:
                self._store.save(new)
            except ConfigStoreError as e:
                logger.warning("Settings applied but not saved: %s", e)

        self.settings_applied.emit(new.copy())
        self._emit_state()

    def respond_to_prompt(self, action: PromptAction) -> None:
        self._scheduler.respond(action)

    # ── collaborators ─────────────────────────────────────────────────

    def set_notifier(self, notifier: NotificationSink) -> None:
        self._notifier = notifier
        self._update_title()

    def attach_playback(self, playback: PlaybackSynchronizer) -> None:
        """Use *playback* as the external player and follow its state."""
        self._playback = playback
        self._media_playing = bool(self._safely(playback.is_playing, default=False))
        self._safely(playback.on_playback_state_change, self._on_playback_state)

    def toggle_playback(self) -> None:
        """Play/pause the player without touching the timer."""
        if self._playback is None:
            return
        if self._media_playing:
            self._safely(self._playback.pause)
        else:
            self._safely(self._playback.play)

    def shutdown(self) -> None:
        """Stop the clock and drop every pending timer."""
        self._clock.pause()
        self._scheduler.cancel()

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL — transitions
    # ══════════════════════════════════════════════════════════════════

    def _full_duration(self) -> int:
        return self._settings.duration_for(self._session_type)

    def _current_session_length(self) -> int:
        return self._session_length

    def _restart_clock(self) -> None:
        """Reset the clock to the full duration of the current type."""
        self._session_length = self._full_duration()
        self._clock.reset_to(self._session_length)

    def _clamp_completed_work(self) -> None:
        # the count reaches the cycle length only while a long break is pending
        limit = self._settings.sessions_until_long_break
        if self._session_type != SessionType.LONG_BREAK and self._completed_work >= limit:
            self._completed_work = limit - 1

    def _on_clock_completed(self) -> None:
        self._complete_session(announce=True)

    def _complete_session(self, *, announce: bool) -> None:
        finished = self._session_type
        step = advance(
            finished,
            self._completed_work,
            CycleConfig(self._settings.sessions_until_long_break),
        )

        if announce:
            if self._settings.sounds_enabled:
                self._safely(self._notifier.play_sound, SoundKind.SESSION_END)
            self._safely(self._notifier.show_toast, TOAST_MESSAGES[step.next])

        self._session_type = step.next
        self._completed_work = step.completed_work
        self._restart_clock()
        self._scheduler.cancel()

        if self._settings.keep_running_on_transition:
            self._clock.start()
            self._sync_playback(step.next == SessionType.WORK)
        else:
            self._clock.clear_started()
            self._sync_playback(False)

        logger.info(
            "%s %s → %s (%d work sessions done)",
            "Finished" if announce else "Skipped",
            finished.value,
            step.next.value,
            step.completed_work,
        )
        self.session_completed.emit({
            "session_type": finished.value,
            "next_session_type": step.next.value,
            "completed_work_sessions": step.completed_work,
            "skipped": not announce,
        })
        self._emit_state()

    def _resume(self) -> None:
        if not self._clock.is_running:
            self.toggle()

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL — side effects
    # ══════════════════════════════════════════════════════════════════

    def _on_clock_tick(self, remaining: int) -> None:
        self.tick.emit(remaining)
        self._update_title()

    def _on_prompt_visibility(self, visible: bool) -> None:
        self.prompt_visibility_changed.emit(visible)
        self._emit_state()

    def _on_prompt_reminder(self) -> None:
        if self._settings.sounds_enabled:
            self._safely(self._notifier.play_sound, SoundKind.PAUSE_PROMPT)

    def _on_playback_state(self, playing: bool) -> None:
        self._media_playing = playing
        self.media_state_changed.emit(playing)

    def _sync_playback(self, play: bool) -> None:
        if self._playback is None:
            return
        self._safely(self._playback.play if play else self._playback.pause)

    def _update_title(self) -> None:
        self._safely(
            self._notifier.set_document_title,
            window_title(self._clock.remaining, self._session_type),
        )

    def _emit_state(self) -> None:
        self.state_changed.emit(self.snapshot())

    def _load_settings(self) -> Settings:
        if self._store is None:
            return Settings()
        loaded = self._safely(self._store.load)
        return loaded if isinstance(loaded, Settings) else Settings()

    @staticmethod
    def _safely(fn: Callable, *args, default=None):
        """Call a collaborator; log and swallow anything it raises."""
        try:
            return fn(*args)
        except Exception:
            logger.exception("%s failed", getattr(fn, "__qualname__", repr(fn)))
            return default
