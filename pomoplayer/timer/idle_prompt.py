"""Pause-prompt scheduler — nudges a user who paused and walked away.

States
------
IDLE        Nothing scheduled.
WAITING     One-shot delay armed; prompt appears when it fires.
PROMPTING   Prompt visible; reminder repeats every 5 s.

Transitions
-----------
IDLE → WAITING          clock paused mid-session (started, not full, enabled)
WAITING → PROMPTING     delay elapsed and its epoch is still live
PROMPTING → IDLE        CONTINUE (resume) or RESET
PROMPTING → WAITING     REMIND (re-armed for 2 min)
Any → IDLE              cancel(): clock resumed, session changed,
                        settings changed, teardown

Every arm and every cancel bumps ``epoch``.  The one-shot timer carries
the epoch it was armed with, so a callback that outlives its schedule
compares unequal and does nothing.
"""

from __future__ import annotations

import logging
from enum import Enum
from functools import partial
from typing import Callable

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from .clock import Clock

logger = logging.getLogger(__name__)


REMINDER_INTERVAL_MS = 5 * 1000
REMIND_DELAY_MS = 2 * 60 * 1000
DEFAULT_PROMPT_DELAY_MINUTES = 2


class PromptPhase(Enum):
    IDLE = "idle"
    WAITING = "waiting"
    PROMPTING = "prompting"


class PromptAction(Enum):
    CONTINUE = "continue"
    RESET = "reset"
    REMIND = "remind"


class IdlePromptScheduler(QObject):
    """Owns the one-shot prompt delay and the repeating reminder.

    Signals
    -------
    visibility_changed(visible: bool)
    reminder()
        One notification — emitted once when the prompt appears and
        then every ``REMINDER_INTERVAL_MS`` until acknowledged.
    resume_requested()
        The user chose CONTINUE.
    reset_requested()
        The user chose RESET.
    """

    visibility_changed = pyqtSignal(bool)
    reminder = pyqtSignal()
    resume_requested = pyqtSignal()
    reset_requested = pyqtSignal()

    def __init__(
        self,
        clock: Clock,
        full_duration: Callable[[], int],
        parent: QObject | None = None,
        *,
        enabled: bool = True,
        delay_minutes: int = DEFAULT_PROMPT_DELAY_MINUTES,
    ) -> None:
        super().__init__(parent)
        self._clock = clock
        self._full_duration = full_duration
        self._enabled = enabled
        self._delay_minutes = delay_minutes

        self._phase = PromptPhase.IDLE
        self._visible = False
        self._epoch = 0

        self._delay_timer: QTimer | None = None
        self._pending_epoch: int | None = None

        self._reminder_timer = QTimer(self)
        self._reminder_timer.setInterval(REMINDER_INTERVAL_MS)
        self._reminder_timer.timeout.connect(self.reminder)

        clock.running_changed.connect(self._on_running_changed)

    # ── read-only state ───────────────────────────────────────────────

    @property
    def phase(self) -> PromptPhase:
        return self._phase

    @property
    def visible(self) -> bool:
        return self._visible

    @property
    def epoch(self) -> int:
        return self._epoch

    @property
    def pending_epoch(self) -> int | None:
        """Epoch the armed one-shot carries, or ``None`` when nothing is armed."""
        return self._pending_epoch

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def delay_minutes(self) -> int:
        return self._delay_minutes

    @property
    def has_pending_delay(self) -> bool:
        return self._delay_timer is not None and self._delay_timer.isActive()

    @property
    def is_reminding(self) -> bool:
        return self._reminder_timer.isActive()

    # ── configuration ─────────────────────────────────────────────────

    def configure(self, enabled: bool, delay_minutes: int) -> None:
        """Apply new prompt settings.

        Any change invalidates what is scheduled; the scheduler then
        re-arms if the clock is still sitting paused mid-session.
        """
        if enabled == self._enabled and delay_minutes == self._delay_minutes:
            return
        self._enabled = enabled
        self._delay_minutes = delay_minutes
        self.reevaluate()

    def reevaluate(self) -> None:
        """Cancel, then arm again if the arming conditions still hold."""
        self.cancel()
        if self._should_arm():
            self._arm(self._delay_minutes * 60 * 1000)

    # ── actions ───────────────────────────────────────────────────────

    def respond(self, action: PromptAction) -> None:
        """Handle the user's answer to a visible prompt."""
        if self._phase != PromptPhase.PROMPTING:
            logger.debug("Ignoring prompt action %s in phase %s", action.value, self._phase.value)
            return

        self._reminder_timer.stop()
        self._set_visible(False)

        if action == PromptAction.REMIND:
            self._arm(REMIND_DELAY_MS)
            return

        self._epoch += 1
        self._phase = PromptPhase.IDLE
        if action == PromptAction.CONTINUE:
            self.resume_requested.emit()
        elif action == PromptAction.RESET:
            self.reset_requested.emit()

    def cancel(self) -> None:
        """Drop every pending timer and return to IDLE."""
        self._drop_delay_timer()
        self._reminder_timer.stop()
        self._epoch += 1
        self._phase = PromptPhase.IDLE
        self._set_visible(False)

    # ── internal ──────────────────────────────────────────────────────

    def _should_arm(self) -> bool:
        clock = self._clock
        return (
            self._enabled
            and not clock.is_running
            and clock.has_ever_started
            and clock.remaining < self._full_duration()
        )

    def _on_running_changed(self, running: bool) -> None:
        if running:
            self.cancel()
        elif self._should_arm():
            self.cancel()
            self._arm(self._delay_minutes * 60 * 1000)

    def _arm(self, delay_ms: int) -> None:
        self._drop_delay_timer()
        self._epoch += 1
        epoch = self._epoch

        timer = QTimer(self)
        timer.setSingleShot(True)
        timer.setInterval(delay_ms)
        timer.timeout.connect(partial(self._on_delay_elapsed, epoch))
        timer.start()

        self._delay_timer = timer
        self._pending_epoch = epoch
        self._phase = PromptPhase.WAITING

    def _drop_delay_timer(self) -> None:
        if self._delay_timer is not None:
            self._delay_timer.stop()
            self._delay_timer.deleteLater()
        self._delay_timer = None
        self._pending_epoch = None

    def _on_delay_elapsed(self, epoch: int) -> None:
        if epoch != self._epoch or self._phase != PromptPhase.WAITING:
            logger.debug("Dropping stale prompt callback (epoch %d, live %d)", epoch, self._epoch)
            return
        self._drop_delay_timer()
        self._phase = PromptPhase.PROMPTING
        self._set_visible(True)
        self.reminder.emit()
        self._reminder_timer.start()

    def _set_visible(self, visible: bool) -> None:
        if visible == self._visible:
            return
        self._visible = visible
        self.visibility_changed.emit(visible)
