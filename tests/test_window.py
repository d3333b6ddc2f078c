"""Tests for the TimerWindow shell."""

import pytest

from pomoplayer.engine import SessionEngine
from pomoplayer.notify import QtNotificationSink
from pomoplayer.settings import Settings
from pomoplayer.timer.cycle import SessionType
from pomoplayer.timer.idle_prompt import PromptAction
from pomoplayer.ui.timer_window import TimerWindow

from helpers import fire_prompt_delay, pause_mid_session


@pytest.fixture
def window(qapp):
    eng = SessionEngine(settings=Settings())
    win = TimerWindow(eng)
    eng.set_notifier(QtNotificationSink(win))
    yield win
    eng.shutdown()


class TestTimerWindow:

    def test_initial_display(self, window):
        assert window._time_label.text() == "25:00"
        assert window._start_pause_btn.text() == "Start"
        assert window._type_buttons[SessionType.WORK].isChecked()
        assert window.windowTitle() == "25:00 - Focus | PomoPlayer"

    def test_start_button_toggles_engine(self, window):
        window._start_pause_btn.click()
        assert window._engine.is_running is True
        assert window._start_pause_btn.text() == "Pause"

    def test_type_button_changes_session(self, window):
        window._type_buttons[SessionType.LONG_BREAK].click()
        assert window._engine.session_type == SessionType.LONG_BREAK
        assert window._time_label.text() == "15:00"
        assert window._type_buttons[SessionType.LONG_BREAK].isChecked()
        assert not window._type_buttons[SessionType.WORK].isChecked()

    def test_skip_updates_cycle_label(self, window):
        window._skip_btn.click()
        assert window._cycle_label.text() == "1 / 4 sessions"

    def test_media_button_follows_settings(self, window):
        window._engine.apply_settings(Settings(media_visible=False))
        assert window._media_btn.isHidden()

    def test_prompt_opens_and_closes(self, window):
        engine = window._engine
        pause_mid_session(engine)
        fire_prompt_delay(engine.scheduler)
        assert window._prompt is not None

        window._on_prompt_button(PromptAction.CONTINUE)
        assert window._prompt is None
        assert engine.is_running is True

    def test_media_button_hidden_without_source(self, window):
        assert window._media_btn.isHidden()

    def test_media_button_shown_once_source_set(self, window):
        window._engine.apply_settings(Settings(media_url="/music/lofi.mp3"))
        assert not window._media_btn.isHidden()
        window._engine.apply_settings(Settings(media_url="/music/lofi.mp3", media_visible=False))
        assert window._media_btn.isHidden()
