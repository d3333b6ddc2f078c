"""Main window — a thin shell over the SessionEngine.

Layout (top → bottom):
    - Session type row (Focus / Short Break / Long Break)
    - Large countdown label + cycle progress
    - Controls (Reset / Start-Pause / Skip)
    - Media toggle (only while the player is visible and has a source)

The pause prompt is a non-blocking QMessageBox with the three actions.
"""

from __future__ import annotations

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QFont
from PyQt6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout,
    QLabel, QPushButton, QMessageBox,
)

from ..engine import EngineSnapshot, SessionEngine, format_time
from ..settings import Settings
from ..timer.cycle import SessionType
from ..timer.idle_prompt import PromptAction


SESSION_LABELS: dict[SessionType, str] = {
    SessionType.WORK:        "Focus",
    SessionType.SHORT_BREAK: "Short Break",
    SessionType.LONG_BREAK:  "Long Break",
}


class TimerWindow(QMainWindow):
    """Main window showing one engine's countdown and controls.

    Every button forwards to the engine; every label is redrawn from
    engine signals.  Closing the window shuts the engine down.
    """

    def __init__(self, engine: SessionEngine, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._engine = engine
        self._prompt: QMessageBox | None = None
        self._build_ui()
        self._connect_signals()
        self._refresh(engine.snapshot())
        self._apply_media_visibility(engine.settings)

    # ── build ─────────────────────────────────────────────────────────────

    def _build_ui(self) -> None:
        central = QWidget(self)
        self.setCentralWidget(central)
        layout = QVBoxLayout(central)
        layout.setContentsMargins(32, 24, 32, 28)
        layout.setSpacing(16)

        type_row = QHBoxLayout()
        self._type_buttons: dict[SessionType, QPushButton] = {}
        for session_type, label in SESSION_LABELS.items():
            btn = QPushButton(label, central)
            btn.setCheckable(True)
            btn.clicked.connect(
                lambda _checked, t=session_type: self._on_type_clicked(t)
            )
            type_row.addWidget(btn)
            self._type_buttons[session_type] = btn
        layout.addLayout(type_row)

        self._time_label = QLabel(central)
        self._time_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        font = QFont()
        font.setPointSize(64)
        font.setBold(True)
        self._time_label.setFont(font)
        layout.addWidget(self._time_label)

        self._cycle_label = QLabel(central)
        self._cycle_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._cycle_label)

        btn_row = QHBoxLayout()
        self._reset_btn = QPushButton("Reset", central)
        self._start_pause_btn = QPushButton("Start", central)
        self._skip_btn = QPushButton("Skip", central)
        btn_row.addWidget(self._reset_btn)
        btn_row.addWidget(self._start_pause_btn)
        btn_row.addWidget(self._skip_btn)
        layout.addLayout(btn_row)

        self._media_btn = QPushButton("Play music", central)
        layout.addWidget(self._media_btn)

        self.statusBar()

    def _connect_signals(self) -> None:
        self._reset_btn.clicked.connect(self._engine.reset)
        self._start_pause_btn.clicked.connect(self._engine.toggle)
        self._skip_btn.clicked.connect(self._engine.skip)
        self._media_btn.clicked.connect(self._engine.toggle_playback)

        self._engine.tick.connect(self._on_tick)
        self._engine.state_changed.connect(self._refresh)
        self._engine.prompt_visibility_changed.connect(self._on_prompt_visibility)
        self._engine.settings_applied.connect(self._apply_media_visibility)
        self._engine.media_state_changed.connect(self._on_media_state)

    def _on_type_clicked(self, session_type: SessionType) -> None:
        self._engine.change_session_type(session_type)
        # clicking the active type unchecks it; put the check back
        self._refresh(self._engine.snapshot())

    # ── engine → view ─────────────────────────────────────────────────────

    def _on_tick(self, remaining: int) -> None:
        self._time_label.setText(format_time(remaining))

    def _refresh(self, snap: EngineSnapshot) -> None:
        self._time_label.setText(format_time(snap.remaining_seconds))
        self._start_pause_btn.setText("Pause" if snap.is_running else "Start")
        for session_type, btn in self._type_buttons.items():
            btn.setChecked(session_type == snap.session_type)
        total = self._engine.settings.sessions_until_long_break
        self._cycle_label.setText(f"{snap.completed_work_sessions} / {total} sessions")

    def _apply_media_visibility(self, settings: Settings) -> None:
        self._media_btn.setVisible(settings.media_visible and bool(settings.media_url))

    def _on_media_state(self, playing: bool) -> None:
        self._media_btn.setText("Pause music" if playing else "Play music")

    # ── pause prompt ──────────────────────────────────────────────────────

    def _on_prompt_visibility(self, visible: bool) -> None:
        if visible:
            self._show_prompt()
        elif self._prompt is not None:
            prompt, self._prompt = self._prompt, None
            prompt.done(0)
            prompt.deleteLater()

    def _show_prompt(self) -> None:
        box = QMessageBox(self)
        box.setWindowTitle("Timer Paused")
        box.setText("Would you like to continue your session?")
        actions = {
            box.addButton("Reset Session", QMessageBox.ButtonRole.DestructiveRole): PromptAction.RESET,
            box.addButton("Remind me in 2 minutes", QMessageBox.ButtonRole.RejectRole): PromptAction.REMIND,
            box.addButton("Continue", QMessageBox.ButtonRole.AcceptRole): PromptAction.CONTINUE,
        }
        box.buttonClicked.connect(lambda button: self._on_prompt_button(actions.get(button)))
        self._prompt = box
        box.open()

    def _on_prompt_button(self, action: PromptAction | None) -> None:
        if action is not None:
            self._engine.respond_to_prompt(action)

    # ── lifecycle ─────────────────────────────────────────────────────────

    def closeEvent(self, event) -> None:
        self._engine.shutdown()
        super().closeEvent(event)
