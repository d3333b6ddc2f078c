"""Allow running PomoPlayer as a module: python -m pomoplayer."""

import logging
import sys
from pathlib import Path

from PyQt6.QtWidgets import QApplication
from sqlalchemy.exc import SQLAlchemyError

from .audio.sounds import SoundManager
from .database import SqlConfigStore, init_db
from .engine import APP_NAME, SessionEngine
from .media.playback import QtMediaPlayback
from .notify import QtNotificationSink
from .settings import JsonConfigStore, PersistentConfigStore
from .ui.timer_window import TimerWindow

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

logger = logging.getLogger(__name__)


def open_config_store(fallback_path: Path | None = None) -> PersistentConfigStore:
    """The SQLite settings store, or the JSON file when the database won't open."""
    try:
        init_db()
    except (SQLAlchemyError, OSError) as e:
        store = JsonConfigStore(fallback_path)
        logger.warning("Settings database unavailable (%s); using %s", e, store.path)
        return store
    return SqlConfigStore()


def sync_media_source(engine: SessionEngine, player, media_url: str) -> None:
    """Point *player* at *media_url*; hand it to the engine once it has one."""
    player.set_source(media_url)
    if media_url and not engine.has_playback:
        engine.attach_playback(player)


def main() -> None:
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)

    app = QApplication(sys.argv)
    app.setApplicationName(APP_NAME)
    app.setOrganizationName(APP_NAME)

    engine = SessionEngine(store=open_config_store())
    settings = engine.settings

    player = QtMediaPlayback(parent=engine)
    sync_media_source(engine, player, settings.media_url)

    window = TimerWindow(engine)
    sink = QtNotificationSink(window, SoundManager(parent=engine))
    sink.apply_settings(settings)
    engine.set_notifier(sink)

    engine.settings_applied.connect(sink.apply_settings)
    engine.settings_applied.connect(
        lambda new_settings: sync_media_source(engine, player, new_settings.media_url)
    )

    window.resize(520, 420)
    window.show()

    logger.info("%s ready", APP_NAME)
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
