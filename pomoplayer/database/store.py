"""Settings persisted in the local SQLite database."""

from __future__ import annotations

import logging
from dataclasses import asdict, fields
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError

from ..settings import ConfigStoreError, Settings, settings_from_dict
from .db import get_session
from .models import UserSettings

logger = logging.getLogger(__name__)

_FIELD_NAMES = tuple(f.name for f in fields(Settings))


class SqlConfigStore:
    """``PersistentConfigStore`` backed by the ``user_settings`` table.

    The table holds at most one row; ``save`` creates it on first use.
    Call :func:`~pomoplayer.database.db.init_db` before using the store.
    """

    def load(self) -> Settings:
        try:
            with get_session() as db:
                row = db.query(UserSettings).order_by(UserSettings.id).first()
                if row is None:
                    return Settings()
                data = {name: getattr(row, name) for name in _FIELD_NAMES}
        except SQLAlchemyError as e:
            logger.warning("Could not load settings from database: %s", e)
            return Settings()
        return settings_from_dict(data)

    def save(self, settings: Settings) -> None:
        values = asdict(settings)
        try:
            with get_session() as db:
                row = db.query(UserSettings).order_by(UserSettings.id).first()
                if row is None:
                    row = UserSettings()
                    db.add(row)
                for name, value in values.items():
                    setattr(row, name, value)
                row.updated_at = datetime.utcnow()
        except SQLAlchemyError as e:
            raise ConfigStoreError(f"Could not save settings to database: {e}") from e
