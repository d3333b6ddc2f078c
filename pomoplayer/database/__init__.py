"""Database package."""

from .db import configure_engine, get_session, init_db
from .models import UserSettings
from .store import SqlConfigStore

__all__ = ["configure_engine", "get_session", "init_db", "UserSettings", "SqlConfigStore"]
