"""SQLAlchemy ORM models for PomoPlayer."""

from datetime import datetime
from sqlalchemy import Column, Integer, String, Boolean, DateTime
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class UserSettings(Base):
    """Single-row table mirroring the flat settings record."""

    __tablename__ = "user_settings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    work_duration = Column(Integer, nullable=False)
    short_break_duration = Column(Integer, nullable=False)
    long_break_duration = Column(Integer, nullable=False)
    sessions_until_long_break = Column(Integer, nullable=False)
    keep_running_on_transition = Column(Boolean, nullable=False, default=False)
    pause_prompt_enabled = Column(Boolean, nullable=False, default=True)
    pause_prompt_delay = Column(Integer, nullable=False)
    sounds_enabled = Column(Boolean, nullable=False, default=True)
    session_end_sound = Column(String(32), nullable=False, default="arpeggio")
    pause_prompt_sound = Column(String(32), nullable=False, default="soft")
    media_visible = Column(Boolean, nullable=False, default=True)
    media_url = Column(String(2048), nullable=False, default="")
    theme = Column(String(64), nullable=False, default="dark")
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    def __repr__(self) -> str:
        return (
            f"<UserSettings work={self.work_duration} "
            f"sessions={self.sessions_until_long_break} "
            f"keep_running={self.keep_running_on_transition}>"
        )
