"""Application settings with validation and pluggable persistence.

The app keeps settings in its SQLite database
(:class:`~pomoplayer.database.store.SqlConfigStore`).  When the database
cannot be opened they go to a JSON file instead:
    ~/Library/Application Support/PomoPlayer/settings.json

Usage::

    store = JsonConfigStore()
    settings = store.load()
    settings.sounds_enabled = False
    store.save(settings)

A store's ``load`` never raises — missing, unreadable, or invalid data
falls back to defaults.  ``save`` raises :class:`ConfigStoreError`.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, asdict, fields, replace
from pathlib import Path
from typing import Protocol

from .audio.sounds import CUE_CHOICES, DEFAULT_CUES, SoundKind
from .timer.cycle import SessionType

logger = logging.getLogger(__name__)


APP_SUPPORT_DIR = Path.home() / "Library" / "Application Support" / "PomoPlayer"
SETTINGS_PATH = APP_SUPPORT_DIR / "settings.json"

# Background music is off until the user picks a source.
DEFAULT_MEDIA_URL = ""


# ── errors ────────────────────────────────────────────────────────────────


class SettingsValidationError(ValueError):
    """One or more settings fields are out of range or the wrong type.

    ``errors`` maps field name → human-readable message.
    """

    def __init__(self, errors: dict[str, str]) -> None:
        self.errors = dict(errors)
        detail = "; ".join(f"{k}: {v}" for k, v in sorted(self.errors.items()))
        super().__init__(f"Invalid settings — {detail}")


class ConfigStoreError(Exception):
    """The settings backend could not be written."""


# ── data ──────────────────────────────────────────────────────────────────


@dataclass
class Settings:
    """All user-configurable preferences."""

    # ── timer ─────────────────────────────────────────────────────────
    work_duration: int = 25 * 60           # seconds
    short_break_duration: int = 5 * 60
    long_break_duration: int = 15 * 60
    sessions_until_long_break: int = 4
    keep_running_on_transition: bool = False

    # ── pause prompt ──────────────────────────────────────────────────
    pause_prompt_enabled: bool = True
    pause_prompt_delay: int = 2            # minutes

    # ── audio / media ─────────────────────────────────────────────────
    sounds_enabled: bool = True
    session_end_sound: str = DEFAULT_CUES[SoundKind.SESSION_END]
    pause_prompt_sound: str = DEFAULT_CUES[SoundKind.PAUSE_PROMPT]
    media_visible: bool = True
    # A local file or a direct audio/video stream URL that Qt Multimedia
    # can open.  Video-site page links do not play.  Empty disables the
    # player.
    media_url: str = DEFAULT_MEDIA_URL

    # ── appearance (opaque to the engine) ─────────────────────────────
    theme: str = "dark"

    def duration_for(self, session_type: SessionType) -> int:
        return self.durations()[session_type]

    def durations(self) -> dict[SessionType, int]:
        return {
            SessionType.WORK: self.work_duration,
            SessionType.SHORT_BREAK: self.short_break_duration,
            SessionType.LONG_BREAK: self.long_break_duration,
        }

    def copy(self, **changes) -> "Settings":
        return replace(self, **changes)


# ── validation ────────────────────────────────────────────────────────────

# field → (min, max, unit label used in messages, seconds per unit)
_INT_RANGES: dict[str, tuple[int, int, str, int]] = {
    "work_duration": (1, 180, "minutes", 60),
    "short_break_duration": (1, 30, "minutes", 60),
    "long_break_duration": (1, 60, "minutes", 60),
    "sessions_until_long_break": (1, 10, "sessions", 1),
    "pause_prompt_delay": (1, 10, "minutes", 1),
}

_BOOL_FIELDS = (
    "keep_running_on_transition",
    "pause_prompt_enabled",
    "sounds_enabled",
    "media_visible",
)

_STR_FIELDS = ("media_url", "theme")

_CUE_FIELDS: dict[str, SoundKind] = {
    "session_end_sound": SoundKind.SESSION_END,
    "pause_prompt_sound": SoundKind.PAUSE_PROMPT,
}


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_settings(settings: Settings) -> dict[str, str]:
    """Return ``{field: message}`` for every invalid field (empty if valid)."""
    errors: dict[str, str] = {}

    for name, (low, high, unit, scale) in _INT_RANGES.items():
        value = getattr(settings, name)
        if not _is_int(value):
            errors[name] = "must be a whole number"
        elif not low * scale <= value <= high * scale:
            errors[name] = f"must be between {low} and {high} {unit}"

    for name in _BOOL_FIELDS:
        if not isinstance(getattr(settings, name), bool):
            errors[name] = "must be true or false"

    for name in _STR_FIELDS:
        if not isinstance(getattr(settings, name), str):
            errors[name] = "must be text"

    for name, kind in _CUE_FIELDS.items():
        choices = CUE_CHOICES[kind]
        if getattr(settings, name) not in choices:
            errors[name] = f"must be one of: {', '.join(choices)}"

    return errors


def ensure_valid(settings: Settings) -> None:
    """Raise :class:`SettingsValidationError` if *settings* is invalid."""
    errors = validate_settings(settings)
    if errors:
        raise SettingsValidationError(errors)


def settings_from_dict(data: dict) -> Settings:
    """Build Settings from loaded data, defaulting unknown or invalid fields."""
    valid_keys = {f.name for f in fields(Settings)}
    filtered = {k: v for k, v in data.items() if k in valid_keys}
    settings = Settings(**filtered)

    errors = validate_settings(settings)
    if errors:
        logger.warning("Stored settings invalid, using defaults for: %s", ", ".join(sorted(errors)))
        defaults = Settings()
        settings = settings.copy(**{name: getattr(defaults, name) for name in errors})
    return settings


# ── persistence ───────────────────────────────────────────────────────────


class PersistentConfigStore(Protocol):
    def load(self) -> Settings: ...

    def save(self, settings: Settings) -> None: ...


class MemoryConfigStore:
    """Keeps the last saved settings in memory.  Used headless and in tests."""

    def __init__(self, settings: Settings | None = None) -> None:
        self._data: dict | None = asdict(settings) if settings else None

    def load(self) -> Settings:
        if self._data is None:
            return Settings()
        return settings_from_dict(self._data)

    def save(self, settings: Settings) -> None:
        self._data = asdict(settings)

    @property
    def record(self) -> dict | None:
        return None if self._data is None else dict(self._data)


class JsonConfigStore:
    """Settings as a flat JSON object on disk."""

    def __init__(self, path: Path | None = None) -> None:
        self._path = path or SETTINGS_PATH

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Settings:
        """Load settings from disk, falling back to defaults."""
        try:
            if not self._path.exists():
                return Settings()
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("Could not read settings from %s: %s", self._path, e)
            return Settings()
        if not isinstance(data, dict):
            logger.warning("Settings file %s is not a JSON object; using defaults", self._path)
            return Settings()
        return settings_from_dict(data)

    def save(self, settings: Settings) -> None:
        """Write settings to disk as JSON."""
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(
                json.dumps(asdict(settings), indent=2) + "\n",
                encoding="utf-8",
            )
        except OSError as e:
            raise ConfigStoreError(f"Could not write {self._path}: {e}") from e
