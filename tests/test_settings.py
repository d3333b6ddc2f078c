"""Tests for settings validation and the JSON / in-memory stores."""

from __future__ import annotations

import json
from dataclasses import asdict

import pytest

from pomoplayer.settings import (
    ConfigStoreError,
    JsonConfigStore,
    MemoryConfigStore,
    Settings,
    SettingsValidationError,
    ensure_valid,
    settings_from_dict,
    validate_settings,
)
from pomoplayer.timer.cycle import SessionType


# ═══════════════════════════════════════════════════════════════════════
#  DEFAULTS
# ═══════════════════════════════════════════════════════════════════════


class TestSettingsDefaults:
    def test_durations(self):
        s = Settings()
        assert s.work_duration == 1500
        assert s.short_break_duration == 300
        assert s.long_break_duration == 900

    def test_cycle_and_prompt(self):
        s = Settings()
        assert s.sessions_until_long_break == 4
        assert s.pause_prompt_enabled is True
        assert s.pause_prompt_delay == 2

    def test_flags(self):
        s = Settings()
        assert s.sounds_enabled is True
        assert s.media_visible is True
        assert s.keep_running_on_transition is False

    def test_sound_cues_and_media(self):
        s = Settings()
        assert s.session_end_sound == "arpeggio"
        assert s.pause_prompt_sound == "soft"
        assert s.media_url == ""

    def test_duration_for(self):
        s = Settings(short_break_duration=600)
        assert s.duration_for(SessionType.SHORT_BREAK) == 600
        assert s.duration_for(SessionType.WORK) == 1500

    def test_defaults_are_valid(self):
        assert validate_settings(Settings()) == {}


# ═══════════════════════════════════════════════════════════════════════
#  VALIDATION
# ═══════════════════════════════════════════════════════════════════════


class TestValidation:

    @pytest.mark.parametrize("field, low, high", [
        ("work_duration", 60, 180 * 60),
        ("short_break_duration", 60, 30 * 60),
        ("long_break_duration", 60, 60 * 60),
        ("sessions_until_long_break", 1, 10),
        ("pause_prompt_delay", 1, 10),
    ])
    def test_bounds(self, field, low, high):
        assert validate_settings(Settings(**{field: low})) == {}
        assert validate_settings(Settings(**{field: high})) == {}
        assert field in validate_settings(Settings(**{field: low - 1}))
        assert field in validate_settings(Settings(**{field: high + 1}))

    def test_message_names_range(self):
        errors = validate_settings(Settings(work_duration=200 * 60))
        assert errors == {"work_duration": "must be between 1 and 180 minutes"}

    def test_non_numeric(self):
        errors = validate_settings(Settings(short_break_duration="5"))
        assert errors == {"short_break_duration": "must be a whole number"}

    def test_bool_is_not_a_number(self):
        assert "sessions_until_long_break" in validate_settings(
            Settings(sessions_until_long_break=True)
        )

    def test_flag_types(self):
        errors = validate_settings(Settings(sounds_enabled="yes", theme=3))
        assert set(errors) == {"sounds_enabled", "theme"}

    def test_reports_every_bad_field(self):
        errors = validate_settings(Settings(work_duration=0, pause_prompt_delay=11))
        assert set(errors) == {"work_duration", "pause_prompt_delay"}

    def test_sound_cue_choices(self):
        assert validate_settings(Settings(session_end_sound="bell", pause_prompt_sound="double_tap")) == {}
        errors = validate_settings(Settings(session_end_sound="soft"))
        assert errors == {"session_end_sound": "must be one of: arpeggio, bell"}
        assert "pause_prompt_sound" in validate_settings(Settings(pause_prompt_sound=None))

    def test_ensure_valid_raises_with_errors(self):
        with pytest.raises(SettingsValidationError) as exc:
            ensure_valid(Settings(long_break_duration=61 * 60))
        assert set(exc.value.errors) == {"long_break_duration"}
        assert isinstance(exc.value, ValueError)
        assert "long_break_duration" in str(exc.value)


class TestFromDict:

    def test_unknown_keys_ignored(self):
        s = settings_from_dict({"work_duration": 600, "youtube_api_key": "x"})
        assert s.work_duration == 600

    def test_invalid_field_falls_back_to_default(self):
        s = settings_from_dict({"work_duration": 5, "short_break_duration": 600})
        assert s.work_duration == 1500
        assert s.short_break_duration == 600


# ═══════════════════════════════════════════════════════════════════════
#  JSON STORE
# ═══════════════════════════════════════════════════════════════════════


class TestJsonStore:

    @pytest.fixture
    def json_store(self, tmp_path):
        return JsonConfigStore(tmp_path / "settings.json")

    def test_missing_file_gives_defaults(self, json_store):
        assert json_store.load() == Settings()

    def test_round_trip(self, json_store):
        original = Settings(
            work_duration=50 * 60, sessions_until_long_break=3,
            pause_prompt_enabled=False, theme="light",
            keep_running_on_transition=True, media_url="/music/lofi.mp3",
        )
        json_store.save(original)
        assert json_store.load() == original

    def test_save_load_save_is_idempotent(self, json_store):
        json_store.save(Settings(long_break_duration=20 * 60, media_visible=False))
        first = json_store.path.read_text(encoding="utf-8")
        json_store.save(json_store.load())
        assert json_store.path.read_text(encoding="utf-8") == first

    def test_file_is_flat_json(self, json_store):
        json_store.save(Settings())
        data = json.loads(json_store.path.read_text(encoding="utf-8"))
        assert data == asdict(Settings())

    def test_corrupt_file_gives_defaults(self, json_store):
        json_store.path.write_text("{not json", encoding="utf-8")
        assert json_store.load() == Settings()

    def test_non_object_gives_defaults(self, json_store):
        json_store.path.write_text("[1, 2, 3]", encoding="utf-8")
        assert json_store.load() == Settings()

    def test_out_of_range_value_replaced(self, json_store):
        json_store.path.write_text(
            json.dumps({"work_duration": 99999, "theme": "light"}), encoding="utf-8",
        )
        loaded = json_store.load()
        assert loaded.work_duration == 1500
        assert loaded.theme == "light"

    def test_creates_parent_directory(self, tmp_path):
        store = JsonConfigStore(tmp_path / "nested" / "dir" / "settings.json")
        store.save(Settings())
        assert store.path.exists()

    def test_write_failure_raises_store_error(self, tmp_path):
        store = JsonConfigStore(tmp_path)  # a directory, not a file
        with pytest.raises(ConfigStoreError):
            store.save(Settings())


class TestMemoryStore:

    def test_empty_store_gives_defaults(self):
        assert MemoryConfigStore().load() == Settings()
        assert MemoryConfigStore().record is None

    def test_round_trip(self):
        store = MemoryConfigStore()
        store.save(Settings(theme="forest"))
        assert store.load().theme == "forest"
        first = store.record
        store.save(store.load())
        assert store.record == first
