"""Sound synthesis and playback using numpy + QSoundEffect.

Every cue is generated programmatically as a WAV file using sine-wave
synthesis with ADSR envelopes.  Files are cached to disk so subsequent
app launches are instant.

Each sound kind has a few selectable cues; the first one listed is the
default.

Sounds
------
- ``session_end``   — played when a session runs out
    ``arpeggio``      bright C5→E5→G5→C6, last note held
    ``bell``          soft meditation bell
- ``pause_prompt``  — repeated while the pause prompt is showing
    ``soft``          two gentle tones
    ``double_tap``    short double tap
"""

from __future__ import annotations

import io
import wave
from enum import Enum
from pathlib import Path
from typing import Callable

import numpy as np

from PyQt6.QtCore import QObject, QUrl
from PyQt6.QtMultimedia import QSoundEffect


# ── paths ────────────────────────────────────────────────────────────────

APP_SUPPORT_DIR = Path.home() / "Library" / "Application Support" / "PomoPlayer"
SOUNDS_DIR = APP_SUPPORT_DIR / "sounds"

SAMPLE_RATE = 44100


class SoundKind(Enum):
    SESSION_END = "session_end"
    PAUSE_PROMPT = "pause_prompt"


# ═══════════════════════════════════════════════════════════════════════════
#  WAV SYNTHESIS HELPERS
# ═══════════════════════════════════════════════════════════════════════════


def _make_envelope(
    length: int,
    attack: int = 200,
    decay: int = 400,
    sustain_level: float = 0.7,
    release: int = 800,
) -> np.ndarray:
    """ADSR envelope (all durations in samples)."""
    env = np.ones(length, dtype=np.float64)
    a = min(attack, length)
    if a > 0:
        env[:a] = np.linspace(0.0, 1.0, a)
    d_end = min(a + decay, length)
    if decay > 0 and d_end > a:
        env[a:d_end] = np.linspace(1.0, sustain_level, d_end - a)
    s_end = max(length - release, d_end)
    if s_end > d_end:
        env[d_end:s_end] = sustain_level
    if release > 0 and s_end < length:
        env[s_end:] = np.linspace(sustain_level, 0.0, length - s_end)
    return env


def _sine(freq: float, duration_s: float) -> np.ndarray:
    """Pure sine wave at *freq* Hz for *duration_s* seconds."""
    t = np.linspace(0, duration_s, int(SAMPLE_RATE * duration_s), endpoint=False)
    return np.sin(2 * np.pi * freq * t)


def _to_wav_bytes(samples: np.ndarray) -> bytes:
    """Convert a float64 numpy array (-1..1) to 16-bit PCM WAV bytes."""
    samples = np.clip(samples, -1.0, 1.0)
    int_samples = (samples * 32767).astype(np.int16)

    buf = io.BytesIO()
    with wave.open(buf, "wb") as wf:
        wf.setnchannels(1)
        wf.setsampwidth(2)
        wf.setframerate(SAMPLE_RATE)
        wf.writeframes(int_samples.tobytes())
    return buf.getvalue()


# ═══════════════════════════════════════════════════════════════════════════
#  SOUND GENERATORS
# ═══════════════════════════════════════════════════════════════════════════


def _generate_arpeggio() -> bytes:
    """Session end — C5→E5→G5→C6 arpeggio, last note held."""
    notes = [523.25, 659.25, 783.99, 1046.50]
    gap = 0.02
    parts: list[np.ndarray] = []
    for i, freq in enumerate(notes):
        # Last note held longer with a slow release
        if i == len(notes) - 1:
            tone = _sine(freq, 0.45) * 0.5
            env = _make_envelope(len(tone), attack=80, decay=300, sustain_level=0.5, release=900)
        else:
            tone = _sine(freq, 0.10) * 0.5
            env = _make_envelope(len(tone), attack=60, decay=150, sustain_level=0.3, release=200)
        parts.append(tone * env)
        if i < len(notes) - 1:
            parts.append(np.zeros(int(SAMPLE_RATE * gap)))
    return _to_wav_bytes(np.concatenate(parts))


def _generate_bell() -> bytes:
    """Session end — soft bell (A4 with an octave overtone), long decay."""
    duration = 1.0
    combined = _sine(440.0, duration) * 0.35 + _sine(880.0, duration) * 0.08
    env = _make_envelope(
        len(combined),
        attack=int(SAMPLE_RATE * 0.08),
        decay=int(SAMPLE_RATE * 0.3),
        sustain_level=0.25,
        release=int(SAMPLE_RATE * 0.55),
    )
    return _to_wav_bytes(combined * env)


def _generate_soft() -> bytes:
    """Pause prompt — two soft tones (A5 then E5), gentle enough to repeat."""
    parts: list[np.ndarray] = []
    for freq in (880.0, 659.25):
        tone = _sine(freq, 0.18) * 0.3
        env = _make_envelope(len(tone), attack=300, decay=600, sustain_level=0.35, release=2000)
        parts.append(tone * env)
        parts.append(np.zeros(int(SAMPLE_RATE * 0.06)))
    return _to_wav_bytes(np.concatenate(parts))


def _generate_double_tap() -> bytes:
    """Pause prompt — two short 800 Hz taps, 80 ms apart."""
    tap = _sine(800.0, 0.04) * 0.35
    tap = tap * _make_envelope(len(tap), attack=40, decay=100, sustain_level=0.2, release=200)
    silence = np.zeros(int(SAMPLE_RATE * 0.08))
    return _to_wav_bytes(np.concatenate([tap, silence, tap, np.zeros(int(SAMPLE_RATE * 0.05))]))


# kind → {cue name: generator}; insertion order puts the default first
_GENERATORS: dict[SoundKind, dict[str, Callable[[], bytes]]] = {
    SoundKind.SESSION_END: {
        "arpeggio": _generate_arpeggio,
        "bell": _generate_bell,
    },
    SoundKind.PAUSE_PROMPT: {
        "soft": _generate_soft,
        "double_tap": _generate_double_tap,
    },
}

CUE_CHOICES: dict[SoundKind, tuple[str, ...]] = {
    kind: tuple(cues) for kind, cues in _GENERATORS.items()
}

DEFAULT_CUES: dict[SoundKind, str] = {
    kind: names[0] for kind, names in CUE_CHOICES.items()
}


# ═══════════════════════════════════════════════════════════════════════════
#  SOUND MANAGER
# ═══════════════════════════════════════════════════════════════════════════


class SoundManager(QObject):
    """Manages sound synthesis, caching, and playback.

    Usage::

        mgr = SoundManager(parent=self)
        mgr.set_volume(70)
        mgr.set_cue(SoundKind.SESSION_END, "bell")
        mgr.play(SoundKind.SESSION_END)
    """

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        sounds_dir: Path | None = None,
    ) -> None:
        super().__init__(parent)
        self._enabled = True
        self._volume = 0.7  # 0.0–1.0
        self._sounds_dir = sounds_dir or SOUNDS_DIR
        self._selected: dict[SoundKind, str] = dict(DEFAULT_CUES)
        self._effects: dict[tuple[SoundKind, str], QSoundEffect] = {}

        self._ensure_wav_files()
        self._load_effects()

    # ── public API ────────────────────────────────────────────────────

    def set_volume(self, level: int) -> None:
        """Set volume (0-100).  Updates all loaded effects."""
        self._volume = max(0, min(level, 100)) / 100.0
        for effect in self._effects.values():
            effect.setVolume(self._volume)

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = enabled

    def set_cue(self, kind: SoundKind, name: str) -> None:
        """Choose which cue plays for *kind*.

        Raises ``ValueError`` for a name not in ``CUE_CHOICES[kind]``.
        """
        if name not in _GENERATORS[kind]:
            raise ValueError(f"Unknown {kind.value} cue: {name!r}")
        self._selected[kind] = name

    def cue(self, kind: SoundKind) -> str:
        return self._selected[kind]

    def play(self, kind: SoundKind) -> None:
        """Play the selected cue.  No-op if disabled or the cue failed to load."""
        if not self._enabled:
            return
        effect = self._effects.get((kind, self._selected[kind]))
        if effect is not None:
            effect.play()

    def path_for(self, kind: SoundKind, name: str | None = None) -> Path:
        name = name or self._selected[kind]
        return self._sounds_dir / f"{kind.value}-{name}.wav"

    @property
    def volume(self) -> int:
        """Current volume as 0-100 integer."""
        return round(self._volume * 100)

    @property
    def enabled(self) -> bool:
        return self._enabled

    # ── internal ──────────────────────────────────────────────────────

    def _ensure_wav_files(self) -> None:
        """Generate any missing WAV files to the cache directory."""
        self._sounds_dir.mkdir(parents=True, exist_ok=True)
        for kind, cues in _GENERATORS.items():
            for name, gen_fn in cues.items():
                path = self.path_for(kind, name)
                if not path.exists():
                    path.write_bytes(gen_fn())

    def _load_effects(self) -> None:
        """Create QSoundEffect instances from cached WAV files."""
        for kind, names in CUE_CHOICES.items():
            for name in names:
                path = self.path_for(kind, name)
                if path.exists():
                    effect = QSoundEffect(self)
                    effect.setSource(QUrl.fromLocalFile(str(path)))
                    effect.setVolume(self._volume)
                    self._effects[(kind, name)] = effect
