"""Work/break cycle rules.

The cycle is a plain decision table — no timers, no Qt — so it can be
checked in isolation:

    WORK        → SHORT_BREAK  (count + 1 < N)
    WORK        → LONG_BREAK   (count + 1 == N, count carried)
    SHORT_BREAK → WORK         (count unchanged)
    LONG_BREAK  → WORK         (count reset to 0)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class SessionType(Enum):
    WORK = "work"
    SHORT_BREAK = "short_break"
    LONG_BREAK = "long_break"


DEFAULT_DURATIONS: dict[SessionType, int] = {
    SessionType.WORK: 25 * 60,
    SessionType.SHORT_BREAK: 5 * 60,
    SessionType.LONG_BREAK: 15 * 60,
}

SESSIONS_UNTIL_LONG_BREAK = 4


@dataclass(frozen=True)
class CycleConfig:
    sessions_until_long_break: int = SESSIONS_UNTIL_LONG_BREAK


@dataclass(frozen=True)
class CycleStep:
    next: SessionType
    completed_work: int


def advance(
    current: SessionType, completed_work: int, cfg: CycleConfig
) -> CycleStep:
    """Return the session that follows *current* and the updated count."""
    if current == SessionType.WORK:
        completed_work += 1
        if completed_work == cfg.sessions_until_long_break:
            return CycleStep(SessionType.LONG_BREAK, completed_work)
        return CycleStep(SessionType.SHORT_BREAK, completed_work)
    if current == SessionType.LONG_BREAK:
        return CycleStep(SessionType.WORK, 0)
    return CycleStep(SessionType.WORK, completed_work)
