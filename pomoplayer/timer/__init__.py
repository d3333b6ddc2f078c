"""Timer package."""

from .clock import Clock
from .cycle import (
    SessionType,
    CycleConfig,
    CycleStep,
    advance,
    DEFAULT_DURATIONS,
    SESSIONS_UNTIL_LONG_BREAK,
)
from .idle_prompt import IdlePromptScheduler, PromptAction, PromptPhase

__all__ = [
    "Clock",
    "SessionType",
    "CycleConfig",
    "CycleStep",
    "advance",
    "DEFAULT_DURATIONS",
    "SESSIONS_UNTIL_LONG_BREAK",
    "IdlePromptScheduler",
    "PromptAction",
    "PromptPhase",
]
