"""PomoPlayer — a focus/break interval timer that keeps your music in step."""

__version__ = "0.1.0"
