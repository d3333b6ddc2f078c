"""Shared pytest fixtures for PomoPlayer tests."""

import os
import sys

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt6.QtWidgets import QApplication

from pomoplayer.database.db import configure_engine, init_db
from pomoplayer.engine import SessionEngine
from pomoplayer.settings import MemoryConfigStore, Settings

from helpers import RecordingPlayer, RecordingSink


@pytest.fixture(scope="session")
def qapp():
    """A single QApplication instance shared across the entire test run."""
    app = QApplication.instance() or QApplication(sys.argv)
    yield app


@pytest.fixture(autouse=True)
def test_db():
    """Point every test at a fresh in-memory SQLite database."""
    configure_engine("sqlite:///:memory:")
    init_db()
    yield


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def player():
    return RecordingPlayer()


@pytest.fixture
def store():
    return MemoryConfigStore(Settings())


@pytest.fixture
def engine(qapp, sink, player, store):
    """Fresh SessionEngine with default settings, keep-running OFF."""
    eng = SessionEngine(
        settings=Settings(), store=store, notifier=sink, playback=player,
    )
    yield eng
    eng.shutdown()


@pytest.fixture
def engine_keep_running(qapp, sink, player, store):
    """Fresh SessionEngine with keep-running ON."""
    eng = SessionEngine(
        settings=Settings(keep_running_on_transition=True),
        store=store, notifier=sink, playback=player,
    )
    yield eng
    eng.shutdown()
