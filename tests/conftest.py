"""Shared pytest fixtures for Pomotimer tests."""

import os
import sys
import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt6.QtWidgets import QApplication

from pomotimer.database.db import configure_engine, init_db
from pomotimer.timer.engine import TimerEngine

from helpers import FakeClock, ManualScheduler, UpdateCollector


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
def clock():
    return FakeClock()


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def engine(clock, scheduler):
    """TimerEngine on a fake clock and a hand-cranked scheduler."""
    return TimerEngine(scheduler=scheduler, now_fn=clock)


@pytest.fixture
def updates(engine):
    collector = UpdateCollector()
    engine.subscribe(collector)
    return collector
