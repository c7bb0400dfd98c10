"""Shared pytest fixtures for FocusKey tests."""

import sys
import pytest

from PyQt6.QtCore import QCoreApplication

from focuskey.database.db import configure_engine, init_db
from focuskey.gateway import SimulatedRestrictionGateway
from focuskey.history.store import SessionHistoryStore
from focuskey.profiles.models import BlockSet, FocusProfile
from focuskey.session.controller import SessionController

from helpers import FakeClock, FakeScheduler


@pytest.fixture(scope="session")
def qapp():
    """A single QCoreApplication instance shared across the entire test run."""
    app = QCoreApplication.instance() or QCoreApplication(sys.argv)
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
def scheduler(clock):
    return FakeScheduler(clock)


@pytest.fixture
def gateway():
    return SimulatedRestrictionGateway(authorized=True)


@pytest.fixture
def history(clock):
    return SessionHistoryStore(clock=clock)


@pytest.fixture
def profile():
    """One break of five minutes, a couple of blocked tokens."""
    return FocusProfile(
        name="Study",
        block_set=BlockSet(
            applications=frozenset({"app.instagram"}),
            web_domains=frozenset({"youtube.com"}),
        ),
        allowed_breaks=1,
        break_duration=5,
    )


@pytest.fixture
def controller(qapp, gateway, history, scheduler, clock):
    """Fresh SessionController on fake time."""
    return SessionController(gateway, history, scheduler=scheduler, clock=clock)
