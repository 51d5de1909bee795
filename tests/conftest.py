"""Shared fixtures for the engine tests."""

import os
from datetime import datetime
from unittest.mock import MagicMock

import pytest

# Pin the app timezone before energycoach is imported anywhere
os.environ["ENERGYCOACH_TZ"] = "UTC"

from apscheduler.schedulers.background import BackgroundScheduler  # noqa: E402

from energycoach.channels import Notifier  # noqa: E402
from energycoach.settings import DEFAULT_SETTINGS  # noqa: E402
from energycoach.store import MemoryStore  # noqa: E402
from energycoach.timeutil import APP_TZ  # noqa: E402


class FakeClock:
    """Settable clock; call it like ``timeutil.now``."""

    def __init__(self, current: datetime):
        self.current = current

    def __call__(self) -> datetime:
        return self.current


@pytest.fixture()
def settings():
    return DEFAULT_SETTINGS


@pytest.fixture()
def anchor():
    return datetime(2025, 6, 10, 7, 0, tzinfo=APP_TZ)


@pytest.fixture()
def clock(anchor):
    return FakeClock(anchor)


@pytest.fixture()
def apscheduler():
    """Never started: jobs stay pending and can be inspected directly."""
    sched = BackgroundScheduler(timezone="UTC")
    yield sched
    sched.remove_all_jobs()


@pytest.fixture()
def channel():
    ch = MagicMock()
    ch.name = "mock"
    ch.request_permission.return_value = "granted"
    return ch


@pytest.fixture()
def notifier(channel):
    return Notifier(channel)


@pytest.fixture()
def store():
    return MemoryStore()
