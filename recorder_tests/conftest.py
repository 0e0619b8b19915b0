"""Shared test fixtures for the recorder runtime."""

from datetime import UTC, datetime, timedelta

import pytest

from flightlog.config import get_settings
from flightlog.logging.context import clear_context


@pytest.fixture(autouse=True)
def _clear_environment(monkeypatch):
    """Clear environment variables that affect settings."""
    for var in [
        "FLIGHTLOG_ENVIRONMENT",
        "FLIGHTLOG_SESSIONS_DIRECTORY",
        "FLIGHTLOG_LOGGING_FREQUENCY",
        "FLIGHTLOG_MAX_RECORDS_IN_MEMORY",
        "FLIGHTLOG_RESTART_POLICY",
        "FLIGHTLOG_AUTO_START_SESSION",
        "FLIGHTLOG_AUTO_END_SESSION",
        "FLIGHTLOG_EVENT_MARKERS_ENABLED",
        "FLIGHTLOG_SIMULATOR_UPDATE_INTERVAL_SECONDS",
        "FLIGHTLOG_LOG_LEVEL",
        "FLIGHTLOG_LOG_FORMAT",
    ]:
        monkeypatch.delenv(var, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
    clear_context()


class FakeClock:
    """Deterministic clock that advances only when told to."""

    def __init__(self, start=None):
        self.now = start or datetime(2026, 1, 8, 12, 0, 0, tzinfo=UTC)

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now = self.now + timedelta(seconds=seconds)
        return self.now


@pytest.fixture
def clock():
    return FakeClock()
