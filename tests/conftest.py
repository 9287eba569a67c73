"""Shared fixtures: a deterministic clock and an in-memory store."""

from datetime import datetime, timedelta, timezone

import pytest

from blob_logger import InMemoryLogStore, LoggerService
from blob_logger.naming import RecordNamer

HKT = timezone(timedelta(hours=8))
START = datetime(2026, 10, 16, 8, 30, 0, 123000, tzinfo=timezone.utc)


class FakeClock:
    """Returns START, START+step, START+2*step, … on successive calls."""

    def __init__(self, start: datetime = START, step: timedelta = timedelta(seconds=1)):
        self.now = start
        self.step = step

    def __call__(self) -> datetime:
        current = self.now
        self.now = self.now + self.step
        return current


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return InMemoryLogStore(namer=RecordNamer(tz=HKT, clock=clock))


@pytest.fixture
def make_service(store, clock):
    def _make(**overrides):
        kwargs = dict(store=store, tz=HKT, clock=clock)
        kwargs.update(overrides)
        return LoggerService(**kwargs)
    return _make


@pytest.fixture
def service(make_service):
    return make_service()
