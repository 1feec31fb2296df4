"""Shared fixtures: controllable clock, in-memory storage layer, test client."""

import os

# Never reach for a real Redis from the test suite
os.environ.setdefault("REDIS_URL", "memory://")

import fakeredis
import pytest
from fastapi.testclient import TestClient

from pastebox.cache import RenderCache
from pastebox.config import Settings
from pastebox.database import PasteDatabase
from pastebox.main import create_app


class FakeClock:
    """Epoch-seconds clock that only moves when told to."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture(params=["memory", "redis"])
def db(request, clock):
    """Storage layer over the in-memory store and over a Redis-compatible client."""
    if request.param == "redis":
        store = fakeredis.FakeRedis(server=fakeredis.FakeServer(), decode_responses=True)
        return PasteDatabase(store=store, clock=clock)
    return PasteDatabase(clock=clock)


@pytest.fixture
def cache(db):
    return RenderCache(db, max_size=8)


@pytest.fixture
def client(db):
    settings = Settings()
    settings.TITLE = "pastebox-test"
    settings.APP_DOMAIN = "http://testserver"
    with TestClient(create_app(settings=settings, db=db)) as test_client:
        yield test_client
