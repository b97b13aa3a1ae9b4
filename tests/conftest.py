# tests/conftest.py
# Shared fixtures: a controllable clock and a memory-backed store/service,
# so expiry and rate-limit windows are simulated without sleeping.

import pytest

from pastebox.config import Settings
from pastebox.db.memory_store import MemoryStore
from pastebox.repositories.paste_index import PasteIndex
from pastebox.repositories.paste_repository import PasteRepository
from pastebox.services.access_resolver import AccessResolver
from pastebox.services.paste_service import build_paste_service


class FakeClock:
    """Epoch-seconds clock that only moves when told to."""

    def __init__(self, start: float = 1_760_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_settings(**overrides) -> Settings:
    values = {
        "STORE_BACKEND": "memory",
        "TRACING_ENABLED": False,
        "PASTE_TTL_SECONDS": 7200,
        "RATE_LIMIT_WINDOW_SECONDS": 3600,
        "RATE_LIMIT_MAX_REQUESTS": 30,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return MemoryStore(clock=clock)


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def repository(store, clock, settings):
    return PasteRepository(store, settings.PASTE_TTL_SECONDS, clock=clock)


@pytest.fixture
def index(store, settings):
    return PasteIndex(store, settings.PASTE_TTL_SECONDS)


@pytest.fixture
def resolver(repository, index):
    return AccessResolver(repository, index)


@pytest.fixture
def service(store, settings, clock):
    return build_paste_service(store, settings, clock=clock)


@pytest.fixture
def settings_factory():
    return make_settings
