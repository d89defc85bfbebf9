"""
Shared fixtures: a controllable clock and a session manager over a temp store.
"""

import pytest

from companion.db.json_store import JsonStore
from companion.session.session_manager import SessionManager

START_MS = 1_700_000_000_000


class FakeClock:
    """Manually advanced millisecond clock"""

    def __init__(self, now: int = START_MS):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store_path(tmp_path):
    return tmp_path / "data" / "db.json"


@pytest.fixture
def json_store(store_path, clock):
    return JsonStore(store_path, clock=clock)


@pytest.fixture
def manager(json_store, clock):
    m = SessionManager(json_store, max_history_length=5, clock=clock)
    m.initialize()
    return m
