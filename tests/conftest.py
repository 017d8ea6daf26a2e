"""
Shared fixtures for CashMind tests.

No real network calls and no files on disk: the store is an in-memory
SQLite database and HTTP goes through a fake requests session.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import pytest
import requests

from cashmind.services.store import SQLiteLocalStore
from cashmind.services.sync import SyncClient, SyncClientInterface


BASE_TIME = datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)


class TickingClock:
    """Returns a strictly increasing time, one second per call."""

    def __init__(self, start: datetime = BASE_TIME):
        self._next = start

    def __call__(self) -> datetime:
        now = self._next
        self._next = now + timedelta(seconds=1)
        return now


class FakeResponse:
    def __init__(self, status_code: int, body: Any = None):
        self.status_code = status_code
        self._body = body

    def json(self):
        if isinstance(self._body, Exception):
            raise self._body
        return self._body


class FakeSession:
    """Records requests and answers with a fixed response or error."""

    def __init__(self, status_code: int = 200, body: Any = None, error: Optional[Exception] = None):
        self.headers: dict = {}
        self.status_code = status_code
        self.body = body
        self.error = error
        self.requests: list[tuple[str, str, Any, Any]] = []
        self.closed = False

    def post(self, url, json=None, timeout=None):
        self.requests.append(("POST", url, json, timeout))
        return self._respond()

    def get(self, url, timeout=None):
        self.requests.append(("GET", url, None, timeout))
        return self._respond()

    def close(self):
        self.closed = True

    def _respond(self) -> FakeResponse:
        if self.error is not None:
            raise self.error
        return FakeResponse(self.status_code, self.body)


class FakeSyncClient(SyncClientInterface):
    """In-process stand-in for SyncClient used by flow tests."""

    def __init__(self, sync_ok: bool = True, auth_ok: bool = True, signup_ok: bool = True):
        self.sync_ok = sync_ok
        self.auth_ok = auth_ok
        self.signup_ok = signup_ok
        self.synced_snapshots: list[list] = []
        self.auth_calls: list[tuple[str, str]] = []
        self.signup_calls: list[tuple[str, str]] = []

    async def sync_expenses(self, snapshot):
        self.synced_snapshots.append(list(snapshot))
        return self.sync_ok

    async def authenticate(self, username, password):
        self.auth_calls.append((username, password))
        return self.auth_ok

    async def sign_up(self, username, password):
        self.signup_calls.append((username, password))
        return self.signup_ok

    async def fetch_user_profile(self):
        return None


@pytest.fixture
def clock():
    return TickingClock()


@pytest.fixture
def store(clock):
    local_store = SQLiteLocalStore("sqlite://", clock=clock)
    yield local_store
    local_store.close()


@pytest.fixture
def fake_session():
    return FakeSession()


@pytest.fixture
def sync_client(fake_session):
    return SyncClient("https://api.example.com", timeout=5.0, session=fake_session)


@pytest.fixture
def fake_sync_client():
    return FakeSyncClient()


@pytest.fixture
def request_error():
    return requests.ConnectionError("connection refused")


@pytest.fixture
def make_session():
    return FakeSession
