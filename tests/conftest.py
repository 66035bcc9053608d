# tests/conftest.py
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List

import httpx
import pytest

from cinema_api.mailer import AbstractMailer, get_mailer
from cinema_api.main import app
from cinema_api.movies.sqlite_movie_store import SQLiteMovieStore
from cinema_api.permissions.sqlite_permission_store import SQLitePermissionStore
from cinema_api.settings import settings
from cinema_api.storage.sqlite_base import close_sqlite_db_connection, get_sqlite_db_connection
from cinema_api.tokens.service import TokenAuthority
from cinema_api.tokens.sqlite_token_store import SQLiteTokenStore
from cinema_api.users.models import User
from cinema_api.users.service import UserService
from cinema_api.users.sqlite_user_store import SQLiteUserStore

logger = logging.getLogger("CinemaTests")


class FakeClock:
    """Controllable stand-in for utc_now."""

    def __init__(self, start: datetime = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now = self.now + delta


class RecordingMailer(AbstractMailer):
    def __init__(self):
        self.sent: List[Dict[str, Any]] = []

    async def send(self, recipient: str, template: str, data: Dict[str, Any]) -> None:
        self.sent.append({"recipient": recipient, "template": template, "data": data})


@pytest.fixture
async def db(tmp_path, monkeypatch):
    """Point the app at a fresh database file for the duration of one test."""
    await close_sqlite_db_connection()
    monkeypatch.setattr(settings, "sqlite_db_path", str(tmp_path / "cinema_test.sqlite3"))
    monkeypatch.setattr(settings, "password_hash_rounds", 4)
    conn = await get_sqlite_db_connection()
    yield conn
    await close_sqlite_db_connection()


@pytest.fixture
async def movie_store(db) -> SQLiteMovieStore:
    return SQLiteMovieStore()


@pytest.fixture
async def user_store(db) -> SQLiteUserStore:
    return SQLiteUserStore()


@pytest.fixture
async def token_store(db) -> SQLiteTokenStore:
    return SQLiteTokenStore()


@pytest.fixture
async def permission_store(db) -> SQLitePermissionStore:
    return SQLitePermissionStore()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
async def authority(token_store, clock) -> TokenAuthority:
    return TokenAuthority(token_store, clock=clock)


@pytest.fixture
async def user_service(user_store, permission_store, authority) -> UserService:
    return UserService(user_store, permission_store, authority)


@pytest.fixture
async def user(user_store) -> User:
    """A stored account that tokens and permissions can point at."""
    return await user_store.insert(
        User(name="Alice Smith", email="alice@example.com", password_hash=b"not-a-real-hash")
    )


@pytest.fixture
def mailer() -> RecordingMailer:
    return RecordingMailer()


@pytest.fixture
async def client(db, mailer):
    app.dependency_overrides[get_mailer] = lambda: mailer
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://cinema.test") as http_client:
        yield http_client
    app.dependency_overrides.clear()
