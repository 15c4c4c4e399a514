"""Shared test fixtures.

InMemoryCache / InMemoryUserRepository stand in for Redis and PostgreSQL.
Both append to a shared ``events`` list so tests can assert call ordering,
and the cache expires keys against a manually advanced FakeClock.
"""

import asyncio
from collections.abc import AsyncGenerator
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from config.settings import Settings
from src.dc_common.database import get_db_session
from src.dc_users.application.service import UserApplicationService
from src.dc_users.domain.models import User


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def advance(self, seconds: float) -> None:
        self.now += seconds


class InMemoryCache:
    def __init__(self, clock: FakeClock, events: list[str]) -> None:
        self._clock = clock
        self._events = events
        self._data: dict[str, tuple[str, float]] = {}
        self.fail_get: Exception | None = None
        self.fail_set: Exception | None = None
        self.fail_delete: Exception | None = None
        self.delay = 0.0

    def _live(self, key: str) -> str | None:
        entry = self._data.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if self._clock.now >= expires_at:
            del self._data[key]
            return None
        return value

    def ttl(self, key: str) -> float | None:
        if self._live(key) is None:
            return None
        return self._data[key][1] - self._clock.now

    def peek(self, key: str) -> str | None:
        return self._live(key)

    def put(self, key: str, value: str, ttl_seconds: int) -> None:
        self._data[key] = (value, self._clock.now + ttl_seconds)

    async def get(self, key: str) -> str | None:
        self._events.append(f"cache.get:{key}")
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail_get:
            raise self.fail_get
        return self._live(key)

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        self._events.append(f"cache.set:{key}")
        if self.fail_set:
            raise self.fail_set
        self.put(key, value, ttl_seconds)

    async def delete(self, key: str) -> None:
        self._events.append(f"cache.delete:{key}")
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail_delete:
            raise self.fail_delete
        self._data.pop(key, None)


class InMemoryUserRepository:
    def __init__(self, events: list[str]) -> None:
        self._events = events
        self.rows: list[User] = []
        self._next_id = 1
        self.list_calls = 0
        self.fail_insert: Exception | None = None
        self.fail_list: Exception | None = None
        self.delay = 0.0

    def seed(self, *users: tuple[str, str]) -> None:
        for name, email in users:
            self.rows.append(User(id=self._next_id, name=name, email=email))
            self._next_id += 1

    async def insert_user(self, db: object, name: str, email: str) -> User:
        self._events.append("repo.insert")
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail_insert:
            raise self.fail_insert
        user = User(id=self._next_id, name=name, email=email)
        self._next_id += 1
        self.rows.append(user)
        return user

    async def list_users(self, db: object) -> list[User]:
        self._events.append("repo.list")
        self.list_calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail_list:
            raise self.fail_list
        return list(self.rows)


@pytest.fixture
def events() -> list[str]:
    return []


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock, events: list[str]) -> InMemoryCache:
    return InMemoryCache(clock, events)


@pytest.fixture
def repo(events: list[str]) -> InMemoryUserRepository:
    return InMemoryUserRepository(events)


@pytest.fixture
def db(events: list[str]) -> AsyncMock:
    session = AsyncMock()
    session.commit.side_effect = lambda: events.append("db.commit")
    session.rollback.side_effect = lambda: events.append("db.rollback")
    return session


@pytest.fixture
def service(cache: InMemoryCache, repo: InMemoryUserRepository) -> UserApplicationService:
    return UserApplicationService(cache, repo, store_timeout=0.5, cache_timeout=0.5)


@pytest.fixture
def test_settings() -> Settings:
    return Settings(_env_file=None, APP_NAME="demo-crud-test")


@pytest.fixture
async def client(
    test_settings: Settings,
    service: UserApplicationService,
    db: AsyncMock,
) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client over the real app with in-memory stores; lifespan is not run."""
    from src.main import create_app

    app = create_app(test_settings)
    app.state.user_service = service

    async def _db_override() -> AsyncGenerator[AsyncMock, None]:
        yield db

    app.dependency_overrides[get_db_session] = _db_override
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
