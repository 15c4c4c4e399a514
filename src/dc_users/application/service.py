"""UserApplicationService: cache-aside coordinator for the user list.

create_user: INSERT + COMMIT, then DEL the snapshot key. The commit always
completes before the DEL is issued, so a reader that misses right after the
invalidation finds the new row in PostgreSQL.

list_users: GET the snapshot; on miss SELECT all rows and SET them back with
a TTL. Concurrent misses may both repopulate; last write wins, and both
writers computed from the same source of truth.

Every store round-trip runs under asyncio.timeout. No retries are performed
here; errors propagate to the router as AppError subclasses.
"""

import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import Settings
from src.dc_common.errors import (
    CacheInvalidationError,
    CacheReadError,
    CacheWriteError,
    StoreReadError,
    StoreWriteError,
)
from src.dc_users.domain.cache import (
    USERS_LIST_CACHE_KEY,
    USERS_LIST_TTL_SECONDS,
    CacheProtocol,
    SnapshotDecodeError,
    decode_snapshot,
    encode_snapshot,
)
from src.dc_users.domain.models import User
from src.dc_users.domain.repository import UserRepositoryProtocol
from src.dc_users.infrastructure.persistence import UserRepository

logger = logging.getLogger(__name__)


def _describe(exc: BaseException) -> str:
    if isinstance(exc, TimeoutError):
        return "timed out"
    return str(exc) or type(exc).__name__


class UserApplicationService:
    def __init__(
        self,
        cache: CacheProtocol,
        repo: UserRepositoryProtocol | None = None,
        *,
        cache_key: str = USERS_LIST_CACHE_KEY,
        cache_ttl_seconds: int = USERS_LIST_TTL_SECONDS,
        store_timeout: float = 5.0,
        cache_timeout: float = 1.0,
        cache_fail_open: bool = True,
    ) -> None:
        self._cache = cache
        self._repo: UserRepositoryProtocol = repo or UserRepository()
        self._cache_key = cache_key
        self._cache_ttl_seconds = cache_ttl_seconds
        self._store_timeout = store_timeout
        self._cache_timeout = cache_timeout
        self._cache_fail_open = cache_fail_open

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        cache: CacheProtocol,
        repo: UserRepositoryProtocol | None = None,
    ) -> "UserApplicationService":
        return cls(
            cache,
            repo,
            cache_key=settings.USERS_CACHE_KEY,
            cache_ttl_seconds=settings.USERS_CACHE_TTL_SECONDS,
            store_timeout=settings.STORE_TIMEOUT_SECONDS,
            cache_timeout=settings.CACHE_TIMEOUT_SECONDS,
            cache_fail_open=settings.CACHE_FAIL_OPEN,
        )

    async def create_user(self, db: AsyncSession, name: str, email: str) -> User:
        try:
            async with asyncio.timeout(self._store_timeout):
                user = await self._repo.insert_user(db, name, email)
                await db.commit()
        except Exception as exc:
            logger.error("Error creating user %s: %s", name, _describe(exc))
            await self._rollback(db)
            raise StoreWriteError(_describe(exc)) from exc

        try:
            async with asyncio.timeout(self._cache_timeout):
                await self._cache.delete(self._cache_key)
        except Exception as exc:
            # Row is already committed; report it distinctly from a failed insert
            logger.error(
                "User %d committed but cache key %s was not invalidated: %s",
                user.id,
                self._cache_key,
                _describe(exc),
            )
            raise CacheInvalidationError(user.id, _describe(exc)) from exc

        logger.info("User created: %s (ID: %d)", user.name, user.id)
        return user

    async def list_users(self, db: AsyncSession) -> list[User]:
        cached = await self._read_snapshot()
        if cached is not None:
            logger.debug("Cache hit: %s (%d users)", self._cache_key, len(cached))
            return cached

        logger.debug("Cache miss: %s, querying PostgreSQL", self._cache_key)
        try:
            async with asyncio.timeout(self._store_timeout):
                users = await self._repo.list_users(db)
        except Exception as exc:
            logger.error("Error listing users: %s", _describe(exc))
            raise StoreReadError(_describe(exc)) from exc

        await self._write_snapshot(users)
        return users

    async def _rollback(self, db: AsyncSession) -> None:
        """Best-effort rollback after a failed write, bounded by the store timeout.

        A failure here is logged only; the caller raises StoreWriteError for
        the original cause.
        """
        try:
            async with asyncio.timeout(self._store_timeout):
                await db.rollback()
        except Exception:
            logger.exception("Rollback failed after user insert error")

    async def _read_snapshot(self) -> list[User] | None:
        """Return the cached list, or None on miss / undecodable value."""
        try:
            async with asyncio.timeout(self._cache_timeout):
                raw = await self._cache.get(self._cache_key)
        except Exception as exc:
            if not self._cache_fail_open:
                raise CacheReadError(_describe(exc)) from exc
            logger.warning(
                "Cache read failed for %s, falling back to PostgreSQL: %s",
                self._cache_key,
                _describe(exc),
            )
            return None

        if raw is None:
            return None
        try:
            return decode_snapshot(raw)
        except SnapshotDecodeError as exc:
            logger.warning("Discarding corrupt snapshot %s: %s", self._cache_key, exc)
            return None

    async def _write_snapshot(self, users: list[User]) -> None:
        try:
            async with asyncio.timeout(self._cache_timeout):
                await self._cache.set(
                    self._cache_key, encode_snapshot(users), self._cache_ttl_seconds
                )
        except Exception as exc:
            if not self._cache_fail_open:
                raise CacheWriteError(_describe(exc)) from exc
            logger.warning(
                "Cache write failed for %s, serving uncached result: %s",
                self._cache_key,
                _describe(exc),
            )
