"""Record store Protocol for users.

Unit tests inject a fake that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.dc_users.domain.models import User


class UserRepositoryProtocol(Protocol):
    async def insert_user(self, db: AsyncSession, name: str, email: str) -> User: ...

    async def list_users(self, db: AsyncSession) -> list[User]: ...
