"""UserRepository: concrete implementation of UserRepositoryProtocol.

Transaction ownership: the CALLER (application service) commits or rolls back.
The repository only issues statements on the session it is handed.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.dc_common.errors import InternalError
from src.dc_users.domain.models import User

_INSERT_USER_SQL = text("""
    INSERT INTO users (name, email)
    VALUES (:name, :email)
    RETURNING id, name, email
""")

_LIST_USERS_SQL = text("""
    SELECT id, name, email
    FROM users
    ORDER BY id
""")


def _row_to_user(row: object) -> User:
    return User(
        id=row.id,  # type: ignore[attr-defined]
        name=row.name,  # type: ignore[attr-defined]
        email=row.email,  # type: ignore[attr-defined]
    )


class UserRepository:
    async def insert_user(self, db: AsyncSession, name: str, email: str) -> User:
        result = await db.execute(_INSERT_USER_SQL, {"name": name, "email": email})
        row = result.fetchone()
        if row is None:
            raise InternalError("User insert returned no rows")
        return _row_to_user(row)

    async def list_users(self, db: AsyncSession) -> list[User]:
        result = await db.execute(_LIST_USERS_SQL)
        return [_row_to_user(row) for row in result.fetchall()]
