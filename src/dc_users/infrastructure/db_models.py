"""SQLAlchemy ORM model for the users table.

Registered on Base.metadata so the lifespan can create the table when it is
missing; the Alembic migration alembic/versions/001_create_users.py creates the
same table for managed deployments. Queries go through raw SQL in
persistence.py, not through this mapping.
"""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from src.dc_common.database import Base


class UserModel(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
