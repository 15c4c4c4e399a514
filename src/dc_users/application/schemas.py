"""Pydantic request/response schemas for dc_users.

All responses are wrapped in ApiResponse at the router layer.
"""

from pydantic import BaseModel, Field, field_validator

from src.dc_users.domain.models import User


class CreateUserRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=1, max_length=255)

    @field_validator("name", "email")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v


class UserItem(BaseModel):
    id: int
    name: str
    email: str

    @classmethod
    def from_domain(cls, user: User) -> "UserItem":
        return cls(id=user.id, name=user.name, email=user.email)
