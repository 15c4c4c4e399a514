"""User domain model: a frozen dataclass validated on construction."""

from dataclasses import asdict, dataclass
from typing import Any


@dataclass(frozen=True)
class User:
    id: int      # assigned by PostgreSQL (SERIAL), never reused
    name: str
    email: str

    def __post_init__(self) -> None:
        if isinstance(self.id, bool) or not isinstance(self.id, int) or self.id < 1:
            raise ValueError(f"User id must be a positive integer, got {self.id!r}")
        if not isinstance(self.name, str) or not self.name:
            raise ValueError("User name must be a non-empty string")
        if not isinstance(self.email, str) or not self.email:
            raise ValueError("User email must be a non-empty string")

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
