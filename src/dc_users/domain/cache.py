"""User list snapshot cache: key, TTL, wire format, cache Protocol.

The whole user list lives under ONE fixed key. Any user creation deletes it;
the next list request repopulates it from PostgreSQL (cache-aside):

    ABSENT --(list on miss)--> VALID
    VALID  --(TTL expiry)----> ABSENT
    VALID  --(create user)---> ABSENT

Value format: JSON array of {"id", "name", "email"} objects ordered by id.
"""

import json
from typing import Protocol

from src.dc_users.domain.models import User

USERS_LIST_CACHE_KEY = "users_list"
USERS_LIST_TTL_SECONDS = 60


class SnapshotDecodeError(ValueError):
    """Cached value is not a valid user list snapshot."""


class CacheProtocol(Protocol):
    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str, ttl_seconds: int) -> None: ...

    async def delete(self, key: str) -> None:
        """Remove key. Must not fail when the key is already absent."""
        ...


def encode_snapshot(users: list[User]) -> str:
    return json.dumps([u.to_dict() for u in users], separators=(",", ":"))


def decode_snapshot(raw: str) -> list[User]:
    try:
        items = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise SnapshotDecodeError(f"Snapshot is not valid JSON: {exc}") from exc
    if not isinstance(items, list):
        raise SnapshotDecodeError("Snapshot must be a JSON array")
    try:
        return [User(id=i["id"], name=i["name"], email=i["email"]) for i in items]
    except (KeyError, TypeError, ValueError) as exc:
        raise SnapshotDecodeError(f"Snapshot holds an invalid user record: {exc}") from exc
