"""Unified error codes and custom exceptions.

Error code ranges:
  6xxx: Record store (PostgreSQL)
  7xxx: Cache layer (Redis)
  9xxx: System

Every error maps to a 5xx response; none of them carries a partial user.
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 6xxx: Record store ---

class StoreWriteError(AppError):
    """Insert failed or timed out. Nothing was created; retry the whole creation."""

    def __init__(self, detail: str) -> None:
        super().__init__(6001, f"Failed to create user: {detail}", 503)


class StoreReadError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(6002, f"Failed to read users: {detail}", 503)


# --- 7xxx: Cache ---

class CacheInvalidationError(AppError):
    """The user row is committed but the list snapshot may still be stale."""

    def __init__(self, user_id: int, detail: str) -> None:
        self.user_id = user_id
        super().__init__(
            7001,
            f"User {user_id} was created but the user list cache could not be invalidated: {detail}",
            500,
        )


class CacheReadError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(7002, f"Failed to read user list cache: {detail}", 503)


class CacheWriteError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(7003, f"Failed to write user list cache: {detail}", 503)


# --- 9xxx: System ---

class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)
