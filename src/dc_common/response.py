"""Response envelope shared by the /users routes and the AppError handler.

Body shape:
{
    "code": 0,            // 0 on success, AppError.code otherwise
    "message": "success",
    "data": ...,          // user, list of users, or null on error
    "timestamp": "...",
    "request_id": "..."   // same value as the X-Request-ID response header
}
"""

import uuid
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field
from starlette.requests import Request


def new_request_id() -> str:
    return f"req_{uuid.uuid4().hex[:12]}"


class ApiResponse(BaseModel):
    code: int = 0
    message: str = "success"
    data: Any = None
    timestamp: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    request_id: str = Field(default_factory=new_request_id)


def _request_id_of(request: Request | None) -> str:
    if request is None:
        return new_request_id()
    # Set by RequestLogMiddleware; absent when the middleware is not installed
    return getattr(request.state, "request_id", None) or new_request_id()


def success_response(
    data: Any = None, message: str = "success", request: Request | None = None
) -> ApiResponse:
    return ApiResponse(code=0, message=message, data=data, request_id=_request_id_of(request))


def error_response(code: int, message: str, request: Request | None = None) -> ApiResponse:
    return ApiResponse(code=code, message=message, data=None, request_id=_request_id_of(request))
