"""Request logging middleware.

Assigns each request an ID (reusing a well-formed inbound X-Request-ID so a
caller can correlate its own logs), stores it on request.state for the
response envelope, echoes it in the X-Request-ID response header, and writes
one access line per request. 5xx responses are logged at WARNING so store
and cache outages stand out from normal traffic.

Log format:
    INFO [POST] /users → 201 (12ms) req_a1b2c3d4e5f6
"""

import logging
import re
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from src.dc_common.response import new_request_id

logger = logging.getLogger("demo.request")

REQUEST_ID_HEADER = "X-Request-ID"
_VALID_REQUEST_ID = re.compile(r"[A-Za-z0-9_.-]{1,64}")


def resolve_request_id(inbound: str | None) -> str:
    if inbound and _VALID_REQUEST_ID.fullmatch(inbound):
        return inbound
    return new_request_id()


class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        request.state.request_id = request_id

        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000

        response.headers[REQUEST_ID_HEADER] = request_id
        level = logging.WARNING if response.status_code >= 500 else logging.INFO
        logger.log(
            level,
            "[%s] %s → %d (%.0fms) %s",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            request_id,
        )
        return response
