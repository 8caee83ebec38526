from __future__ import annotations

import logging
import re
import time
from typing import Optional
from uuid import uuid4

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from vidshare.core.response import reset_request_id, set_request_id

logger = logging.getLogger("vidshare.access")

REQUEST_ID_HEADER = "X-Request-Id"
_REQUEST_ID_PATTERN = re.compile(r"^[A-Za-z0-9._:-]{1,128}$")


def _accepted_request_id(raw: Optional[str]) -> Optional[str]:
    if raw is None:
        return None
    candidate = raw.strip()
    return candidate if _REQUEST_ID_PATTERN.match(candidate) else None


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Tag each request with a request id and write one access log line.

    A caller-supplied ``X-Request-Id`` is reused when it is a short token;
    anything else is replaced with a fresh id. The id is echoed back in the
    response header and is visible to handlers through ``get_request_id``.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = _accepted_request_id(request.headers.get(REQUEST_ID_HEADER)) or uuid4().hex
        token = set_request_id(request_id)
        started = time.perf_counter()
        try:
            response = await call_next(request)
            elapsed_ms = (time.perf_counter() - started) * 1000
            level = logging.WARNING if response.status_code >= 500 else logging.INFO
            logger.log(
                level,
                "%s %s -> %s in %.1fms request_id=%s",
                request.method,
                request.url.path,
                response.status_code,
                elapsed_ms,
                request_id,
            )
        finally:
            reset_request_id(token)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
