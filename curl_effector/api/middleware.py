from __future__ import annotations

import logging
import re
import time
from typing import Callable, Optional
from uuid import uuid4

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

log = logging.getLogger("curl_effector.api")

_SAFE_REQUEST_ID = re.compile(r"^[A-Za-z0-9._-]{1,64}$")


class RequestLogMiddleware(BaseHTTPMiddleware):
    """Correlate and log every request.

    - Echoes (or mints) an X-Request-ID header.
    - Emits one `api_request` record with timing and the caller identity.

    Security notes:
    - A client-supplied request id is only reused if it is short and plain,
      so it cannot inject into log lines.
    - Bodies, URLs and vault paths are never logged here.
    """

    def __init__(self, app, *, header_name: str = "X-Request-ID"):
        super().__init__(app)
        self._header_name = header_name

    async def dispatch(self, request: Request, call_next: Callable):
        rid = request.headers.get(self._header_name) or ""
        if not _SAFE_REQUEST_ID.match(rid):
            rid = uuid4().hex
        request.state.request_id = rid

        start = time.monotonic()
        response: Optional[Response] = None
        try:
            response = await call_next(request)
            response.headers[self._header_name] = rid
            return response
        finally:
            log.info(
                "api_request",
                extra={
                    "request_id": rid,
                    "actor_id": getattr(request.state, "actor_id", None),
                    "particle_id": getattr(request.state, "particle_id", None),
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": getattr(response, "status_code", None),
                    "duration_ms": int((time.monotonic() - start) * 1000),
                },
            )
