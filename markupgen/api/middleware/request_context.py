from __future__ import annotations

import logging
import time
import uuid
from typing import Callable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from markupgen.core.observability.metrics import inc_http

log = logging.getLogger("markupgen.request")

REQUEST_ID_HEADER = "X-Request-Id"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Adds:
      request.state.request_id
      response header: X-Request-Id
    and counts the request in the metrics snapshot.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        rid = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = rid

        start = time.time()
        resp = await call_next(request)
        dur_ms = int((time.time() - start) * 1000)

        resp.headers[REQUEST_ID_HEADER] = rid
        inc_http(request.method, request.url.path, getattr(resp, "status_code", None))

        if request.url.path.startswith("/api/"):
            log.info(
                "%s",
                {
                    "event": "request",
                    "request_id": rid,
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": resp.status_code,
                    "duration_ms": dur_ms,
                },
            )
        return resp
