from __future__ import annotations

import logging
from typing import Callable, Dict, Optional, Tuple, Type

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse, Response

from markupgen.core.generation.models import UnknownLanguageError
from markupgen.core.generation.source_reader import UnknownEncodingError
from markupgen.core.transformers.profiles import UnknownProfileError

log = logging.getLogger("markupgen.errors")

# Configuration errors: the caller asked for something that does not exist.
# A generation pass that fails is not an error here; it comes back as ok=false.
CONFIG_ERRORS: Dict[Type[Exception], Tuple[int, str]] = {
    UnknownProfileError: (400, "unknown_profile"),
    UnknownLanguageError: (400, "unknown_language"),
    UnknownEncodingError: (400, "unknown_encoding"),
}


def _message(exc: Exception) -> str:
    return str(exc.args[0]) if exc.args else type(exc).__name__


def _config_error(exc: Exception) -> Optional[Tuple[int, str]]:
    for exc_type, shaped in CONFIG_ERRORS.items():
        if isinstance(exc, exc_type):
            return shaped
    return None


class SafeErrorMiddleware(BaseHTTPMiddleware):
    """
    Shapes errors raised by the generation endpoints:
      - configuration errors -> 400 {"detail", "error"}
      - anything else -> 500, traceback logged server-side only
    The request_id is echoed in the body when known.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            rid = getattr(request.state, "request_id", None) or request.headers.get("x-request-id")
            shaped = _config_error(e)
            if shaped is not None:
                status, code = shaped
                log.info("config error %s rid=%s path=%s: %s", code, rid, request.url.path, _message(e))
                payload = {"detail": _message(e), "error": code}
            else:
                status = 500
                log.exception("Unhandled error rid=%s path=%s", rid, request.url.path)
                payload = {"detail": "Internal Server Error"}
            if rid:
                payload["request_id"] = rid
            return JSONResponse(status_code=status, content=payload)
