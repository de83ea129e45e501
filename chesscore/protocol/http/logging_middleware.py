from __future__ import annotations

import logging
import re
import time
import uuid
from typing import Callable, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request


logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "x-request-id"

_GAME_PATH = re.compile(r"^/api/games/([^/]+)")


def game_id_from_path(path: str) -> Optional[str]:
    """Return the session id from a ``/api/games/{game_id}/...`` path."""
    m = _GAME_PATH.match(path)
    return m.group(1) if m else None


class RequestIDLoggingMiddleware(BaseHTTPMiddleware):
    """Log every API call with a request id and, for game routes, the game id.

    The id is taken from the client's ``x-request-id`` header when present
    and is always echoed back in the response.
    """

    async def dispatch(self, request: Request, call_next: Callable):
        start = time.perf_counter()
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id
        extra = {"request_id": request_id, "game_id": game_id_from_path(request.url.path)}

        logger.info("%s %s", request.method, request.url.path, extra=extra)

        response = await call_next(request)
        duration_ms = int((time.perf_counter() - start) * 1000)
        response.headers[REQUEST_ID_HEADER] = request_id

        logger.info(
            "%s %s -> %d (%d ms)",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
            extra=extra,
        )
        return response
