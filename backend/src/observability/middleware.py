"""Request correlation middleware.

Every response carries X-Request-ID: the caller's value when supplied,
otherwise a fresh one. Each request is logged once on arrival and once on
completion or failure.
"""

import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from .request_id import generate_request_id, set_request_id
from .logging_config import get_logger

logger = get_logger(__name__)


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


class RequestIDMiddleware(BaseHTTPMiddleware):

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or generate_request_id()
        set_request_id(request_id)
        route = f"{request.method} {request.url.path}"

        started = time.perf_counter()
        logger.info(route, extra={
            "method": request.method,
            "path": request.url.path,
            "client_ip": getattr(request.client, "host", None),
        })

        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error(
                f"{route} raised {type(exc).__name__}",
                extra={"error_type": type(exc).__name__, "duration_ms": _elapsed_ms(started)},
                exc_info=True,
            )
            raise

        logger.info(
            f"{route} -> {response.status_code}",
            extra={"status_code": response.status_code, "duration_ms": _elapsed_ms(started)},
        )
        response.headers["X-Request-ID"] = request_id
        return response
