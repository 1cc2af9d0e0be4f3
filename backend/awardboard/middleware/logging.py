"""
AwardBoard Backend - Access Log Middleware
============================================

What:  One log line per request: method, target, status, award code,
       requester, duration, client address.
How:   Wraps the award pipeline, so it reads the settled code and identity
       from `request.state.award` after the response is produced.
       Logged on the `awardboard.access` logger; main.setup_logging() can
       additionally append that logger to a file (ACCESS_LOG_PATH).

Level by status class:
    5xx → ERROR, 4xx → WARNING, everything else → INFO

Never logged: request bodies (passwords, comment text) and cookies.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("awardboard.access")

QUIET_PATHS = {"/health"}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in QUIET_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        status = response.status_code

        ctx = getattr(request.state, "award", None)
        award = ctx.code if ctx is not None else None
        username = ctx.username if ctx is not None else None

        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        logger.log(
            log_level,
            "%s %s %d award=%s user=%s %.1fms from %s",
            request.method,
            ctx.target if ctx is not None else request.url.path,
            status,
            award if award is not None else "-",
            username or "-",
            duration_ms,
            client_ip,
            extra={
                "method": request.method,
                "path": request.url.path,
                "status": status,
                "award": award,
                "username": username,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )

        return response
