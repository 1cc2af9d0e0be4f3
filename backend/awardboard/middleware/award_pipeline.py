"""
AwardBoard Backend - Award Pipeline Middleware
================================================

What:  Runs every request through the award classifier, records the award
       and produces the final response.
How:   Starlette BaseHTTPMiddleware; the AwardContext lives on
       `request.state.award` for the route handlers and the access log.

Flow per request:
    1. Build AwardContext (POST bodies are read here for the size guard;
       Starlette replays the cached body to the route)
    2. Restore identity from the session cookie
    3. PRE_HANDLER_STAGES: 414 / 431 / 413 short-circuit the request
    4. Route handler, unless a guard already settled the code:
         - handler returned its own response → its status is the award code
         - handler deferred → response discarded, code (if any) kept
    5. POST_HANDLER_STAGES: 405 / 501 / 404 fallback
    6. record_award() for authenticated requesters
    7. Deferred or guarded requests get the award page for the code

Failure mapping:
    - Session store or database down while restoring identity → 500 page
    - Exception escaping the route handler → 500 page
    - Award insert fails → 500 page
"""

import logging
from typing import Awaitable, Callable, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from awardboard.awards.classifier import (
    POST_HANDLER_STAGES,
    PRE_HANDLER_STAGES,
    run_stages,
)
from awardboard.awards.context import AwardContext
from awardboard.awards.recorder import record_award
from awardboard.awards.responder import render_award
from awardboard.config import settings
from awardboard.database import session_scope
from awardboard.exceptions import DatabaseError, SessionExpiredError
from awardboard.services.auth_service import AuthService, auth_service

logger = logging.getLogger(__name__)

Recorder = Callable[[AwardContext], Awaitable[bool]]


class AwardPipelineMiddleware(BaseHTTPMiddleware):
    def __init__(
        self,
        app,
        auth: AuthService = auth_service,
        recorder: Recorder = record_award,
        **kwargs,
    ):
        super().__init__(app, **kwargs)
        self.auth = auth
        self.recorder = recorder

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        body = await request.body() if request.method.upper() == "POST" else b""
        ctx = AwardContext.from_request(request, body)
        request.state.award = ctx

        await self._restore_identity(request, ctx)
        run_stages(ctx, PRE_HANDLER_STAGES)

        response: Optional[Response] = None
        if not ctx.is_terminal:
            response = await self._call_handler(request, ctx, call_next)

        run_stages(ctx, POST_HANDLER_STAGES)

        try:
            await self.recorder(ctx)
        except DatabaseError as exc:
            logger.error("Award recording failed: %s | Context: %s", exc.message, exc.context)
            ctx.abort(500)
            response = None

        if response is None or ctx.deferred:
            response = render_award(ctx)

        if ctx.clear_session_cookie:
            response.delete_cookie(settings.session_cookie_name)
        return response

    async def _restore_identity(self, request: Request, ctx: AwardContext) -> None:
        token = request.cookies.get(settings.session_cookie_name)
        if not token:
            return
        try:
            async with session_scope() as db:
                ctx.identity = await self.auth.restore_session(db, token)
        except SessionExpiredError as exc:
            logger.info("Session not restored: %s", exc.message)
            ctx.clear_session_cookie = True
        except DatabaseError as exc:
            logger.error("Identity restore failed: %s | Context: %s", exc.message, exc.context)
            ctx.abort(500)

    async def _call_handler(
        self,
        request: Request,
        ctx: AwardContext,
        call_next: RequestResponseEndpoint,
    ) -> Optional[Response]:
        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error(
                "Unhandled error in %s %s: %s",
                ctx.method,
                ctx.path,
                str(exc),
                exc_info=True,
            )
            ctx.abort(500)
            return None

        if ctx.deferred:
            return None
        ctx.settle(response.status_code)
        return response
