"""
AwardBoard Backend - Route Dependencies
=========================================

FastAPI dependencies that expose the request's AwardContext and enforce
login state:

    require_identity   protected routes; anonymous callers are redirected to /
    require_anonymous  login page and signup; signed-in callers go to /home
"""

from fastapi import Depends, Request

from awardboard.awards.context import AwardContext
from awardboard.exceptions import AlreadyAuthenticatedError, NotAuthenticatedError
from awardboard.services.auth_service import Identity


def get_award_context(request: Request) -> AwardContext:
    ctx = getattr(request.state, "award", None)
    if ctx is None:
        # Route reached without the pipeline middleware (e.g. a bare router in a test)
        ctx = AwardContext.from_request(request)
        request.state.award = ctx
    return ctx


def require_identity(
    request: Request,
    ctx: AwardContext = Depends(get_award_context),
) -> Identity:
    if ctx.identity is None:
        raise NotAuthenticatedError(path=request.url.path)
    return ctx.identity


def require_anonymous(ctx: AwardContext = Depends(get_award_context)) -> None:
    if ctx.identity is not None:
        raise AlreadyAuthenticatedError(username=ctx.identity.username)
