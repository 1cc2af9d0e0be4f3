"""
AwardBoard Backend - Award Route Handlers
===========================================

What:  Endpoints that exist mainly to hand out a status code.

    GET /home                 200, or 429 past 5 requests in 5 seconds
    GET /brewCoffee           418
    GET /area51               451
    GET /exponential/{x}/{f}  JSON result, or 500 on bad digit counts
    anything else             deferred with no code (method guards / 404)

`fallback_router` must be included after every other router: its
catch-all path matches any method and any path.
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from awardboard.awards.context import AwardContext
from awardboard.dependencies import get_award_context, require_identity
from awardboard.schemas.common import ExponentialResponse
from awardboard.services.auth_service import Identity
from awardboard.services.exponential import (
    parse_float_prefix,
    parse_fraction_digits,
    to_exponential,
)
from awardboard.services.rate_limiter import home_rate_limiter

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Awards"])
fallback_router = APIRouter(include_in_schema=False)

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


@router.get("/home", summary="Home page, rate limited per session")
async def home(
    identity: Identity = Depends(require_identity),
    ctx: AwardContext = Depends(get_award_context),
) -> Response:
    decision = home_rate_limiter.hit(identity.token or identity.username)
    if not decision.allowed:
        ctx.response_headers["Retry-After"] = str(decision.retry_after)
        return ctx.defer(429)
    return ctx.defer(200)


# This server only serves Earl Grey, Hot
@router.get("/brewCoffee", summary="I'm a teapot")
async def brew_coffee(ctx: AwardContext = Depends(get_award_context)) -> Response:
    return ctx.defer(418)


@router.get("/area51", summary="Unavailable for legal reasons")
async def area51(ctx: AwardContext = Depends(get_award_context)) -> Response:
    return ctx.defer(451)


@router.get(
    "/exponential/{x}/{f}",
    response_model=ExponentialResponse,
    summary="Format x in exponential notation with f fraction digits",
)
async def exponential(
    x: str,
    f: str,
    identity: Identity = Depends(require_identity),
    ctx: AwardContext = Depends(get_award_context),
):
    try:
        result = to_exponential(parse_float_prefix(x), parse_fraction_digits(f))
    except ValueError as e:
        logger.info("Exponential formatting failed for %s: %s", identity.username, str(e))
        return ctx.defer(500)
    return ExponentialResponse(result=result)


@fallback_router.api_route("/{path:path}", methods=ALL_METHODS)
async def unmatched(ctx: AwardContext = Depends(get_award_context)) -> Response:
    return ctx.defer()
