"""
AwardBoard Backend - Request Classifier Stages
================================================

What:  The pure predicate stages of the award pipeline.
How:   Each stage inspects the AwardContext and either settles a code or
       leaves the outcome Pending. run_stages() stops at the first Terminal.

Order (route handlers run between the two groups):

    PRE_HANDLER_STAGES
      1. length_guard       target > 42 chars → 414; header JSON > 2048 → 431
      2. body_size_guard    POST body JSON > 1024 chars → 413
    POST_HANDLER_STAGES
      4. method_guard       DELETE /remove_comment → 405 (Allowed: POST); PUT → 501
      5. fallback           still Pending → 404
"""

import json
from typing import Callable, Iterable

from awardboard.awards.context import AwardContext, Outcome
from awardboard.config import settings

Stage = Callable[[AwardContext], Outcome]

REMOVE_COMMENT_PATH = "/remove_comment"


def serialized_body_length(body: bytes) -> int:
    """
    Length of the body re-serialized as compact JSON.

    An empty body counts as `{}`. A body that is not JSON counts its raw
    decoded length.
    """
    if not body:
        return len("{}")
    try:
        parsed = json.loads(body)
    except ValueError:
        return len(body.decode("utf-8", errors="replace"))
    return len(json.dumps(parsed, separators=(",", ":"), ensure_ascii=False))


def length_guard(ctx: AwardContext) -> Outcome:
    if len(ctx.target) > settings.max_target_length:
        return ctx.settle(414)
    if len(ctx.serialized_headers) > settings.max_header_length:
        return ctx.settle(431)
    return ctx.outcome


def body_size_guard(ctx: AwardContext) -> Outcome:
    if ctx.method == "POST" and serialized_body_length(ctx.body) > settings.max_body_length:
        return ctx.settle(413)
    return ctx.outcome


def method_guard(ctx: AwardContext) -> Outcome:
    if ctx.method == "DELETE" and ctx.path == REMOVE_COMMENT_PATH:
        ctx.response_headers["Allowed"] = "POST"
        return ctx.settle(405)
    if ctx.method == "PUT":
        return ctx.settle(501)
    return ctx.outcome


def fallback(ctx: AwardContext) -> Outcome:
    return ctx.settle(404)


PRE_HANDLER_STAGES = (length_guard, body_size_guard)
POST_HANDLER_STAGES = (method_guard, fallback)


def run_stages(ctx: AwardContext, stages: Iterable[Stage]) -> Outcome:
    for stage in stages:
        if ctx.is_terminal:
            break
        stage(ctx)
    return ctx.outcome
