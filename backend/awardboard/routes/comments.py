"""
AwardBoard Backend - Comment Board Route Handlers
===================================================

What:  POST /add_comment, POST /remove_comment, GET /comments.
How:   add/remove settle an award code and defer to the pipeline, which
       renders the award page; the listing answers JSON directly.

Award codes:
    add_comment      201 stored, 422 non-Latin-1 message
    remove_comment   200 removed, 403 not the author, 404 (fallback) unknown id
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from awardboard.awards.context import AwardContext
from awardboard.database import get_db_session
from awardboard.dependencies import get_award_context, require_identity
from awardboard.exceptions import ForbiddenError, NotFoundError, UnprocessableContentError
from awardboard.schemas.comment import (
    AddCommentRequest,
    CommentListResponse,
    CommentResponse,
    RemoveCommentRequest,
)
from awardboard.services.auth_service import Identity
from awardboard.services.comment_service import comment_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Comments"])


@router.post("/add_comment", summary="Post a comment (award 201 or 422)")
async def add_comment(
    body: AddCommentRequest,
    identity: Identity = Depends(require_identity),
    ctx: AwardContext = Depends(get_award_context),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    try:
        await comment_service.add(db, identity.username, body.message)
    except UnprocessableContentError:
        return ctx.defer(422)
    # The pipeline records the award in its own session after this returns
    await db.commit()
    return ctx.defer(201)


@router.post("/remove_comment", summary="Remove your own comment (award 200, 403 or 404)")
async def remove_comment(
    body: RemoveCommentRequest,
    identity: Identity = Depends(require_identity),
    ctx: AwardContext = Depends(get_award_context),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    try:
        await comment_service.remove(db, body.message_id, identity.username)
    except ForbiddenError:
        return ctx.defer(403)
    except NotFoundError:
        return ctx.defer()
    await db.commit()
    return ctx.defer(200)


@router.get("/comments", response_model=CommentListResponse, summary="Every comment, newest first")
async def list_comments(
    identity: Identity = Depends(require_identity),
    db: AsyncSession = Depends(get_db_session),
) -> CommentListResponse:
    comments = await comment_service.list_recent(db)
    return CommentListResponse(
        username=identity.username,
        messages=[CommentResponse.model_validate(c) for c in comments],
    )
