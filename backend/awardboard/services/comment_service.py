"""
AwardBoard Backend - Comment Service
======================================

What:  Business logic for the shared comment board: add, remove, list.
How:   Async SQLAlchemy against the `comments` table. Policy checks raise
       application exceptions; the route handlers turn those into award codes.
Who:   Called by the comment route handlers.

Rules:
    add()     Any character with code point > 255 → UnprocessableContentError
              (award 422) and nothing is written.
    remove()  Missing id → NotFoundError; requester is not the author →
              ForbiddenError (award 403) and the row stays.
    list()    All comments, newest first.
"""

import logging
from typing import List, Optional

from sqlalchemy import delete, desc, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from awardboard.exceptions import (
    DatabaseError,
    ForbiddenError,
    NotFoundError,
    UnprocessableContentError,
)
from awardboard.models.comment import Comment, new_comment_id, now_millis

logger = logging.getLogger(__name__)

LATIN1_MAX_CODE_POINT = 255


def is_double_byte(message: str) -> bool:
    """True if any character falls outside Latin-1."""
    return any(ord(ch) > LATIN1_MAX_CODE_POINT for ch in message)


class CommentService:
    """
    Stateless; receives the database session for each call.
    """

    async def add(
        self,
        db: AsyncSession,
        username: str,
        message: str,
        timestamp: Optional[int] = None,
    ) -> str:
        """
        Store a new comment.

        Returns:
            The new comment's id.

        Raises:
            UnprocessableContentError: message contains non-Latin-1 characters
            DatabaseError: insert failed
        """
        if is_double_byte(message):
            raise UnprocessableContentError(context={"username": username})

        comment = Comment(
            id=new_comment_id(),
            username=username,
            message=message,
            timestamp=timestamp if timestamp is not None else now_millis(),
        )
        db.add(comment)
        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error adding comment for %s: %s", username, str(e))
            raise DatabaseError(
                message="Could not save the comment. Please try again.",
                context={"error_type": type(e).__name__},
            )

        logger.info("Comment %s added by %s", comment.id, username)
        return comment.id

    async def get(self, db: AsyncSession, comment_id: str) -> Comment:
        try:
            result = await db.execute(select(Comment).where(Comment.id == comment_id))
            comment = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching comment %s: %s", comment_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the comment. Please try again.",
                context={"comment_id": comment_id},
            )

        if comment is None:
            raise NotFoundError(resource="comment", resource_id=comment_id)
        return comment

    async def remove(self, db: AsyncSession, comment_id: str, requester: str) -> None:
        """
        Delete a comment owned by `requester`.

        Raises:
            NotFoundError: no comment with that id
            ForbiddenError: requester is not the author
            DatabaseError: query failed
        """
        comment = await self.get(db, comment_id)
        if comment.username != requester:
            logger.info(
                "Comment %s removal refused: %s is not the author (%s)",
                comment_id,
                requester,
                comment.username,
            )
            raise ForbiddenError(context={"comment_id": comment_id, "requester": requester})

        try:
            await db.execute(delete(Comment).where(Comment.id == comment_id))
        except SQLAlchemyError as e:
            logger.error("Database error removing comment %s: %s", comment_id, str(e))
            raise DatabaseError(
                message="Could not remove the comment. Please try again.",
                context={"comment_id": comment_id},
            )
        logger.info("Comment %s removed by %s", comment_id, requester)

    async def list_recent(self, db: AsyncSession) -> List[Comment]:
        try:
            result = await db.execute(
                select(Comment).order_by(desc(Comment.timestamp), desc(Comment.id))
            )
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing comments: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve comments. Please try again.",
                context={"error_type": type(e).__name__},
            )


comment_service = CommentService()
