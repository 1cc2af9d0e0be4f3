"""
AwardBoard Backend - Comment Board Schemas
============================================
"""

from typing import List

from pydantic import BaseModel, Field


class AddCommentRequest(BaseModel):
    message: str


class RemoveCommentRequest(BaseModel):
    message_id: str


class CommentResponse(BaseModel):
    id: str
    username: str
    message: str
    timestamp: int = Field(description="Creation time, epoch milliseconds")

    model_config = {"from_attributes": True}


class CommentListResponse(BaseModel):
    """GET /comments: the caller's name plus every comment, newest first."""

    username: str
    messages: List[CommentResponse]
