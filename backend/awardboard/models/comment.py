"""
AwardBoard Backend - Comment SQLAlchemy Model
===============================================

What:  ORM model representing the `comments` table.

Table Design:
    - id: opaque hex string (uuid4), generated in Python
    - username: author reference with no foreign key, so comments outlive
      their author
    - timestamp: creation instant in epoch milliseconds, which is also the
      wire format returned by GET /comments

    Index on timestamp DESC serves the board listing (newest first).
"""

import time
import uuid

from sqlalchemy import BigInteger, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from awardboard.database import Base


def new_comment_id() -> str:
    return uuid.uuid4().hex


def now_millis() -> int:
    return int(time.time() * 1000)


class Comment(Base):
    """
    A message on the shared board.

    Immutable after creation; deleted only by its author.
    """

    __tablename__ = "comments"

    id: Mapped[str] = mapped_column(
        String(32),
        primary_key=True,
        default=new_comment_id,
    )

    username: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
        comment="Author; weak reference to users.username",
    )

    message: Mapped[str] = mapped_column(Text, nullable=False)

    timestamp: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
        default=now_millis,
        comment="Creation time, epoch milliseconds",
    )

    __table_args__ = (
        Index("idx_comments_timestamp", timestamp.desc()),
    )

    def __repr__(self) -> str:
        return f"<Comment(id={self.id}, username='{self.username}', timestamp={self.timestamp})>"
