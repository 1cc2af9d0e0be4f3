"""
AwardBoard Backend - User and Award SQLAlchemy Models
=======================================================

What:  ORM models for the `users` and `user_awards` tables.
How:   A user's award set is stored as one row per (username, code) pair.
       The composite primary key makes a repeated award a no-op insert,
       so the set can only grow by distinct codes.
Who:   Used by CredentialStore and by Alembic for schema management.

Lifecycle:
    1. Created on signup with a bcrypt hash and no awards
    2. Password hash replaced on change-password
    3. Awards inserted by the award recorder as a side effect of requests
    4. Never deleted
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column

from awardboard.database import Base


class User(Base):
    __tablename__ = "users"

    username: Mapped[str] = mapped_column(
        String(255),
        primary_key=True,
        comment="Unique login name; also the identity stored in sessions",
    )

    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="bcrypt hash (salt embedded)",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    def __repr__(self) -> str:
        return f"<User(username='{self.username}')>"


class UserAward(Base):
    """One earned status code. (username, code) is unique."""

    __tablename__ = "user_awards"

    username: Mapped[str] = mapped_column(
        String(255),
        ForeignKey("users.username"),
        primary_key=True,
    )

    code: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        comment="HTTP status code earned by the user",
    )

    earned_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
        comment="First time the user triggered this code",
    )

    def __repr__(self) -> str:
        return f"<UserAward(username='{self.username}', code={self.code})>"
