"""Create users, user_awards and comments tables

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Initial AwardBoard schema.
       users        one row per account, bcrypt hash
       user_awards  award set, one row per (username, code)
       comments     the shared board

Rollback: downgrade() drops all three tables (all data lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column(
            "username",
            sa.String(255),
            nullable=False,
            comment="Unique login name; also the identity stored in sessions",
        ),
        sa.Column(
            "password_hash",
            sa.String(255),
            nullable=False,
            comment="bcrypt hash (salt embedded)",
        ),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("username"),
    )

    # Composite key: a code can only be earned once per user
    op.create_table(
        "user_awards",
        sa.Column("username", sa.String(255), nullable=False),
        sa.Column(
            "code",
            sa.Integer(),
            nullable=False,
            comment="HTTP status code earned by the user",
        ),
        sa.Column(
            "earned_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
            comment="First time the user triggered this code",
        ),
        sa.ForeignKeyConstraint(["username"], ["users.username"]),
        sa.PrimaryKeyConstraint("username", "code"),
    )

    op.create_table(
        "comments",
        sa.Column("id", sa.String(32), nullable=False),
        sa.Column(
            "username",
            sa.String(255),
            nullable=False,
            comment="Author; weak reference to users.username",
        ),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column(
            "timestamp",
            sa.BigInteger(),
            nullable=False,
            comment="Creation time, epoch milliseconds",
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_comments_username", "comments", ["username"])
    op.create_index(
        "idx_comments_timestamp",
        "comments",
        [sa.text("timestamp DESC")],
    )


def downgrade() -> None:
    op.drop_index("idx_comments_timestamp", table_name="comments")
    op.drop_index("ix_comments_username", table_name="comments")
    op.drop_table("comments")
    op.drop_table("user_awards")
    op.drop_table("users")
