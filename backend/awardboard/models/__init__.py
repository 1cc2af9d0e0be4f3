"""
AwardBoard Backend - ORM Models
=================================

Importing this package registers every table with `Base.metadata`
(used by `init_models()` and Alembic autogenerate).
"""

from awardboard.models.comment import Comment
from awardboard.models.user import User, UserAward

__all__ = ["Comment", "User", "UserAward"]
