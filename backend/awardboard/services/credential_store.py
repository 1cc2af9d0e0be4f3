"""
AwardBoard Backend - Credential Store
=======================================

What:  Persistence of user records: lookup, creation, password replacement,
       and the award set.
How:   Async SQLAlchemy queries against `users` / `user_awards`; bcrypt for
       hashing, run in Starlette's thread pool so hashing never blocks the
       event loop.
Who:   AuthService (credentials) and the award recorder (awards).

Award set semantics:
    add_award() is an INSERT ... ON CONFLICT DO NOTHING on the
    (username, code) primary key. Recording the same code twice leaves the
    set unchanged and never raises.
"""

import logging
from typing import List, Optional

import bcrypt
from sqlalchemy import select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from awardboard.config import settings
from awardboard.exceptions import DatabaseError
from awardboard.models.user import User, UserAward

logger = logging.getLogger(__name__)

# bcrypt only reads the first 72 bytes of a password
BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str, rounds: Optional[int] = None) -> str:
    salt = bcrypt.gensalt(rounds=rounds or settings.bcrypt_rounds)
    return bcrypt.hashpw(_password_bytes(password), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(_password_bytes(password), password_hash.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        logger.warning("Malformed password hash encountered during verification")
        return False


class CredentialStore:
    """
    Data access for users and their awards.

    Stateless: every method receives the session to run in, so the caller
    owns the transaction (request dependency or middleware session scope).
    """

    async def get_user(self, db: AsyncSession, username: str) -> Optional[User]:
        try:
            result = await db.execute(select(User).where(User.username == username))
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching user %s: %s", username, str(e))
            raise DatabaseError(
                message="Could not load the user. Please try again.",
                context={"error_type": type(e).__name__},
            )

    async def create_user(self, db: AsyncSession, username: str, password: str) -> bool:
        """
        Insert a new user with a freshly salted hash.

        Returns:
            True if created, False if the username is already taken.
        """
        if await self.get_user(db, username) is not None:
            return False

        password_hash = await run_in_threadpool(hash_password, password)
        db.add(User(username=username, password_hash=password_hash))
        try:
            await db.flush()
        except IntegrityError:
            # Lost a race with a concurrent signup for the same name
            await db.rollback()
            logger.info("Signup for %s lost a concurrent insert race", username)
            return False
        except SQLAlchemyError as e:
            logger.error("Database error creating user %s: %s", username, str(e))
            raise DatabaseError(
                message="Could not create the account. Please try again.",
                context={"error_type": type(e).__name__},
            )

        logger.info("User created: %s", username)
        return True

    async def check_password(self, user: User, password: str) -> bool:
        return await run_in_threadpool(verify_password, password, user.password_hash)

    async def set_password(self, db: AsyncSession, username: str, new_password: str) -> None:
        password_hash = await run_in_threadpool(hash_password, new_password)
        try:
            await db.execute(
                update(User)
                .where(User.username == username)
                .values(password_hash=password_hash)
            )
        except SQLAlchemyError as e:
            logger.error("Database error updating password for %s: %s", username, str(e))
            raise DatabaseError(
                message="Could not change the password. Please try again.",
                context={"error_type": type(e).__name__},
            )
        logger.info("Password changed for %s", username)

    async def add_award(self, db: AsyncSession, username: str, code: int) -> None:
        """Insert `code` into the user's award set (no-op if already earned)."""
        dialect = db.get_bind().dialect.name
        values = {"username": username, "code": code}
        try:
            if dialect == "postgresql":
                stmt = pg_insert(UserAward).values(**values).on_conflict_do_nothing(
                    index_elements=["username", "code"]
                )
            elif dialect == "sqlite":
                stmt = sqlite_insert(UserAward).values(**values).on_conflict_do_nothing(
                    index_elements=["username", "code"]
                )
            else:
                existing = await db.get(UserAward, (username, code))
                if existing is not None:
                    return
                db.add(UserAward(**values))
                await db.flush()
                return
            await db.execute(stmt)
        except SQLAlchemyError as e:
            logger.error("Database error recording award %d for %s: %s", code, username, str(e))
            raise DatabaseError(
                message="Could not record the award.",
                context={"username": username, "code": code, "error_type": type(e).__name__},
            )

    async def get_awards(self, db: AsyncSession, username: str) -> List[int]:
        try:
            result = await db.execute(
                select(UserAward.code)
                .where(UserAward.username == username)
                .order_by(UserAward.code)
            )
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing awards for %s: %s", username, str(e))
            raise DatabaseError(
                message="Could not load awards. Please try again.",
                context={"error_type": type(e).__name__},
            )


credential_store = CredentialStore()
