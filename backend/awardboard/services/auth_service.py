"""
AwardBoard Backend - Session/Identity Service
===============================================

What:  Signup, authentication, login/logout, session restoration and
       password changes.
How:   Composes the CredentialStore (users + bcrypt) with an injected
       SessionStore (token → username).
Who:   Route handlers (login, signup, change_password, logout) and the award
       pipeline middleware (restore_session on every request).

Authentication outcomes:
    unknown username    → UnknownUserError    "Incorrect username or password!"
    wrong password      → BadCredentialError  "Incorrect username or password"
    success             → Identity (+ session token on login)

A failed login never creates a session.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from awardboard.exceptions import (
    BadCredentialError,
    SessionExpiredError,
    UnknownUserError,
)
from awardboard.services.credential_store import CredentialStore, credential_store
from awardboard.services.session_store import SessionStore, session_store

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    """The authenticated requester. `token` is None until a session exists."""

    username: str
    token: Optional[str] = None


class AuthService:
    def __init__(self, credentials: CredentialStore, sessions: SessionStore):
        self.credentials = credentials
        self.sessions = sessions

    async def signup(self, db: AsyncSession, username: str, password: str) -> bool:
        created = await self.credentials.create_user(db, username, password)
        if not created:
            logger.info("Signup rejected, username taken: %s", username)
        return created

    async def authenticate(self, db: AsyncSession, username: str, password: str) -> Identity:
        """
        Verify a username/password pair.

        Raises:
            UnknownUserError: no such user
            BadCredentialError: hash comparison failed
        """
        user = await self.credentials.get_user(db, username)
        if user is None:
            raise UnknownUserError(username=username)
        if not await self.credentials.check_password(user, password):
            raise BadCredentialError(username=username)
        return Identity(username=user.username)

    async def login(self, db: AsyncSession, username: str, password: str) -> Identity:
        identity = await self.authenticate(db, username, password)
        token = await self.sessions.create(identity.username)
        logger.info("Login: %s", identity.username)
        return Identity(username=identity.username, token=token)

    async def restore_session(self, db: AsyncSession, token: str) -> Identity:
        """
        Resolve a session cookie back to an identity.

        Raises:
            SessionExpiredError: unknown/expired token, or the user behind
                the session no longer exists (the session is destroyed).
        """
        username = await self.sessions.resolve(token)
        user = await self.credentials.get_user(db, username)
        if user is None:
            await self.sessions.destroy(token)
            raise SessionExpiredError(
                message="User not found; session not restored",
                context={"username": username},
            )
        return Identity(username=user.username, token=token)

    async def logout(self, token: str) -> None:
        await self.sessions.destroy(token)

    async def change_password(
        self,
        db: AsyncSession,
        username: str,
        old_password: str,
        new_password: str,
    ) -> bool:
        user = await self.credentials.get_user(db, username)
        if user is None or not await self.credentials.check_password(user, old_password):
            logger.info("Password change rejected for %s", username)
            return False
        await self.credentials.set_password(db, username, new_password)
        return True


auth_service = AuthService(credentials=credential_store, sessions=session_store)
