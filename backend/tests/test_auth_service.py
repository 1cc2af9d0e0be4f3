"""
AwardBoard Backend - Auth Service Tests
=========================================

What:  Signup, authentication, login/logout and session restoration.
How:   Real SQLite database (db_session fixture) and a private in-memory
       session store per test.

What we test:
    ✅ Signup creates a user; a taken username returns False
    ✅ Unknown user and bad password raise distinct errors
    ✅ A failed login creates no session
    ✅ restore_session round trip; session of a deleted user is destroyed
    ✅ change_password requires the old password
    ✅ bcrypt hashing truncates at 72 bytes
"""

import pytest
from sqlalchemy import delete

from awardboard.exceptions import BadCredentialError, SessionExpiredError, UnknownUserError
from awardboard.models.user import User
from awardboard.services.auth_service import AuthService, Identity
from awardboard.services.credential_store import (
    CredentialStore,
    hash_password,
    verify_password,
)
from awardboard.services.session_store import InMemorySessionStore


class TestAuthService:

    def setup_method(self):
        self.sessions = InMemorySessionStore(idle_timeout=60)
        self.service = AuthService(credentials=CredentialStore(), sessions=self.sessions)

    @pytest.mark.asyncio
    async def test_signup_then_duplicate(self, db_session):
        assert await self.service.signup(db_session, "alice", "pw") is True
        assert await self.service.signup(db_session, "alice", "other") is False

    @pytest.mark.asyncio
    async def test_stored_hash_is_not_the_password(self, db_session):
        await self.service.signup(db_session, "alice", "pw")
        user = await db_session.get(User, "alice")
        assert user.password_hash != "pw"
        assert user.password_hash.startswith("$2")

    @pytest.mark.asyncio
    async def test_authenticate_success(self, db_session):
        await self.service.signup(db_session, "alice", "pw")
        identity = await self.service.authenticate(db_session, "alice", "pw")
        assert identity == Identity(username="alice")

    @pytest.mark.asyncio
    async def test_unknown_user(self, db_session):
        with pytest.raises(UnknownUserError) as exc_info:
            await self.service.authenticate(db_session, "nobody", "pw")
        assert exc_info.value.message == "Incorrect username or password!"

    @pytest.mark.asyncio
    async def test_bad_password(self, db_session):
        await self.service.signup(db_session, "alice", "pw")
        with pytest.raises(BadCredentialError) as exc_info:
            await self.service.authenticate(db_session, "alice", "wrong")
        assert exc_info.value.message == "Incorrect username or password"

    @pytest.mark.asyncio
    async def test_failed_login_creates_no_session(self, db_session):
        await self.service.signup(db_session, "alice", "pw")
        with pytest.raises(BadCredentialError):
            await self.service.login(db_session, "alice", "wrong")
        assert await self.sessions.count() == 0

    @pytest.mark.asyncio
    async def test_login_and_restore(self, db_session):
        await self.service.signup(db_session, "alice", "pw")
        identity = await self.service.login(db_session, "alice", "pw")
        assert identity.token

        restored = await self.service.restore_session(db_session, identity.token)
        assert restored == identity

    @pytest.mark.asyncio
    async def test_logout_invalidates_token(self, db_session):
        await self.service.signup(db_session, "alice", "pw")
        identity = await self.service.login(db_session, "alice", "pw")
        await self.service.logout(identity.token)
        with pytest.raises(SessionExpiredError):
            await self.service.restore_session(db_session, identity.token)

    @pytest.mark.asyncio
    async def test_restore_for_missing_user_destroys_session(self, db_session):
        await self.service.signup(db_session, "alice", "pw")
        identity = await self.service.login(db_session, "alice", "pw")
        await db_session.execute(delete(User).where(User.username == "alice"))

        with pytest.raises(SessionExpiredError):
            await self.service.restore_session(db_session, identity.token)
        assert await self.sessions.count() == 0

    @pytest.mark.asyncio
    async def test_change_password(self, db_session):
        await self.service.signup(db_session, "alice", "old")
        assert await self.service.change_password(db_session, "alice", "wrong", "new") is False
        assert await self.service.change_password(db_session, "alice", "old", "new") is True

        await self.service.authenticate(db_session, "alice", "new")
        with pytest.raises(BadCredentialError):
            await self.service.authenticate(db_session, "alice", "old")


class TestPasswordHashing:

    def test_verify_round_trip(self):
        hashed = hash_password("secret", rounds=4)
        assert verify_password("secret", hashed)
        assert not verify_password("Secret", hashed)

    def test_only_first_72_bytes_count(self):
        hashed = hash_password("a" * 80, rounds=4)
        assert verify_password("a" * 72 + "b" * 8, hashed)

    def test_malformed_hash_is_a_mismatch(self):
        assert verify_password("secret", "not-a-bcrypt-hash") is False
