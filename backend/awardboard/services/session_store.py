"""
AwardBoard Backend - Server-Side Session Store
================================================

What:  Maps opaque session tokens (sent to the browser as a cookie) to
       usernames, with an idle timeout.
How:   `SessionStore` is the abstract contract; `InMemorySessionStore` is the
       single-process implementation used by default. The auth service and
       the award pipeline only see the interface, so a shared backend
       (Redis, database table) can be swapped in without touching them.

Expiry:
    Sliding idle timeout. Every successful resolve() refreshes the session's
    last-seen time; a session unused for `idle_timeout` seconds is dropped.
    Expired entries are removed lazily on access and in bulk by
    purge_expired(), which create() runs every PURGE_INTERVAL creations.

Concurrency:
    The in-memory methods never await, so the event loop runs each one to
    completion before another request can touch the dict. Not shared
    across worker processes.
"""

import logging
import secrets
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Dict

from awardboard.config import settings
from awardboard.exceptions import SessionExpiredError

logger = logging.getLogger(__name__)


class SessionStore(ABC):
    """
    Abstract interface for server-side sessions.

    Contract:
        - create() returns a new unguessable token bound to a username
        - resolve() returns the username or raises SessionExpiredError
        - destroy() is idempotent
    """

    @abstractmethod
    async def create(self, username: str) -> str:
        ...

    @abstractmethod
    async def resolve(self, token: str) -> str:
        """
        Returns:
            The username bound to `token`.

        Raises:
            SessionExpiredError: unknown token or idle timeout elapsed.
        """
        ...

    @abstractmethod
    async def destroy(self, token: str) -> None:
        ...

    @abstractmethod
    async def purge_expired(self) -> int:
        """Drop expired sessions; returns how many were removed."""
        ...

    @abstractmethod
    async def count(self) -> int:
        ...


@dataclass
class SessionRecord:
    username: str
    last_seen: float


class InMemorySessionStore(SessionStore):
    PURGE_INTERVAL = 100

    def __init__(
        self,
        idle_timeout: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.idle_timeout = idle_timeout
        self._clock = clock
        self._sessions: Dict[str, SessionRecord] = {}
        self._created = 0

    async def create(self, username: str) -> str:
        token = secrets.token_urlsafe(32)
        self._sessions[token] = SessionRecord(username=username, last_seen=self._clock())
        self._created += 1
        if self._created % self.PURGE_INTERVAL == 0:
            await self.purge_expired()
        logger.debug("Session created for %s", username)
        return token

    async def resolve(self, token: str) -> str:
        record = self._sessions.get(token)
        if record is None:
            raise SessionExpiredError(message="Unknown session")

        now = self._clock()
        if now - record.last_seen > self.idle_timeout:
            del self._sessions[token]
            raise SessionExpiredError(context={"username": record.username})

        record.last_seen = now
        return record.username

    async def destroy(self, token: str) -> None:
        record = self._sessions.pop(token, None)
        if record is not None:
            logger.debug("Session destroyed for %s", record.username)

    async def purge_expired(self) -> int:
        cutoff = self._clock() - self.idle_timeout
        expired = [t for t, r in self._sessions.items() if r.last_seen < cutoff]
        for token in expired:
            del self._sessions[token]
        if expired:
            logger.debug("Purged %d expired sessions", len(expired))
        return len(expired)

    async def count(self) -> int:
        return len(self._sessions)

    def clear(self) -> None:
        self._sessions.clear()


session_store = InMemorySessionStore(idle_timeout=settings.session_idle_timeout)
