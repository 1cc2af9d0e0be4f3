"""
AwardBoard Backend - Award Recorder
=====================================

Adds the request's final award code to the requester's award set. Runs in
its own session because it executes in middleware, after the route
handler's session has been committed and closed.
"""

import logging

from awardboard.awards.context import AwardContext
from awardboard.database import session_scope
from awardboard.services.credential_store import CredentialStore, credential_store

logger = logging.getLogger(__name__)


async def record_award(ctx: AwardContext, store: CredentialStore = credential_store) -> bool:
    """
    Returns:
        True if an award was written (requester authenticated and a code
        settled), False if there was nothing to record.

    Raises:
        DatabaseError: the insert failed
    """
    if ctx.identity is None or ctx.code is None:
        return False

    async with session_scope() as db:
        await store.add_award(db, ctx.identity.username, ctx.code)

    logger.debug("Award %d recorded for %s", ctx.code, ctx.identity.username)
    return True
