"""
AwardBoard Backend - Account Route Handlers
=============================================

What:  Login page, signup, login, logout, change-password and /me.
How:   Thin handlers over AuthService. These endpoints answer with their own
       JSON or redirect, so their HTTP status becomes the award code.

Session cookie:
    HTTP-only, SameSite=Lax, no Max-Age (browser-session lifetime); the
    server side expires it after SESSION_IDLE_TIMEOUT seconds idle.
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse, JSONResponse, RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from awardboard.awards.context import AwardContext
from awardboard.awards.responder import PAGES_DIR
from awardboard.config import settings
from awardboard.database import get_db_session
from awardboard.dependencies import get_award_context, require_anonymous, require_identity
from awardboard.schemas.auth import (
    ChangePasswordRequest,
    CredentialsRequest,
    MeResponse,
    StatusResponse,
)
from awardboard.services.auth_service import Identity, auth_service
from awardboard.services.credential_store import credential_store

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Account"])


@router.get("/", include_in_schema=False, dependencies=[Depends(require_anonymous)])
async def login_page() -> FileResponse:
    return FileResponse(path=str(PAGES_DIR / "index.html"), media_type="text/html")


@router.post(
    "/login",
    response_model=StatusResponse,
    responses={401: {"description": "Unknown user or wrong password", "model": StatusResponse}},
    summary="Log in and start a session",
)
async def login(
    body: CredentialsRequest,
    ctx: AwardContext = Depends(get_award_context),
    db: AsyncSession = Depends(get_db_session),
) -> JSONResponse:
    """
    Authenticate and set the session cookie.

    Failure raises AuthenticationError, answered by the global handler with
    401 `{status: <message>}`; no session is created in that case.
    """
    identity = await auth_service.login(db, body.username, body.password)

    # Re-login replaces any session the caller already held
    if ctx.identity is not None and ctx.identity.token:
        await auth_service.logout(ctx.identity.token)
    ctx.sign_in(identity)

    response = JSONResponse(content={"status": 200})
    response.set_cookie(
        key=settings.session_cookie_name,
        value=identity.token,
        httponly=True,
        samesite="lax",
        secure=settings.session_cookie_secure,
    )
    return response


@router.post(
    "/signup",
    response_model=StatusResponse,
    dependencies=[Depends(require_anonymous)],
    summary="Create an account",
)
async def signup(
    body: CredentialsRequest,
    db: AsyncSession = Depends(get_db_session),
) -> StatusResponse:
    created = await auth_service.signup(db, body.username, body.password)
    await db.commit()
    return StatusResponse(status="success" if created else "failed")


@router.post(
    "/change_password",
    response_model=StatusResponse,
    summary="Replace the caller's password",
)
async def change_password(
    body: ChangePasswordRequest,
    identity: Identity = Depends(require_identity),
    db: AsyncSession = Depends(get_db_session),
) -> StatusResponse:
    changed = await auth_service.change_password(
        db, identity.username, body.old_password, body.new_password
    )
    # Release the write before the pipeline records the award
    await db.commit()
    return StatusResponse(status="success" if changed else "failed")


@router.get("/logout", summary="End the session")
async def logout(ctx: AwardContext = Depends(get_award_context)) -> RedirectResponse:
    if ctx.identity is not None and ctx.identity.token:
        await auth_service.logout(ctx.identity.token)
        logger.info("Logout: %s", ctx.identity.username)
    ctx.sign_out()

    response = RedirectResponse(url="/", status_code=302)
    response.delete_cookie(settings.session_cookie_name)
    return response


@router.get("/me", response_model=MeResponse, summary="Current identity and awards")
async def me(
    identity: Identity = Depends(require_identity),
    db: AsyncSession = Depends(get_db_session),
) -> MeResponse:
    awards = await credential_store.get_awards(db, identity.username)
    return MeResponse(username=identity.username, awards=awards)
