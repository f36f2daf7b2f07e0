"""
OAuth2 login, callback and logout endpoints.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse, RedirectResponse

from discord_oauth import REASON_CALLBACK_ERROR, CallbackRejected, LoginFlow
from sessions import SessionCommitError, SessionHandle
from settings import DASHBOARD_PATH, LANDING_PATH
from ..dependencies import get_login_flow, get_session

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/login")
async def login(
    session: SessionHandle = Depends(get_session),
    flow: LoginFlow = Depends(get_login_flow),
):
    """Redirect to Discord, or straight to the dashboard when already signed in"""
    try:
        redirect = await flow.initiate_login(session)
    except SessionCommitError as e:
        logger.error(f"[OAuth] Error saving session: {e}")
        return PlainTextResponse("Failed to initialize login", status_code=500)
    return RedirectResponse(redirect.location, status_code=302)


@router.get("/callback")
async def callback(
    code: Optional[str] = None,
    state: Optional[str] = None,
    session: SessionHandle = Depends(get_session),
    flow: LoginFlow = Depends(get_login_flow),
):
    """Complete the login; every failure is a 400 with a plain-text reason"""
    try:
        await flow.handle_callback(session, code, state)
    except CallbackRejected as e:
        return PlainTextResponse(e.user_message, status_code=400)
    except Exception:
        # Public endpoint: no stack detail and no 500
        logger.exception("[OAuth] Error during callback")
        return PlainTextResponse(CallbackRejected(REASON_CALLBACK_ERROR).user_message, status_code=400)
    return RedirectResponse(DASHBOARD_PATH, status_code=302)


@router.get("/logout")
async def logout(
    session: SessionHandle = Depends(get_session),
    flow: LoginFlow = Depends(get_login_flow),
):
    """Destroy the session and return to the landing page"""
    await flow.logout(session)
    return RedirectResponse(LANDING_PATH, status_code=302)
