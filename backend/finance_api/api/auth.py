# finance_api/api/auth.py
import logging
from datetime import timedelta
from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import RedirectResponse
from starlette.concurrency import run_in_threadpool

from finance_api.api.deps import (
    RequestContext,
    get_identity_provider,
    get_request_context,
    get_session_store,
    get_settings,
    require_user,
)
from finance_api.core.config import Settings
from finance_api.core.errors import AuthenticationError, PersistenceError
from finance_api.db import models
from finance_api.schemas.auth import UserOut
from finance_api.services.google_oauth import AuthFailure, GoogleProfile, IdentityProvider
from finance_api.services.identity import IdentityService
from finance_api.services.security import create_state_token, new_nonce, verify_state_token
from finance_api.services.sessions import SessionStore

logger = logging.getLogger(__name__)
router = APIRouter()

STATE_COOKIE = "oauth_state"


def _callback_url(request: Request, settings: Settings) -> str:
    url = settings.GOOGLE_CALLBACK_URL
    if url.startswith(("http://", "https://")):
        return url
    return str(request.base_url).rstrip("/") + url


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url, status_code=status.HTTP_302_FOUND)


def _establish_session(store: SessionStore, profile: GoogleProfile) -> str:
    user = IdentityService(store.db).link(profile)
    return store.create(user.id).sid


@router.get("/google")
def google_login(
    request: Request,
    settings: Settings = Depends(get_settings),
    provider: IdentityProvider = Depends(get_identity_provider),
):
    ttl = timedelta(minutes=settings.OAUTH_STATE_EXPIRE_MINUTES)
    nonce = new_nonce()
    state = create_state_token(nonce, settings.SECRET_KEY, ttl)
    response = _redirect(provider.authorization_url(_callback_url(request, settings), state))
    response.set_cookie(
        STATE_COOKIE,
        nonce,
        max_age=int(ttl.total_seconds()),
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )
    return response


@router.get("/google/callback")
async def google_callback(
    request: Request,
    code: Optional[str] = None,
    state: Optional[str] = None,
    error: Optional[str] = None,
    settings: Settings = Depends(get_settings),
    provider: IdentityProvider = Depends(get_identity_provider),
    store: SessionStore = Depends(get_session_store),
):
    """
    Completes the Google login: check state, exchange the code, link the
    account and open a session. Every failure ends on the login page.
    """
    failure = _redirect(settings.login_failure_url)
    failure.delete_cookie(STATE_COOKIE)

    nonce = request.cookies.get(STATE_COOKIE)
    if error:
        logger.warning("Google login refused by provider: %s", error)
        return failure
    if not code or not verify_state_token(state or "", nonce or "", settings.SECRET_KEY):
        logger.warning("Google login rejected: missing code or invalid state")
        return failure

    result = await provider.exchange(code, _callback_url(request, settings))
    if isinstance(result, AuthFailure):
        logger.warning("Google login failed: %s", result.reason)
        return failure

    try:
        sid = await run_in_threadpool(_establish_session, store, result)
    except (AuthenticationError, PersistenceError):
        return failure

    response = _redirect(settings.CLIENT_URL)
    response.delete_cookie(STATE_COOKIE)
    response.set_cookie(
        settings.SESSION_COOKIE_NAME,
        sid,
        max_age=settings.SESSION_MAX_AGE_DAYS * 24 * 60 * 60,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )
    return response


@router.get("/user", response_model=UserOut)
def current_user(user: models.User = Depends(require_user)):
    return user


@router.get("/logout")
def logout(
    ctx: RequestContext = Depends(get_request_context),
    settings: Settings = Depends(get_settings),
    store: SessionStore = Depends(get_session_store),
):
    store.destroy(ctx.session_id)
    logger.info("Logout completed")
    response = _redirect(settings.CLIENT_URL)
    response.delete_cookie(
        settings.SESSION_COOKIE_NAME, httponly=True, secure=settings.is_production, samesite="lax"
    )
    return response
