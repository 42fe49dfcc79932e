# finance_api/services/security.py
"""Opaque session identifiers + signed OAuth state tokens.

The OAuth ``state`` parameter is a short-lived JWT (python-jose, HS256) that
carries a random nonce. The same nonce is kept in an HTTP-only cookie, so a
callback is only accepted from the browser that started the login.
"""
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

from jose import jwt, JWTError

ALGORITHM = "HS256"
STATE_PURPOSE = "oauth_state"


def new_session_id() -> str:
    return secrets.token_urlsafe(32)


def new_nonce() -> str:
    return secrets.token_urlsafe(16)


def create_state_token(nonce: str, secret_key: str, expires_delta: timedelta) -> str:
    """
    Create a signed state token.
    - nonce is stored under 'nonce'
    - 'purpose' keeps these tokens from being confused with any other JWT signed with the same key
    - 'iat' and 'exp' included (exp as int timestamp)
    """
    now = datetime.now(timezone.utc)
    payload: Dict[str, Any] = {
        "nonce": nonce,
        "purpose": STATE_PURPOSE,
        "iat": int(now.timestamp()),
        "exp": int((now + expires_delta).timestamp()),
    }
    return jwt.encode(payload, secret_key, algorithm=ALGORITHM)


def verify_state_token(token: str, nonce: str, secret_key: str) -> bool:
    """True only for an unexpired token signed with secret_key that carries this nonce."""
    if not token or not nonce:
        return False
    try:
        payload = jwt.decode(token, secret_key, algorithms=[ALGORITHM])
    except JWTError:
        return False
    if payload.get("purpose") != STATE_PURPOSE:
        return False
    return secrets.compare_digest(str(payload.get("nonce", "")), nonce)
