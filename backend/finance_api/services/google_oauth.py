# finance_api/services/google_oauth.py
"""Google OAuth 2.0 authorization-code exchange.

``GoogleOAuthClient.exchange`` never raises for provider problems: it returns
either a ``GoogleProfile`` or an ``AuthFailure`` describing what went wrong.
"""
import logging
from dataclasses import dataclass
from typing import Any, Optional, Protocol, Union
from urllib.parse import urlencode

import httpx

logger = logging.getLogger(__name__)

AUTHORIZATION_ENDPOINT = "https://accounts.google.com/o/oauth2/v2/auth"
TOKEN_ENDPOINT = "https://oauth2.googleapis.com/token"
USERINFO_ENDPOINT = "https://openidconnect.googleapis.com/v1/userinfo"
SCOPES = "openid profile email"
MALFORMED_RESPONSE = "identity provider returned a malformed response"


@dataclass(frozen=True)
class GoogleProfile:
    external_id: str
    display_name: Optional[str] = None
    email: Optional[str] = None
    avatar_url: Optional[str] = None


@dataclass(frozen=True)
class AuthFailure:
    reason: str


ExchangeResult = Union[GoogleProfile, AuthFailure]


class IdentityProvider(Protocol):
    """What the auth routes need from an identity provider."""

    def authorization_url(self, redirect_uri: str, state: str) -> str: ...

    async def exchange(self, code: str, redirect_uri: str) -> ExchangeResult: ...


def profile_from_userinfo(info: Any) -> ExchangeResult:
    if not isinstance(info, dict):
        return AuthFailure(MALFORMED_RESPONSE)
    sub = info.get("sub")
    if not sub:
        return AuthFailure("profile has no subject identifier")
    return GoogleProfile(
        external_id=str(sub),
        display_name=info.get("name"),
        email=info.get("email"),
        avatar_url=info.get("picture"),
    )


class GoogleOAuthClient:
    def __init__(
        self,
        client_id: str,
        client_secret: str,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 10.0,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self._transport = transport
        self._timeout = timeout

    def authorization_url(self, redirect_uri: str, state: str) -> str:
        params = {
            "client_id": self.client_id,
            "redirect_uri": redirect_uri,
            "response_type": "code",
            "scope": SCOPES,
            "state": state,
        }
        return f"{AUTHORIZATION_ENDPOINT}?{urlencode(params)}"

    async def exchange(self, code: str, redirect_uri: str) -> ExchangeResult:
        if not code:
            return AuthFailure("missing authorization code")
        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=self._timeout) as client:
                token_resp = await client.post(
                    TOKEN_ENDPOINT,
                    data={
                        "code": code,
                        "client_id": self.client_id,
                        "client_secret": self.client_secret,
                        "redirect_uri": redirect_uri,
                        "grant_type": "authorization_code",
                    },
                )
                if token_resp.status_code != 200:
                    return AuthFailure(f"token endpoint returned {token_resp.status_code}")
                token_body = token_resp.json()
                if not isinstance(token_body, dict):
                    return AuthFailure(MALFORMED_RESPONSE)
                access_token = token_body.get("access_token")
                if not access_token:
                    return AuthFailure("token response has no access_token")

                info_resp = await client.get(
                    USERINFO_ENDPOINT, headers={"Authorization": f"Bearer {access_token}"}
                )
                if info_resp.status_code != 200:
                    return AuthFailure(f"userinfo endpoint returned {info_resp.status_code}")
                info = info_resp.json()
        except httpx.HTTPError as exc:
            logger.warning("Google request failed: %s", exc)
            return AuthFailure(f"identity provider request failed: {exc.__class__.__name__}")
        except ValueError:
            # body was not JSON
            return AuthFailure(MALFORMED_RESPONSE)
        return profile_from_userinfo(info)
