"""
WPVite Backend — Google OAuth Client
======================================

What:  Authorization-code flow against Google for admin login.
How:   httpx.AsyncClient for the token exchange and userinfo calls, each
       wrapped with tenacity retries for transient network failures.
Who:   /api/auth/google builds the consent URL; /api/auth/callback calls
       authenticate() with the code Google sends back.

Flow:
    ┌─────────┐  302   ┌──────────────┐  code  ┌─────────────────────┐
    │ /google │──────▶│ Google login │──────▶│ /callback           │
    └─────────┘        └──────────────┘        │ exchange_code()     │
                                               │ fetch_user_info()   │
                                               └─────────────────────┘

Resilience:
    - Transport errors (connect/read timeouts, resets) are retried with
      exponential backoff + jitter, RETRY_MAX_ATTEMPTS times in total
    - A non-200 answer is not retried: Google has decided
    - Either way the caller sees OAuthError (→ 502)
"""

import logging
import time
from typing import Optional
from urllib.parse import urlencode

import httpx
from pydantic import ValidationError as PydanticValidationError
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from wpvite.config import settings
from wpvite.exceptions import OAuthError
from wpvite.schemas.auth import GoogleUserInfo

logger = logging.getLogger(__name__)


class GoogleOAuthClient:

    AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
    TOKEN_URL = "https://oauth2.googleapis.com/token"
    USERINFO_URL = "https://www.googleapis.com/oauth2/v2/userinfo"
    SCOPE = "openid email profile"

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        """
        Args:
            transport: Custom httpx transport (tests pass an httpx.MockTransport)
        """
        self._transport = transport

    def authorization_url(self) -> str:
        params = {
            "client_id": settings.google_client_id,
            "redirect_uri": settings.google_redirect_uri,
            "response_type": "code",
            "scope": self.SCOPE,
            "access_type": "offline",
            "prompt": "consent",
        }
        return f"{self.AUTH_URL}?{urlencode(params)}"

    @retry(
        retry=retry_if_exception_type(httpx.TransportError),
        stop=stop_after_attempt(settings.retry_max_attempts),
        wait=wait_exponential_jitter(
            initial=settings.retry_min_wait,
            max=settings.retry_max_wait,
            jitter=1,
        ),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        start_time = time.time()
        async with httpx.AsyncClient(
            timeout=settings.oauth_timeout,
            transport=self._transport,
        ) as client:
            response = await client.request(method, url, **kwargs)
        logger.debug(
            "Google %s %s → %d in %.0fms",
            method, url, response.status_code, (time.time() - start_time) * 1000,
        )
        return response

    async def _call(self, step: str, method: str, url: str, **kwargs) -> dict:
        try:
            response = await self._request(method, url, **kwargs)
        except httpx.TransportError as e:
            logger.error("Google %s unreachable after retries: %s", step, str(e))
            raise OAuthError(context={"step": step, "error_type": type(e).__name__})

        if response.status_code != 200:
            logger.error("Google %s failed with HTTP %d", step, response.status_code)
            raise OAuthError(context={"step": step, "status": response.status_code})

        try:
            return response.json()
        except ValueError:
            raise OAuthError(context={"step": step, "error": "invalid JSON"})

    async def exchange_code(self, code: str) -> str:
        """Trade an authorization code for an access token."""
        payload = await self._call(
            "token exchange",
            "POST",
            self.TOKEN_URL,
            data={
                "code": code,
                "client_id": settings.google_client_id,
                "client_secret": settings.google_client_secret,
                "redirect_uri": settings.google_redirect_uri,
                "grant_type": "authorization_code",
            },
        )
        access_token = payload.get("access_token")
        if not access_token:
            raise OAuthError(context={"step": "token exchange", "error": "no access_token"})
        return access_token

    async def fetch_user_info(self, access_token: str) -> GoogleUserInfo:
        payload = await self._call(
            "userinfo",
            "GET",
            self.USERINFO_URL,
            headers={"Authorization": f"Bearer {access_token}"},
        )
        try:
            return GoogleUserInfo.model_validate(payload)
        except PydanticValidationError:
            raise OAuthError(context={"step": "userinfo", "error": "unexpected payload"})

    async def authenticate(self, code: str) -> GoogleUserInfo:
        """
        Complete the code flow.

        Raises:
            OAuthError: Any step failed (→ 502 "Authentication failed")
        """
        access_token = await self.exchange_code(code)
        info = await self.fetch_user_info(access_token)
        logger.info("Google login verified for %s", info.email)
        return info


# ── Singleton Instance ────────────────────────────────────────────────────
google_oauth = GoogleOAuthClient()
