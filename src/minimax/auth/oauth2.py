"""OAuth2 password-grant authentication for the Minimax API.

Handles token acquisition, refresh, expiry checks and persistence.
"""

from __future__ import annotations

import logging
from datetime import datetime

import httpx

from minimax.auth.token_store import MemoryTokenStore, TokenStore
from minimax.config import DEFAULT_AUTH_URL, Settings
from minimax.errors import (
    AuthenticationError,
    MinimaxError,
    NetworkError,
    ServerError,
    create_auth_error,
    error_message_from_body,
)
from minimax.http.failures import (
    Failure,
    NoResponse,
    ResponseFailure,
    capture_failure,
    response_failure,
)
from minimax.models.auth import Credentials, Token, TokenStatus, now_ms

logger = logging.getLogger(__name__)

# Seconds before expiry at which a token is treated as stale
EXPIRY_BUFFER = 60.0


class OAuth2Client:
    """Exchanges credentials and refresh tokens for access tokens."""

    def __init__(
        self,
        settings: Settings,
        token_store: TokenStore | None = None,
        auth_url: str | None = None,
        timeout: float | None = None,
    ) -> None:
        self._client_id = settings.client_id
        self._client_secret = settings.client_secret
        self._auth_url = auth_url or settings.auth_url or DEFAULT_AUTH_URL
        self._store = token_store or MemoryTokenStore()
        self._http = httpx.AsyncClient(
            timeout=timeout or settings.timeout,
            headers={"Accept": "application/json"},
        )

    @property
    def token_store(self) -> TokenStore:
        return self._store

    async def authenticate(self, credentials: Credentials) -> Token:
        """Obtain a token with the password grant and persist it.

        Raises:
            AuthenticationError: The server rejected the credentials (400/401).
            NetworkError: No response was received.
            ServerError: The server answered with any other error status.
        """
        logger.info(f"Authenticating user {credentials.username}")
        return await self._request_token(
            {
                "grant_type": "password",
                "client_id": self._client_id,
                "client_secret": self._client_secret,
                "username": credentials.username,
                "password": credentials.password,
                "scope": credentials.scope,
            }
        )

    async def refresh_token(self, refresh_token: str) -> Token:
        """Exchange a refresh token for a new token and persist it."""
        logger.info("Refreshing access token")
        return await self._request_token(
            {
                "grant_type": "refresh_token",
                "client_id": self._client_id,
                "client_secret": self._client_secret,
                "refresh_token": refresh_token,
            }
        )

    async def get_token(self) -> Token | None:
        return await self._store.load()

    async def clear_token(self) -> None:
        await self._store.clear()

    def is_token_valid(self, token: Token | None, buffer: float = EXPIRY_BUFFER) -> bool:
        """Check that a token exists and will not expire within ``buffer`` seconds."""
        if token is None or not token.expires_in or not token.obtained_at:
            return False
        expires_at = token.obtained_at + token.expires_in * 1000
        return now_ms() < expires_at - buffer * 1000

    async def get_status(self) -> TokenStatus:
        """Get the current token status."""
        token = await self._store.load()
        if token is None:
            return TokenStatus(has_token=False, is_expired=True)

        expires_at_ms = token.expires_at_ms
        now = now_ms()
        is_expired = expires_at_ms is None or now >= expires_at_ms
        seconds_remaining = None
        if expires_at_ms is not None and not is_expired:
            seconds_remaining = (expires_at_ms - now) // 1000

        return TokenStatus(
            has_token=True,
            is_expired=is_expired,
            expires_at=datetime.fromtimestamp(expires_at_ms / 1000) if expires_at_ms else None,
            seconds_remaining=seconds_remaining,
        )

    async def _request_token(self, form: dict[str, str]) -> Token:
        try:
            response = await self._http.post(self._auth_url, data=form)
            if response.status_code >= 400:
                raise self._auth_error(response_failure(response))
            payload = response.json()
            token = Token.model_validate({**payload, "obtained_at": now_ms()})
        except MinimaxError:
            raise
        except Exception as e:
            raise self._auth_error(capture_failure(e)) from e

        await self._store.save(token)
        logger.debug(f"Token obtained, expires in {token.expires_in}s")
        return token

    def _auth_error(self, failure: Failure) -> MinimaxError:
        """Map a failed token request to a typed error."""
        if isinstance(failure, NoResponse):
            return NetworkError(
                f"Network error during authentication: {failure.cause}", failure.cause
            )
        if isinstance(failure, ResponseFailure):
            if failure.status_code in (400, 401):
                return create_auth_error(failure.body, failure.status_code, failure)
            detail = error_message_from_body(failure.body, default=f"HTTP {failure.status_code}")
            return ServerError(
                f"Server error during authentication: {detail}", failure.status_code, failure
            )
        return AuthenticationError(
            f"Authentication failed: {str(failure.cause) or type(failure.cause).__name__}",
            None,
            failure.cause,
        )

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._http.aclose()
