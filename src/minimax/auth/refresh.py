"""Token refresh coordination.

Concurrent callers that all find the stored token stale share one refresh:
at most one refresh request is in flight at any time.
"""

from __future__ import annotations

import asyncio
import logging

from minimax.auth.oauth2 import EXPIRY_BUFFER, OAuth2Client
from minimax.errors import AuthenticationError, MinimaxError, NetworkError
from minimax.models.auth import Token

logger = logging.getLogger(__name__)


class TokenRefreshCoordinator:
    """Hands out valid tokens, refreshing through the OAuth2 client when needed."""

    def __init__(
        self,
        oauth2: OAuth2Client,
        refresh_buffer: float = EXPIRY_BUFFER,
        max_refresh_attempts: int = 3,
        refresh_retry_delay: float = 1.0,
    ) -> None:
        self._oauth2 = oauth2
        self._refresh_buffer = refresh_buffer
        self._max_refresh_attempts = max(1, max_refresh_attempts)
        self._refresh_retry_delay = refresh_retry_delay
        self._refresh_task: asyncio.Task[Token] | None = None

    @property
    def refreshing(self) -> bool:
        return self._refresh_task is not None

    async def get_valid_token(self) -> Token:
        """Return the stored token if still valid, otherwise a refreshed one.

        Raises:
            AuthenticationError: No valid token and no refresh token, or the
                refresh was rejected.
            NetworkError: The refresh kept failing without a response.
        """
        if self._refresh_task is not None:
            return await asyncio.shield(self._refresh_task)

        token = await self._oauth2.get_token()

        # another caller may have started a refresh while the store was read
        if self._refresh_task is not None:
            return await asyncio.shield(self._refresh_task)

        if self._oauth2.is_token_valid(token, self._refresh_buffer):
            return token  # type: ignore[return-value]

        if token is not None and token.refresh_token:
            self._refresh_task = asyncio.ensure_future(self._refresh(token.refresh_token))
            return await asyncio.shield(self._refresh_task)

        raise AuthenticationError(
            "No valid token available and no refresh token to obtain a new one", 401
        )

    async def _refresh(self, refresh_token: str) -> Token:
        try:
            return await self._attempt_refresh(refresh_token)
        finally:
            self._refresh_task = None

    async def _attempt_refresh(self, refresh_token: str) -> Token:
        """Refresh with bounded retries on transient failures."""
        attempt = 1
        while True:
            try:
                return await self._oauth2.refresh_token(refresh_token)
            except MinimaxError as e:
                if attempt >= self._max_refresh_attempts or not self._is_retryable(e):
                    raise
                logger.warning(
                    f"Token refresh failed ({e.message}). "
                    f"Retrying in {self._refresh_retry_delay:.1f}s "
                    f"[attempt {attempt}/{self._max_refresh_attempts}]..."
                )
                await asyncio.sleep(self._refresh_retry_delay)
                attempt += 1

    @staticmethod
    def _is_retryable(error: MinimaxError) -> bool:
        # a 401 means the refresh token itself was rejected
        if isinstance(error, NetworkError):
            return True
        return isinstance(error, AuthenticationError) and error.status_code != 401
