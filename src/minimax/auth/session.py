"""Session management: login state, token access and organization selection."""

from __future__ import annotations

import logging

from minimax.auth.oauth2 import OAuth2Client
from minimax.auth.refresh import TokenRefreshCoordinator
from minimax.config import RefreshSettings, Settings
from minimax.errors import AuthenticationError
from minimax.models.auth import Credentials, SessionState, Token

logger = logging.getLogger(__name__)


class SessionManager:
    """Owns the authenticated session for one client instance.

    The selected organization is plain session state; it is independent of
    the token lifecycle and survives token refreshes and repeated logins.
    """

    def __init__(
        self,
        settings: Settings,
        oauth2: OAuth2Client,
        refresh: RefreshSettings | None = None,
        organization_id: str | None = None,
    ) -> None:
        refresh = refresh or RefreshSettings()
        self._settings = settings
        self._oauth2 = oauth2
        self._refresh_buffer = refresh.refresh_buffer
        self._coordinator = TokenRefreshCoordinator(
            oauth2,
            refresh_buffer=refresh.refresh_buffer,
            max_refresh_attempts=refresh.max_refresh_attempts if refresh.auto_refresh else 1,
            refresh_retry_delay=refresh.refresh_retry_delay,
        )
        self._organization_id: str | None = organization_id or settings.default_org_id or None

    @property
    def oauth2(self) -> OAuth2Client:
        return self._oauth2

    @property
    def coordinator(self) -> TokenRefreshCoordinator:
        return self._coordinator

    async def login(self, credentials: Credentials) -> Token:
        """Authenticate and, if no organization is selected yet, fall back to the default."""
        token = await self._oauth2.authenticate(credentials)
        if not self._organization_id:
            self._organization_id = self._settings.default_org_id or None
            if self._organization_id:
                logger.info(f"Using default organization {self._organization_id}")
        return token

    async def logout(self) -> None:
        await self._oauth2.clear_token()
        self._organization_id = None

    async def get_session_state(self) -> SessionState:
        """Report the session without refreshing; a stale token is still returned."""
        token = await self._oauth2.get_token()
        return SessionState(
            is_authenticated=self._oauth2.is_token_valid(token, self._refresh_buffer),
            organization_id=self._organization_id,
            token=token,
        )

    async def is_authenticated(self) -> bool:
        token = await self._oauth2.get_token()
        return self._oauth2.is_token_valid(token, self._refresh_buffer)

    async def get_auth_token(self) -> Token:
        """Get a token that is valid for API requests, refreshing if needed.

        Raises:
            AuthenticationError: Not logged in, or the refresh failed. The
                underlying error is kept as ``original_error`` and ``__cause__``.
        """
        try:
            return await self._coordinator.get_valid_token()
        except AuthenticationError as e:
            raise AuthenticationError(
                "Session is not authenticated or token refresh failed", 401, e
            ) from e

    def get_organization_id(self) -> str | None:
        return self._organization_id

    def set_organization_id(self, organization_id: str | None) -> None:
        self._organization_id = organization_id
