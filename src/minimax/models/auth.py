"""Auth-related data models."""

from __future__ import annotations

import time
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_SCOPE = "minimax.rs"


def now_ms() -> int:
    """Current time as epoch milliseconds."""
    return int(time.time() * 1000)


class Token(BaseModel):
    """Token issued by the Minimax OAuth2 endpoint.

    ``obtained_at`` is stamped by the client (epoch milliseconds), so the
    absolute expiry instant is ``obtained_at + expires_in * 1000``.
    """

    model_config = ConfigDict(extra="allow")

    access_token: str
    token_type: str = "bearer"
    expires_in: int | None = None
    refresh_token: str | None = None
    obtained_at: int | None = None

    @property
    def expires_at_ms(self) -> int | None:
        if not self.expires_in or not self.obtained_at:
            return None
        return self.obtained_at + self.expires_in * 1000


class Credentials(BaseModel):
    """User credentials for the password grant. Never persisted."""

    username: str
    password: str = Field(repr=False)
    scope: str = DEFAULT_SCOPE


class SessionState(BaseModel):
    """Snapshot of the session, recomputed on every read."""

    is_authenticated: bool
    organization_id: str | None = None
    token: Token | None = None


class TokenStatus(BaseModel):
    """Current state of the stored access token."""

    has_token: bool
    is_expired: bool
    expires_at: datetime | None = None
    seconds_remaining: int | None = None
