"""Shared fixtures for the minimax test suite."""
from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from minimax.config import Config, RefreshSettings, RetrySettings, Settings
from minimax.models.auth import Token, now_ms


@pytest.fixture
def fake_settings() -> Settings:
    return Settings(
        client_id="test-client-id",
        client_secret="test-client-secret",
        username="user@example.com",
        password="s3cret",
        base_url="https://api.test/RS/API/",
        auth_url="https://auth.test/oauth20/token",
        default_org_id="org-default",
    )


@pytest.fixture
def fake_config(fake_settings) -> Config:
    return Config(
        settings=fake_settings,
        retry=RetrySettings(retry_delay=0.0, jitter=0.0),
        refresh=RefreshSettings(refresh_retry_delay=0.0),
    )


@pytest.fixture
def valid_token() -> Token:
    return Token(access_token="t1", expires_in=3600, refresh_token="r1", obtained_at=now_ms())


@pytest.fixture
def expired_token() -> Token:
    return Token(
        access_token="old",
        expires_in=3600,
        refresh_token="r1",
        obtained_at=now_ms() - 2 * 3600 * 1000,
    )


@pytest.fixture
def mock_client():
    """MagicMock standing in for HttpClient, with async request methods."""
    client = MagicMock()
    client.get = AsyncMock()
    client.post = AsyncMock()
    client.put = AsyncMock()
    client.delete = AsyncMock()
    client.update_with_concurrency = AsyncMock()
    client.session.get_organization_id.return_value = "42"
    return client


@pytest.fixture
def mock_http():
    """Factory for an httpx.AsyncClient answering every request with ``handler(request)``."""

    def make(handler) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return make
