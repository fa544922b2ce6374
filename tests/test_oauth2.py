"""Tests for auth/oauth2.py: password grant, refresh, validity and status."""
from urllib.parse import parse_qs
from unittest.mock import patch

import httpx
import pytest

from minimax.auth.oauth2 import OAuth2Client
from minimax.auth.token_store import MemoryTokenStore
from minimax.errors import AuthenticationError, NetworkError, ServerError
from minimax.models.auth import Credentials, Token, now_ms

CREDENTIALS = Credentials(username="user@example.com", password="s3cret")


def _form(request: httpx.Request) -> dict[str, str]:
    return {k: v[0] for k, v in parse_qs(request.content.decode()).items()}


def _client(fake_settings, mock_http, handler, store=None):
    oauth2 = OAuth2Client(fake_settings, store or MemoryTokenStore())
    oauth2._http = mock_http(handler)
    return oauth2


# ── Password grant ───────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_authenticate_posts_password_grant(fake_settings, mock_http):
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"access_token": "t1", "expires_in": 3600, "refresh_token": "r1"})

    oauth2 = _client(fake_settings, mock_http, handler)
    with patch("minimax.auth.oauth2.now_ms", return_value=1_000_000):
        token = await oauth2.authenticate(CREDENTIALS)

    assert str(seen[0].url) == "https://auth.test/oauth20/token"
    form = _form(seen[0])
    assert form == {
        "grant_type": "password",
        "client_id": "test-client-id",
        "client_secret": "test-client-secret",
        "username": "user@example.com",
        "password": "s3cret",
        "scope": "minimax.rs",
    }
    assert token.access_token == "t1"
    assert token.refresh_token == "r1"
    assert token.obtained_at == 1_000_000
    assert await oauth2.get_token() == token


@pytest.mark.asyncio
async def test_refresh_token_posts_refresh_grant(fake_settings, mock_http):
    seen = []

    def handler(request):
        seen.append(_form(request))
        return httpx.Response(200, json={"access_token": "t2", "expires_in": 3600, "refresh_token": "r2"})

    oauth2 = _client(fake_settings, mock_http, handler)
    token = await oauth2.refresh_token("r1")

    assert seen[0]["grant_type"] == "refresh_token"
    assert seen[0]["refresh_token"] == "r1"
    assert token.access_token == "t2"
    assert (await oauth2.get_token()).refresh_token == "r2"


# ── Failures ─────────────────────────────────────────────────────────

@pytest.mark.asyncio
@pytest.mark.parametrize("status", [400, 401])
async def test_rejected_credentials(fake_settings, mock_http, status):
    def handler(request):
        return httpx.Response(status, json={"error": "invalid_grant", "error_description": "bad"})

    oauth2 = _client(fake_settings, mock_http, handler)
    with pytest.raises(AuthenticationError) as exc_info:
        await oauth2.authenticate(CREDENTIALS)

    assert exc_info.value.status_code == status
    assert "(bad)" in exc_info.value.message
    assert await oauth2.get_token() is None


@pytest.mark.asyncio
async def test_server_error(fake_settings, mock_http):
    oauth2 = _client(fake_settings, mock_http, lambda r: httpx.Response(500, text="down"))
    with pytest.raises(ServerError) as exc_info:
        await oauth2.authenticate(CREDENTIALS)
    assert exc_info.value.status_code == 500
    assert "down" in exc_info.value.message


@pytest.mark.asyncio
async def test_network_error(fake_settings, mock_http):
    def handler(request):
        raise httpx.ConnectError("refused")

    oauth2 = _client(fake_settings, mock_http, handler)
    with pytest.raises(NetworkError) as exc_info:
        await oauth2.authenticate(CREDENTIALS)
    assert isinstance(exc_info.value.original_error, httpx.ConnectError)


@pytest.mark.asyncio
async def test_malformed_token_response(fake_settings, mock_http):
    oauth2 = _client(fake_settings, mock_http, lambda r: httpx.Response(200, json={"nope": 1}))
    with pytest.raises(AuthenticationError):
        await oauth2.authenticate(CREDENTIALS)


# ── Validity ─────────────────────────────────────────────────────────

def _token_at(obtained_at=1_000_000, expires_in=3600):
    return Token(access_token="t", expires_in=expires_in, obtained_at=obtained_at)


def test_token_valid_until_buffer(fake_settings):
    oauth2 = OAuth2Client(fake_settings)
    token = _token_at()  # expires at 4_600_000 ms

    with patch("minimax.auth.oauth2.now_ms", return_value=4_539_999):
        assert oauth2.is_token_valid(token, 60)
    with patch("minimax.auth.oauth2.now_ms", return_value=4_540_000):
        assert not oauth2.is_token_valid(token, 60)


def test_token_without_expiry_is_invalid(fake_settings):
    oauth2 = OAuth2Client(fake_settings)
    assert not oauth2.is_token_valid(None)
    assert not oauth2.is_token_valid(_token_at(expires_in=0))
    assert not oauth2.is_token_valid(Token(access_token="t", expires_in=3600))


# ── Status ───────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_status_without_token(fake_settings):
    status = await OAuth2Client(fake_settings).get_status()
    assert not status.has_token
    assert status.is_expired


@pytest.mark.asyncio
async def test_status_with_token(fake_settings):
    store = MemoryTokenStore()
    await store.save(_token_at())
    oauth2 = OAuth2Client(fake_settings, store)

    with patch("minimax.auth.oauth2.now_ms", return_value=1_000_000):
        status = await oauth2.get_status()
    assert status.has_token
    assert not status.is_expired
    assert status.seconds_remaining == 3600

    with patch("minimax.auth.oauth2.now_ms", return_value=5_000_000):
        status = await oauth2.get_status()
    assert status.is_expired
    assert status.seconds_remaining is None


@pytest.mark.asyncio
async def test_clear_token(fake_settings, valid_token):
    store = MemoryTokenStore()
    await store.save(valid_token)
    oauth2 = OAuth2Client(fake_settings, store)
    await oauth2.clear_token()
    assert await oauth2.get_token() is None


@pytest.mark.asyncio
async def test_fresh_token_is_valid_immediately(fake_settings, mock_http):
    def handler(request):
        return httpx.Response(200, json={"access_token": "t1", "expires_in": 3600, "refresh_token": "r1"})

    oauth2 = _client(fake_settings, mock_http, handler)
    token = await oauth2.authenticate(CREDENTIALS)
    assert abs(token.obtained_at - now_ms()) < 5_000
    assert oauth2.is_token_valid(token)
