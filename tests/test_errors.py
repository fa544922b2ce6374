"""Tests for errors.py: response classification and OAuth2 error messages."""
import pytest

from minimax.errors import (
    AuthenticationError,
    ConcurrencyError,
    MinimaxError,
    NetworkError,
    NotFoundError,
    RateLimitError,
    ServerError,
    ValidationError,
    create_auth_error,
    create_error_from_response,
    error_message_from_body,
    extract_row_version,
    is_account_lockout_error,
    is_invalid_credentials_error,
    is_token_expired_error,
)


# ── Status code mapping ──────────────────────────────────────────────

@pytest.mark.parametrize(
    "status, cls",
    [
        (401, AuthenticationError),
        (403, AuthenticationError),
        (404, NotFoundError),
        (409, ConcurrencyError),
        (400, ValidationError),
        (422, ValidationError),
        (429, RateLimitError),
        (500, ServerError),
        (503, ServerError),
        (418, MinimaxError),
    ],
)
def test_status_maps_to_error_class(status, cls):
    err = create_error_from_response({"message": "boom"}, status)
    assert type(err) is cls
    assert err.status_code == status
    assert err.message == "boom"


def test_message_keywords_win_over_status():
    err = create_error_from_response({"message": "Entity not found"}, 500)
    assert isinstance(err, NotFoundError)

    err = create_error_from_response({"message": "Auth token rejected"}, 400)
    assert isinstance(err, AuthenticationError)


def test_concurrency_extracts_row_version():
    err = create_error_from_response({"message": "Conflict. RowVersion: xyz789"}, 409)
    assert isinstance(err, ConcurrencyError)
    assert err.current_row_version == "xyz789"


def test_validation_details_from_json_string():
    body = {"message": "Invalid", "details": '{"Name": ["required"]}'}
    err = create_error_from_response(body, 400)
    assert err.validation_errors == {"Name": ["required"]}


def test_validation_details_unparseable():
    err = create_error_from_response({"message": "Invalid", "details": "not json"}, 400)
    assert err.validation_errors is None


def test_rate_limit_reads_retry_after():
    err = create_error_from_response({"message": "slow down"}, 429, headers={"retry-after": "7"})
    assert err.retry_after == 7


def test_rate_limit_without_header():
    err = create_error_from_response({"message": "slow down"}, 429)
    assert err.retry_after is None


def test_original_error_kept():
    cause = RuntimeError("x")
    err = create_error_from_response({}, 500, cause)
    assert err.original_error is cause
    assert err.message == "Unknown API error"


def test_kind_tags():
    assert AuthenticationError("x").kind == "authentication"
    assert NetworkError("x").kind == "network"
    assert MinimaxError("x").kind == "api"
    assert NetworkError("x").status_code is None


# ── Message helpers ──────────────────────────────────────────────────

def test_error_message_priority():
    body = {"error": "e", "message": "m", "error_description": "d"}
    assert error_message_from_body(body) == "d"
    assert error_message_from_body({"error": "e", "message": "m"}) == "m"
    assert error_message_from_body("  plain text ") == "plain text"
    assert error_message_from_body(None) == "Unknown API error"


def test_extract_row_version():
    assert extract_row_version("RowVersion: abc123 was expected") == "abc123"
    assert extract_row_version("no version here") is None
    assert extract_row_version(None) is None


# ── OAuth2 errors ────────────────────────────────────────────────────

def test_auth_error_known_code():
    err = create_auth_error({"error": "invalid_grant", "error_description": "bad password"}, 400)
    assert isinstance(err, AuthenticationError)
    assert err.message.startswith("Invalid user credentials")
    assert err.message.endswith("(bad password)")
    assert err.status_code == 400


def test_auth_error_unknown_code():
    err = create_auth_error({"error": "weird"}, 400)
    assert err.message == "Authentication failed: weird"


def test_auth_error_without_code():
    assert create_auth_error({"error_description": "nope"}, 401).message == "nope"
    assert create_auth_error(None, 401).message == "Authentication failed"


def test_auth_error_predicates():
    assert is_account_lockout_error(AuthenticationError("Account locked"))
    assert is_invalid_credentials_error(AuthenticationError("Invalid username or password"))
    assert is_token_expired_error(AuthenticationError("whatever", 401))
    assert not is_token_expired_error(ServerError("expired", 500))
