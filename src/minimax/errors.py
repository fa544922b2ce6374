"""Typed errors for the Minimax API client.

Every failure that reaches a caller is one of the classes below, so callers
can branch on the class (or on its ``kind`` tag) instead of inspecting raw
HTTP responses.
"""

from __future__ import annotations

import json
import re
from enum import Enum
from typing import Any, ClassVar, Mapping

_ROW_VERSION_RE = re.compile(r"RowVersion:\s*(\S+)", re.IGNORECASE)


class MinimaxError(Exception):
    """Base exception for all Minimax client errors."""

    kind: ClassVar[str] = "api"

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        original_error: BaseException | Any | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.original_error = original_error

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, status_code={self.status_code!r})"


class AuthenticationError(MinimaxError):
    """Raised when authentication fails or no usable token is available."""

    kind = "authentication"


class ValidationError(MinimaxError):
    """Raised when the API rejects a request's payload."""

    kind = "validation"

    def __init__(
        self,
        message: str,
        validation_errors: dict[str, list[str]] | None = None,
        status_code: int | None = None,
        original_error: BaseException | Any | None = None,
    ) -> None:
        super().__init__(message, status_code, original_error)
        self.validation_errors = validation_errors


class NotFoundError(MinimaxError):
    """Raised when a resource does not exist."""

    kind = "not_found"


class ConcurrencyError(MinimaxError):
    """Raised when an update carried a stale RowVersion.

    ``current_row_version`` holds the server's RowVersion when it could be
    read from the error message. Re-fetch the resource and retry the update.
    """

    kind = "concurrency"

    def __init__(
        self,
        message: str,
        current_row_version: str | None = None,
        status_code: int | None = None,
        original_error: BaseException | Any | None = None,
    ) -> None:
        super().__init__(message, status_code, original_error)
        self.current_row_version = current_row_version


class RateLimitError(MinimaxError):
    """Raised on HTTP 429. ``retry_after`` is in seconds when the server sent it."""

    kind = "rate_limit"

    def __init__(
        self,
        message: str,
        retry_after: int | None = None,
        status_code: int | None = None,
        original_error: BaseException | Any | None = None,
    ) -> None:
        super().__init__(message, status_code, original_error)
        self.retry_after = retry_after


class ServerError(MinimaxError):
    """Raised when the server answers with an unexpected (5xx) response."""

    kind = "server"


class NetworkError(MinimaxError):
    """Raised when no response was received at all."""

    kind = "network"

    def __init__(self, message: str, original_error: BaseException | Any | None = None) -> None:
        super().__init__(message, None, original_error)


def extract_row_version(message: str | None) -> str | None:
    """Pull ``RowVersion: <value>`` out of a free-text error message."""
    if not message:
        return None
    match = _ROW_VERSION_RE.search(message)
    return match.group(1) if match else None


def error_message_from_body(body: Any, default: str = "Unknown API error") -> str:
    """Pick the most descriptive message from an API error payload."""
    if isinstance(body, Mapping):
        for key in ("error_description", "message", "error"):
            value = body.get(key)
            if value:
                return str(value)
        return default
    if isinstance(body, str) and body.strip():
        return body.strip()
    return default


def _parse_validation_details(details: Any) -> dict[str, list[str]] | None:
    if isinstance(details, dict):
        return details
    if isinstance(details, str):
        try:
            parsed = json.loads(details)
        except ValueError:
            return None
        return parsed if isinstance(parsed, dict) else None
    return None


def _parse_retry_after(headers: Mapping[str, str] | None) -> int | None:
    if not headers:
        return None
    raw = headers.get("retry-after") or headers.get("Retry-After")
    if raw is None:
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


def create_error_from_response(
    body: Any,
    status_code: int | None = None,
    original_error: BaseException | Any | None = None,
    headers: Mapping[str, str] | None = None,
) -> MinimaxError:
    """Build the typed error matching an API error response.

    Checks run in a fixed order: authentication, not found, concurrency,
    validation, rate limit, server error, then the generic base error.
    """
    message = error_message_from_body(body)
    lower = message.lower()

    if status_code in (401, 403) or "auth" in lower:
        return AuthenticationError(message, status_code, original_error)

    if status_code == 404 or "not found" in lower:
        return NotFoundError(message, status_code, original_error)

    if status_code == 409 or "concurrency" in lower or "rowversion" in lower:
        return ConcurrencyError(message, extract_row_version(message), status_code, original_error)

    if status_code in (400, 422):
        details = body.get("details") if isinstance(body, Mapping) else None
        return ValidationError(
            message, _parse_validation_details(details), status_code, original_error
        )

    if status_code == 429:
        return RateLimitError(message, _parse_retry_after(headers), status_code, original_error)

    if status_code is not None and status_code >= 500:
        return ServerError(message, status_code, original_error)

    return MinimaxError(message, status_code, original_error)


# ── OAuth2 error responses ───────────────────────────────────────────


class AuthErrorCode(str, Enum):
    """Error codes defined by RFC 6749 for token endpoint responses."""

    INVALID_REQUEST = "invalid_request"
    INVALID_CLIENT = "invalid_client"
    INVALID_GRANT = "invalid_grant"
    UNAUTHORIZED_CLIENT = "unauthorized_client"
    UNSUPPORTED_GRANT_TYPE = "unsupported_grant_type"
    INVALID_SCOPE = "invalid_scope"
    ACCESS_DENIED = "access_denied"
    SERVER_ERROR = "server_error"
    TEMPORARILY_UNAVAILABLE = "temporarily_unavailable"


_AUTH_ERROR_MESSAGES: dict[str, str] = {
    AuthErrorCode.INVALID_CLIENT.value: "Invalid client credentials. Check your client ID and client secret.",
    AuthErrorCode.INVALID_GRANT.value: (
        "Invalid user credentials or refresh token. Please check your username and password."
    ),
    AuthErrorCode.INVALID_REQUEST.value: (
        "Invalid authentication request. Please check your request parameters."
    ),
    AuthErrorCode.UNAUTHORIZED_CLIENT.value: (
        "This client is not authorized to use this authentication method."
    ),
    AuthErrorCode.UNSUPPORTED_GRANT_TYPE.value: (
        "The requested grant type is not supported by the authorization server."
    ),
    AuthErrorCode.INVALID_SCOPE.value: "The requested scope is invalid or unknown.",
    AuthErrorCode.ACCESS_DENIED.value: "The resource owner denied the request.",
    AuthErrorCode.SERVER_ERROR.value: "The authorization server encountered an unexpected error.",
    AuthErrorCode.TEMPORARILY_UNAVAILABLE.value: "The authorization server is temporarily unavailable.",
}


def create_auth_error(
    body: Any,
    status_code: int | None = None,
    original_error: BaseException | Any | None = None,
) -> AuthenticationError:
    """Translate an OAuth2 error payload into an AuthenticationError."""
    payload = body if isinstance(body, Mapping) else {}
    code = payload.get("error")
    description = payload.get("error_description") or payload.get("message")

    if not code:
        message = str(description) if description else "Authentication failed"
        return AuthenticationError(message, status_code, original_error)

    message = _AUTH_ERROR_MESSAGES.get(code, f"Authentication failed: {code}")
    if description:
        message += f" ({description})"
    return AuthenticationError(message, status_code, original_error)


def is_account_lockout_error(error: BaseException) -> bool:
    if not isinstance(error, AuthenticationError):
        return False
    message = error.message.lower()
    return "locked" in message or "lockout" in message or "too many attempts" in message


def is_invalid_credentials_error(error: BaseException) -> bool:
    if not isinstance(error, AuthenticationError):
        return False
    message = error.message.lower()
    return "invalid" in message and any(
        word in message for word in ("credentials", "username", "password")
    )


def is_token_expired_error(error: BaseException) -> bool:
    if not isinstance(error, AuthenticationError):
        return False
    message = error.message.lower()
    return "expired" in message or "invalid token" in message or error.status_code == 401
