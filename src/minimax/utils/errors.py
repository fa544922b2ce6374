"""Structured error output for CLI commands."""

from __future__ import annotations

import json
import sys

from rich.console import Console

from minimax.errors import (
    ConcurrencyError,
    MinimaxError,
    is_account_lockout_error,
    is_invalid_credentials_error,
)

console = Console(stderr=True)

_CODES: dict[str, str] = {
    "authentication": "AUTH_ERROR",
    "validation": "VALIDATION_ERROR",
    "not_found": "NOT_FOUND",
    "concurrency": "CONCURRENCY_CONFLICT",
    "rate_limit": "RATE_LIMITED",
    "server": "SERVER_ERROR",
    "network": "CONNECTION_ERROR",
    "api": "API_ERROR",
}

_HINTS: dict[str, str] = {
    "authentication": "Session expired or missing. Run `minimax auth login`",
    "not_found": "The entity does not exist. Verify the ID and the selected organization",
    "concurrency": "The entity changed since it was read. Fetch it again and retry the update",
    "rate_limit": "Rate limited. Wait a moment and retry",
    "server": "Minimax server error. Try again later",
    "network": "Connection error. Check network connectivity and MINIMAX_BASE_URL",
    "validation": "Request rejected. Check the field values",
}


def _get_hint(error: Exception) -> str | None:
    if is_account_lockout_error(error):
        return "Account is locked. Wait before trying again or contact Minimax support"
    if is_invalid_credentials_error(error):
        return "Check MINIMAX_USERNAME and MINIMAX_PASSWORD"
    if isinstance(error, MinimaxError):
        return _HINTS.get(error.kind)
    return None


def handle_error(error: Exception) -> None:
    """Write ``{"error": true, "code": ..., "message": ...}`` to stdout and a readable line to stderr."""
    message = str(error)
    code = _CODES.get(error.kind, "API_ERROR") if isinstance(error, MinimaxError) else "RUNTIME_ERROR"
    hint = _get_hint(error)

    error_obj: dict[str, object] = {"error": True, "code": code, "message": message}
    if isinstance(error, MinimaxError) and error.status_code is not None:
        error_obj["status_code"] = error.status_code
    if isinstance(error, ConcurrencyError) and error.current_row_version:
        error_obj["current_row_version"] = error.current_row_version
    if hint:
        error_obj["hint"] = hint

    json.dump(error_obj, sys.stdout)
    sys.stdout.write("\n")

    console.print(f"[red]Error:[/red] {message}")
    if hint:
        console.print(f"[dim]Hint: {hint}[/dim]")
