"""RowVersion handling for optimistic concurrency control.

Every Minimax entity carries a ``RowVersion``. An update must send the
RowVersion that was read with the entity; the server answers 409 when it no
longer matches. Recovering from a conflict (re-fetch, then update again) is
left to the caller.
"""

from __future__ import annotations

from typing import Any, Mapping

from minimax.errors import (
    ConcurrencyError,
    MinimaxError,
    error_message_from_body,
    extract_row_version,
)
from minimax.http.error_middleware import NextClassifier
from minimax.http.failures import ResponseFailure, TransportError
from minimax.http.interceptors import PreparedRequest
from minimax.models.resources import Resource

WRITE_METHODS = frozenset({"PUT", "PATCH", "POST"})


def _row_version_of(resource: Resource | Mapping[str, Any] | None) -> str | None:
    if resource is None:
        return None
    if isinstance(resource, Mapping):
        return resource.get("RowVersion")
    return resource.RowVersion


class RowVersionHandler:
    """Injects RowVersion into writes and recognizes concurrency conflicts."""

    def add_row_version(self, resource: Resource | Mapping[str, Any], data: Any) -> Any:
        """Return ``data`` with the resource's RowVersion unless it already has one."""
        row_version = _row_version_of(resource)
        if not row_version or not isinstance(data, Mapping) or data.get("RowVersion"):
            return data
        return {**data, "RowVersion": row_version}

    def request_interceptor(self, request: PreparedRequest) -> PreparedRequest:
        """Merge ``metadata["resource"]``'s RowVersion into write bodies that lack one."""
        if request.method.upper() not in WRITE_METHODS or not isinstance(request.json, Mapping):
            return request
        if request.json.get("RowVersion"):
            return request

        resource = request.metadata.get("resource")
        if _row_version_of(resource):
            request.json = self.add_row_version(resource, request.json)
        return request

    def handle_concurrency_error(self, error: BaseException) -> ConcurrencyError | None:
        """Build a ConcurrencyError when a raw transport error is a concurrency conflict.

        Errors that are already typed are left alone. The server's current
        RowVersion is read from the message on a best-effort basis; the
        conflict is recognized even when it is absent.
        """
        if not isinstance(error, TransportError) or not isinstance(error.failure, ResponseFailure):
            return None

        status_code = error.failure.status_code
        message = error_message_from_body(error.failure.body, default="")
        lower = message.lower()
        if status_code != 409 and "concurrency" not in lower and "rowversion" not in lower:
            return None

        current = extract_row_version(message)
        if current:
            text = (
                "Concurrency conflict: The resource has been modified. "
                f"Current RowVersion: {current}"
            )
        else:
            text = message or "Concurrency conflict: The resource has been modified."
        return ConcurrencyError(text, current, status_code, error)

    def error_classifier(self, error: BaseException, next_: NextClassifier) -> MinimaxError:
        conflict = self.handle_concurrency_error(error)
        if conflict is not None:
            return conflict
        return next_(error)
