"""Transport failure shapes.

A failed HTTP exchange is captured once, right where httpx raises, as one of
three explicit cases. Classification code matches on these instead of probing
exception attributes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Union

import httpx


@dataclass(frozen=True)
class ResponseFailure:
    """The server answered with an error status."""

    status_code: int
    body: Any = None
    headers: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class NoResponse:
    """No response was received (connection refused, DNS, timeout, ...)."""

    cause: BaseException


@dataclass(frozen=True)
class OtherFailure:
    """Anything that is neither an HTTP error response nor a transport failure."""

    cause: BaseException


Failure = Union[ResponseFailure, NoResponse, OtherFailure]


class TransportError(Exception):
    """Carries a :data:`Failure` through the error middleware chain."""

    def __init__(self, failure: Failure, message: str | None = None) -> None:
        super().__init__(message or describe_failure(failure))
        self.failure = failure


def parse_body(response: httpx.Response) -> Any:
    """Decode a response body as JSON, falling back to text (None when empty)."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


def response_failure(response: httpx.Response) -> ResponseFailure:
    return ResponseFailure(
        status_code=response.status_code,
        body=parse_body(response),
        headers=dict(response.headers),
    )


def capture_failure(exc: BaseException) -> Failure:
    """Map an exception raised around an httpx call to a :data:`Failure`."""
    if isinstance(exc, TransportError):
        return exc.failure
    if isinstance(exc, httpx.HTTPStatusError):
        return response_failure(exc.response)
    if isinstance(exc, httpx.TransportError):
        return NoResponse(exc)
    return OtherFailure(exc)


def describe_failure(failure: Failure) -> str:
    if isinstance(failure, ResponseFailure):
        return f"HTTP {failure.status_code}"
    if isinstance(failure, NoResponse):
        return f"No response received: {failure.cause}"
    return str(failure.cause) or type(failure.cause).__name__
