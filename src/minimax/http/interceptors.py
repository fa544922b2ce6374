"""Request and response interceptors.

Interceptors run in registration order; each receives the previous one's
output. Plain functions and coroutine functions are both accepted.
"""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass, field, replace
from typing import Any, Awaitable, Callable, Union

logger = logging.getLogger(__name__)


@dataclass
class PreparedRequest:
    """An outgoing API request as seen by interceptors."""

    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    params: dict[str, Any] | None = None
    json: Any = None
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class ApiResponse:
    """A successful API response as seen by interceptors."""

    status_code: int
    headers: dict[str, str]
    data: Any
    request: PreparedRequest | None = None


RequestInterceptor = Callable[[PreparedRequest], Union[PreparedRequest, Awaitable[PreparedRequest]]]
ResponseInterceptor = Callable[[ApiResponse], Union[ApiResponse, Awaitable[ApiResponse]]]


def _remover(items: list, item: Any) -> Callable[[], None]:
    def remove() -> None:
        if item in items:
            items.remove(item)

    return remove


class InterceptorManager:
    """Ordered request/response interceptor lists."""

    def __init__(self) -> None:
        self._request: list[RequestInterceptor] = []
        self._response: list[ResponseInterceptor] = []

    def add_request_interceptor(self, interceptor: RequestInterceptor) -> Callable[[], None]:
        """Register an interceptor; returns a callable that unregisters it."""
        self._request.append(interceptor)
        return _remover(self._request, interceptor)

    def add_response_interceptor(self, interceptor: ResponseInterceptor) -> Callable[[], None]:
        self._response.append(interceptor)
        return _remover(self._response, interceptor)

    async def apply_request(self, request: PreparedRequest) -> PreparedRequest:
        current = replace(request, headers=dict(request.headers), metadata=dict(request.metadata))
        for interceptor in list(self._request):
            result = interceptor(current)
            current = await result if inspect.isawaitable(result) else result
        return current

    async def apply_response(self, response: ApiResponse) -> ApiResponse:
        current = replace(response)
        for interceptor in list(self._response):
            result = interceptor(current)
            current = await result if inspect.isawaitable(result) else result
        return current

    def clear_request_interceptors(self) -> None:
        self._request.clear()

    def clear_response_interceptors(self) -> None:
        self._response.clear()

    def clear(self) -> None:
        self.clear_request_interceptors()
        self.clear_response_interceptors()


def logging_interceptor(request: PreparedRequest) -> PreparedRequest:
    """Log the final outgoing request. Register it last so it sees every change."""
    logger.debug(f"{request.method} {request.url} params={request.params} body={request.json}")
    return request
