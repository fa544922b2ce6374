"""HTTP client for the Minimax API.

Handles auth and organization headers, interceptors, error classification,
retries and RowVersion injection for every API call.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

import httpx

from minimax.auth.session import SessionManager
from minimax.config import DEFAULT_BASE_URL, RetrySettings, Settings
from minimax.errors import MinimaxError
from minimax.http.error_middleware import ErrorClassifier, ErrorMiddlewareChain, wrap_transport_error
from minimax.http.failures import TransportError, parse_body, response_failure
from minimax.http.interceptors import (
    ApiResponse,
    InterceptorManager,
    PreparedRequest,
    RequestInterceptor,
    ResponseInterceptor,
)
from minimax.http.retry import RetryHandler, RetryStrategy
from minimax.http.row_version import RowVersionHandler
from minimax.models.resources import Resource

logger = logging.getLogger(__name__)

ORGANIZATION_HEADER = "X-Organization-Id"


class HttpClient:
    """Authenticated HTTP client for the Minimax API with retry handling."""

    def __init__(
        self,
        settings: Settings,
        session: SessionManager,
        retry: RetrySettings | RetryStrategy | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        headers: dict[str, str] | None = None,
        handle_row_version: bool | None = None,
    ) -> None:
        self._settings = settings
        self._session = session
        self._base_url = base_url or settings.base_url or DEFAULT_BASE_URL
        self._default_headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            **(headers or {}),
            **settings.headers,
        }
        self._http = httpx.AsyncClient(timeout=timeout or settings.timeout)
        self._interceptors = InterceptorManager()
        self._error_chain = ErrorMiddlewareChain()
        self._retry = RetryHandler(retry)
        self._row_version = RowVersionHandler()

        if handle_row_version is None:
            handle_row_version = settings.handle_row_version
        if handle_row_version:
            self.add_request_interceptor(self._row_version.request_interceptor)
            self.add_error_middleware(self._row_version.error_classifier)

    @property
    def session(self) -> SessionManager:
        return self._session

    @property
    def retry_handler(self) -> RetryHandler:
        return self._retry

    @property
    def row_version_handler(self) -> RowVersionHandler:
        return self._row_version

    @property
    def base_url(self) -> str:
        return self._base_url

    async def request(
        self,
        method: str,
        endpoint: str,
        *,
        json: Any = None,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        authenticate: bool = True,
        org_id: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> Any:
        """Make an API request with auth, interceptors and retry logic.

        Args:
            method: HTTP method (GET, POST, PUT, PATCH, DELETE).
            endpoint: Path relative to the base URL, or an absolute URL.
            json: JSON request body.
            params: Query parameters.
            headers: Additional headers for this request.
            authenticate: Attach the bearer token and organization header.
            org_id: Organization for this call instead of the session's.
            metadata: Extra data for interceptors (e.g. ``{"resource": ...}``).

        Returns:
            The decoded response body (None for empty responses).

        Raises:
            MinimaxError: A typed error once retries are exhausted or the
                error is not retryable.
        """
        method = method.upper()
        url = self._url(endpoint)

        async def attempt() -> Any:
            try:
                request = PreparedRequest(
                    method=method,
                    url=url,
                    headers={**self._default_headers, **(headers or {})},
                    params=params,
                    json=json,
                    metadata=dict(metadata or {}),
                )
                if authenticate:
                    await self._authorize(request, org_id)
                return await self._send(request)
            except Exception as e:
                typed = self._classify(e)
                if typed is e:
                    raise
                raise typed from e

        return await self._retry.execute(attempt)

    async def get(self, endpoint: str, **kwargs: Any) -> Any:
        """Convenience method for GET requests."""
        return await self.request("GET", endpoint, **kwargs)

    async def post(self, endpoint: str, json: Any = None, **kwargs: Any) -> Any:
        """Convenience method for POST requests."""
        return await self.request("POST", endpoint, json=json, **kwargs)

    async def put(self, endpoint: str, json: Any = None, **kwargs: Any) -> Any:
        """Convenience method for PUT requests."""
        return await self.request("PUT", endpoint, json=json, **kwargs)

    async def patch(self, endpoint: str, json: Any = None, **kwargs: Any) -> Any:
        """Convenience method for PATCH requests."""
        return await self.request("PATCH", endpoint, json=json, **kwargs)

    async def delete(self, endpoint: str, **kwargs: Any) -> Any:
        """Convenience method for DELETE requests."""
        return await self.request("DELETE", endpoint, **kwargs)

    async def update_with_concurrency(
        self,
        endpoint: str,
        resource: Resource | dict[str, Any],
        data: dict[str, Any],
        **kwargs: Any,
    ) -> Any:
        """PUT ``data`` carrying the RowVersion read with ``resource``.

        A stale RowVersion raises ConcurrencyError; re-fetch and try again.
        """
        body = self._row_version.add_row_version(resource, data)
        metadata = {**(kwargs.pop("metadata", None) or {}), "resource": resource}
        return await self.put(endpoint, body, metadata=metadata, **kwargs)

    def add_request_interceptor(self, interceptor: RequestInterceptor) -> Callable[[], None]:
        return self._interceptors.add_request_interceptor(interceptor)

    def add_response_interceptor(self, interceptor: ResponseInterceptor) -> Callable[[], None]:
        return self._interceptors.add_response_interceptor(interceptor)

    def clear_interceptors(self) -> None:
        self._interceptors.clear()

    def add_error_middleware(self, classifier: ErrorClassifier) -> Callable[[], None]:
        return self._error_chain.add(classifier)

    def clear_error_middleware(self) -> None:
        self._error_chain.clear()

    def _url(self, endpoint: str) -> str:
        if endpoint.startswith(("http://", "https://")):
            return endpoint
        return self._base_url.rstrip("/") + "/" + endpoint.lstrip("/")

    async def _authorize(self, request: PreparedRequest, org_id: str | None) -> None:
        """Add bearer token and organization scope headers."""
        token = await self._session.get_auth_token()
        request.headers["Authorization"] = f"Bearer {token.access_token}"

        organization_id = org_id or self._session.get_organization_id()
        if organization_id:
            request.headers[ORGANIZATION_HEADER] = str(organization_id)

    async def _send(self, request: PreparedRequest) -> Any:
        request = await self._interceptors.apply_request(request)
        logger.debug(f"{request.method} {request.url}")

        response = await self._http.request(
            method=request.method,
            url=request.url,
            headers=request.headers,
            params=request.params,
            json=request.json,
        )
        logger.debug(f"Response: {response.status_code}")

        if response.status_code >= 400:
            raise TransportError(response_failure(response))

        api_response = await self._interceptors.apply_response(
            ApiResponse(
                status_code=response.status_code,
                headers=dict(response.headers),
                data=parse_body(response),
                request=request,
            )
        )
        return api_response.data

    def _classify(self, error: BaseException) -> MinimaxError:
        return self._error_chain.classify(wrap_transport_error(error))

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._http.aclose()
