"""Retry policy for API requests."""

from __future__ import annotations

import asyncio
import logging
import random
from typing import Any, Awaitable, Callable, Protocol, TypeVar, runtime_checkable

from minimax.config import RetrySettings
from minimax.errors import MinimaxError, NetworkError, RateLimitError, ServerError
from minimax.http.failures import NoResponse, ResponseFailure, TransportError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RetryConfig(RetrySettings):
    """Retry settings plus an optional custom predicate.

    ``retry_condition(error, retry_count)`` replaces the built-in decision of
    which errors are retryable; ``max_retries`` still caps the attempts.
    """

    retry_condition: Callable[[BaseException, int], bool] | None = None


@runtime_checkable
class RetryStrategy(Protocol):
    def should_retry(self, error: BaseException, retry_count: int) -> bool: ...

    def get_retry_delay(self, retry_count: int, error: BaseException) -> float: ...


class DefaultRetryStrategy:
    """Exponential backoff with jitter.

    Network, rate-limit and server errors are always retried (up to
    ``max_retries``). Other errors are retried when their status code is in
    ``retry_status_codes`` or when no response was received at all.
    """

    def __init__(self, config: RetrySettings | None = None) -> None:
        self._config = config or RetryConfig()

    @property
    def config(self) -> RetrySettings:
        return self._config

    def should_retry(self, error: BaseException, retry_count: int) -> bool:
        if retry_count >= self._config.max_retries:
            return False

        condition = getattr(self._config, "retry_condition", None)
        if condition is not None:
            return condition(error, retry_count)

        if isinstance(error, (NetworkError, RateLimitError, ServerError)):
            return True

        status_code = _status_code(error)
        if status_code is not None:
            return status_code in self._config.retry_status_codes

        return _had_no_response(error)

    def get_retry_delay(self, retry_count: int, error: BaseException) -> float:
        """Seconds to wait before retry number ``retry_count`` (1-based)."""
        if isinstance(error, RateLimitError) and error.retry_after:
            return float(error.retry_after)

        delay = self._config.retry_delay
        if self._config.use_exponential_backoff:
            delay = delay * (self._config.backoff_factor ** retry_count)

        if self._config.jitter > 0:
            spread = delay * self._config.jitter
            delay = delay - spread + random.random() * spread * 2

        return min(delay, self._config.max_retry_delay)


def _status_code(error: BaseException) -> int | None:
    if isinstance(error, MinimaxError):
        return error.status_code
    if isinstance(error, TransportError) and isinstance(error.failure, ResponseFailure):
        return error.failure.status_code
    return None


def _had_no_response(error: BaseException) -> bool:
    if isinstance(error, TransportError):
        return isinstance(error.failure, NoResponse)
    if isinstance(error, MinimaxError) and isinstance(error.original_error, BaseException):
        return _had_no_response(error.original_error)
    return False


class RetryHandler:
    """Runs an operation, re-running it while the strategy allows."""

    def __init__(
        self,
        config: RetrySettings | RetryStrategy | None = None,
        sleep: Callable[[float], Awaitable[Any]] | None = None,
    ) -> None:
        if isinstance(config, RetryStrategy):
            self._strategy: RetryStrategy = config
        else:
            self._strategy = DefaultRetryStrategy(config)
        self._sleep = sleep or asyncio.sleep

    @property
    def strategy(self) -> RetryStrategy:
        return self._strategy

    async def execute(self, operation: Callable[[], Awaitable[T]]) -> T:
        retry_count = 0
        while True:
            try:
                return await operation()
            except Exception as e:
                if not self._strategy.should_retry(e, retry_count):
                    raise
                retry_count += 1
                delay = self._strategy.get_retry_delay(retry_count, e)
                logger.warning(f"{e}. Retrying in {delay:.1f}s [retry {retry_count}]...")
                await self._sleep(delay)
