"""Error classification chain.

Classifiers are called in order as ``classifier(error, next_)``. A classifier
either returns a typed error itself or hands the error on with
``next_(error)``; the built-in :func:`default_classifier` ends the chain.
"""

from __future__ import annotations

from typing import Callable, Protocol

from minimax.errors import MinimaxError, NetworkError, create_error_from_response
from minimax.http.failures import (
    NoResponse,
    ResponseFailure,
    TransportError,
    capture_failure,
)

NextClassifier = Callable[[BaseException], MinimaxError]


class ErrorClassifier(Protocol):
    def __call__(self, error: BaseException, next_: NextClassifier) -> MinimaxError: ...


def default_classifier(error: BaseException) -> MinimaxError:
    """Turn any error into a typed one. Typed errors pass through unchanged."""
    if isinstance(error, MinimaxError):
        return error

    failure = capture_failure(error)
    if isinstance(failure, ResponseFailure):
        return create_error_from_response(
            failure.body, failure.status_code, error, failure.headers
        )
    if isinstance(failure, NoResponse):
        return NetworkError(f"Network error: {failure.cause}", error)
    cause = failure.cause
    return MinimaxError(f"API request failed: {str(cause) or type(cause).__name__}", None, error)


class ErrorMiddlewareChain:
    """Mutable ordered list of classifiers ending in :func:`default_classifier`."""

    def __init__(self) -> None:
        self._classifiers: list[ErrorClassifier] = []

    def __len__(self) -> int:
        return len(self._classifiers)

    def add(self, classifier: ErrorClassifier) -> Callable[[], None]:
        """Append a classifier; returns a callable that removes it."""
        self._classifiers.append(classifier)

        def remove() -> None:
            if classifier in self._classifiers:
                self._classifiers.remove(classifier)

        return remove

    def clear(self) -> None:
        self._classifiers.clear()

    def classify(self, error: BaseException) -> MinimaxError:
        classifiers = tuple(self._classifiers)

        def dispatch(index: int, err: BaseException) -> MinimaxError:
            if index >= len(classifiers):
                return default_classifier(err)
            return classifiers[index](err, lambda e: dispatch(index + 1, e))

        return dispatch(0, error)


def wrap_transport_error(exc: BaseException) -> BaseException:
    """Attach the captured failure to raw httpx errors before classification."""
    if isinstance(exc, (MinimaxError, TransportError)):
        return exc
    return TransportError(capture_failure(exc))
