"""Tests for http/failures.py: capturing transport failures."""
import httpx

from minimax.http.failures import (
    NoResponse,
    OtherFailure,
    ResponseFailure,
    TransportError,
    capture_failure,
    parse_body,
)


def _response(status, **kwargs):
    return httpx.Response(status, request=httpx.Request("GET", "https://api.test/x"), **kwargs)


def test_status_error_becomes_response_failure():
    resp = _response(404, json={"message": "gone"}, headers={"X-Trace": "1"})
    exc = httpx.HTTPStatusError("404", request=resp.request, response=resp)

    failure = capture_failure(exc)
    assert isinstance(failure, ResponseFailure)
    assert failure.status_code == 404
    assert failure.body == {"message": "gone"}
    assert failure.headers["x-trace"] == "1"


def test_connect_error_becomes_no_response():
    exc = httpx.ConnectError("refused")
    failure = capture_failure(exc)
    assert isinstance(failure, NoResponse)
    assert failure.cause is exc


def test_timeout_becomes_no_response():
    assert isinstance(capture_failure(httpx.ReadTimeout("slow")), NoResponse)


def test_other_exception():
    exc = ValueError("bad")
    failure = capture_failure(exc)
    assert isinstance(failure, OtherFailure)
    assert failure.cause is exc


def test_transport_error_unwraps():
    failure = ResponseFailure(500)
    assert capture_failure(TransportError(failure)) is failure
    assert str(TransportError(failure)) == "HTTP 500"


def test_parse_body():
    assert parse_body(_response(200, json={"a": 1})) == {"a": 1}
    assert parse_body(_response(200, text="hello")) == "hello"
    assert parse_body(_response(204)) is None
