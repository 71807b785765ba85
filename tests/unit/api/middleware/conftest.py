"""Fixtures for API middleware tests."""

from collections.abc import AsyncIterator, Callable
from typing import cast

import pytest
from pytest_mock import MockerFixture, MockType
from starlette.datastructures import URL, Headers
from starlette.middleware.base import RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response, StreamingResponse
from starlette.types import ASGIApp, Receive, Scope, Send

from webguard.core.faults import FaultRecord, classify_fault, raise_fault


@pytest.fixture
def mock_starlette_request(mocker: MockerFixture) -> MockType:
    """Create mock Starlette Request for a host under example.com.

    Args:
        mocker: Pytest mocker fixture.

    Returns:
        MockType: Mock request object.
    """
    request = mocker.Mock(spec=Request)
    request.method = "GET"
    request.url = mocker.Mock(spec=URL)
    request.url.path = "/api/test"
    request.headers = Headers({"host": "app.example.com"})
    return cast("MockType", request)


@pytest.fixture
def mock_xhr_request(mock_starlette_request: MockType) -> MockType:
    """Create mock Starlette Request sent by browser JavaScript.

    Args:
        mock_starlette_request: Base mock request fixture.

    Returns:
        MockType: Mock request carrying X-Requested-With: XMLHttpRequest.
    """
    mock_starlette_request.headers = Headers(
        {"host": "app.example.com", "x-requested-with": "XMLHttpRequest"}
    )
    return mock_starlette_request


@pytest.fixture
def mock_starlette_response(mocker: MockerFixture) -> MockType:
    """Create mock Starlette Response.

    Args:
        mocker: Pytest mocker fixture.

    Returns:
        MockType: Mock response object.
    """
    response = mocker.Mock(spec=Response)
    response.headers = {}
    response.status_code = 200
    return cast("MockType", response)


@pytest.fixture
def mock_starlette_call_next(
    mocker: MockerFixture, mock_starlette_response: MockType
) -> MockType:
    """Create mock RequestResponseEndpoint callable.

    Args:
        mocker: Pytest mocker fixture.
        mock_starlette_response: Mock response fixture.

    Returns:
        MockType: Mock call_next function.
    """
    call_next = mocker.AsyncMock(spec=RequestResponseEndpoint)
    call_next.return_value = mock_starlette_response
    return cast("MockType", call_next)


def _make_http_scope(headers: dict[str, str] | None = None) -> Scope:
    """Build an HTTP scope for GET /api/test on app.example.com.

    Args:
        headers: Extra request headers.

    Returns:
        Scope: ASGI HTTP connection scope.
    """
    raw = {"host": "app.example.com", **(headers or {})}
    return {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": "GET",
        "scheme": "http",
        "path": "/api/test",
        "raw_path": b"/api/test",
        "root_path": "",
        "query_string": b"",
        "headers": [
            (name.lower().encode("latin-1"), value.encode("latin-1"))
            for name, value in raw.items()
        ],
        "client": ("127.0.0.1", 50000),
        "server": ("app.example.com", 80),
    }


@pytest.fixture
def http_scope() -> Scope:
    """Provide an HTTP scope for a browser request.

    Returns:
        Scope: Scope without X-Requested-With.
    """
    return _make_http_scope()


@pytest.fixture
def xhr_scope() -> Scope:
    """Provide an HTTP scope for a request sent by browser JavaScript.

    Returns:
        Scope: Scope carrying X-Requested-With: XMLHttpRequest.
    """
    return _make_http_scope({"X-Requested-With": "XMLHttpRequest"})


@pytest.fixture
def ok_app() -> ASGIApp:
    """Provide a downstream app that answers 200 with a plain-text body.

    Returns:
        ASGIApp: The app.
    """
    return PlainTextResponse("ok", headers={"X-Handler": "set"})


@pytest.fixture
def faulting_app() -> Callable[[BaseException], ASGIApp]:
    """Factory for downstream apps that raise before sending anything.

    Returns:
        Callable[[BaseException], ASGIApp]: Function building a raising app.
    """

    def _create(exc: BaseException) -> ASGIApp:
        async def app(_scope: Scope, _receive: Receive, _send: Send) -> None:
            raise exc

        return app

    return _create


@pytest.fixture
def streaming_faulting_app() -> Callable[[BaseException], ASGIApp]:
    """Factory for downstream apps that raise while streaming the body.

    Returns:
        Callable[[BaseException], ASGIApp]: Function building the app.
    """

    def _create(exc: BaseException) -> ASGIApp:
        async def chunks() -> AsyncIterator[bytes]:
            yield b"first chunk"
            raise exc

        return StreamingResponse(chunks(), media_type="text/plain")

    return _create


@pytest.fixture
def boom_record() -> FaultRecord:
    """Provide a classified record for a handler that faulted with "boom".

    Returns:
        FaultRecord: Record with a traceback from an actual raise.
    """
    try:
        raise_fault("boom")
    except Exception as exc:  # noqa: BLE001
        return classify_fault(exc)


@pytest.fixture
def mock_fault_dependencies(mocker: MockerFixture) -> dict[str, MockType]:
    """Mock the logging and tracing sinks used by the fault handler.

    Args:
        mocker: Pytest mocker fixture.

    Returns:
        dict[str, MockType]: The logger and mark_span_error mocks.
    """
    return {
        "logger": mocker.patch("webguard.api.middleware.fault_handler.logger"),
        "mark_span_error": mocker.patch(
            "webguard.api.middleware.fault_handler.mark_span_error"
        ),
    }
