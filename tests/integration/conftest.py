"""Shared fixtures for integration tests.

Two applications are exercised end to end through httpx's ASGI transport:
a bare Starlette app assembled from the middleware factories, and the FastAPI
demo application built by ``create_app``.
"""

from collections.abc import AsyncGenerator, AsyncIterator, Generator
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient
from loguru import logger
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import PlainTextResponse, StreamingResponse
from starlette.routing import Route

from webguard.api.main import create_app
from webguard.api.middleware import fault_handler, security_headers
from webguard.api.utils.log_context import add_installation_id
from webguard.core.config import HeaderConfig, Settings
from webguard.core.faults import raise_fault

ROOT_DOMAIN = "example.com"
BASE_URL = f"http://app.{ROOT_DOMAIN}"

HEADER_CONFIG = HeaderConfig(
    x_frame_options="DENY",
    content_security_policy={"script-src": ["'self'"], "default-src": ["'none'"]},
    strict_transport_security="max-age=2592000",
    x_content_type_options="nosniff",
)


async def ok(_request: Request) -> PlainTextResponse:
    return PlainTextResponse("ok")


async def framed(_request: Request) -> PlainTextResponse:
    return PlainTextResponse("framed", headers={"X-Frame-Options": "SAMEORIGIN"})


async def boom(_request: Request) -> PlainTextResponse:
    raise ValueError("boom <b>")


async def mapping_fault(_request: Request) -> PlainTextResponse:
    raise_fault({"error": KeyError("missing"), "user": 7})


async def mapping_without_error(_request: Request) -> PlainTextResponse:
    raise_fault({"user": 7})


async def value_fault(_request: Request) -> PlainTextResponse:
    raise_fault(42)


class UnprintableError(Exception):
    def __str__(self) -> str:
        msg = "no str"
        raise RuntimeError(msg)


async def unprintable(_request: Request) -> PlainTextResponse:
    raise UnprintableError


async def stream_fault(_request: Request) -> StreamingResponse:
    async def chunks() -> AsyncIterator[bytes]:
        yield b"first chunk"
        msg = "mid-stream"
        raise ValueError(msg)

    return StreamingResponse(chunks(), media_type="text/plain")


ROUTES = [
    Route("/ok", ok),
    Route("/framed", framed),
    Route("/boom", boom),
    Route("/mapping", mapping_fault),
    Route("/mapping-without-error", mapping_without_error),
    Route("/value", value_fault),
    Route("/unprintable", unprintable),
    Route("/stream", stream_fault),
]


def build_guarded_app(*, dev_mode: bool) -> Starlette:
    """Build a Starlette app guarded by both middlewares.

    Args:
        dev_mode: Passed to the fault handler.

    Returns:
        Starlette: App with security headers outermost and the fault handler inside.
    """
    return Starlette(
        routes=ROUTES,
        middleware=[
            security_headers(ROOT_DOMAIN, HEADER_CONFIG),
            fault_handler(add_installation_id, dev_mode=dev_mode),
        ],
    )


@pytest.fixture
async def production_client() -> AsyncGenerator[AsyncClient]:
    """Client for the guarded app with dev mode off."""
    transport = ASGITransport(app=build_guarded_app(dev_mode=False))
    async with AsyncClient(transport=transport, base_url=BASE_URL) as client:
        yield client


@pytest.fixture
async def dev_client() -> AsyncGenerator[AsyncClient]:
    """Client for the guarded app with dev mode on."""
    transport = ASGITransport(app=build_guarded_app(dev_mode=True))
    async with AsyncClient(transport=transport, base_url=BASE_URL) as client:
        yield client


@pytest.fixture
async def bare_client() -> AsyncGenerator[AsyncClient]:
    """Client for an app wrapped only by the fault handler."""
    application = Starlette(routes=ROUTES, middleware=[fault_handler()])
    transport = ASGITransport(app=application)
    async with AsyncClient(transport=transport, base_url=BASE_URL) as client:
        yield client


@pytest.fixture
async def app_client(monkeypatch: pytest.MonkeyPatch) -> AsyncGenerator[AsyncClient]:
    """Client for the FastAPI demo application in dev mode."""
    monkeypatch.setenv("ENVIRONMENT", "development")
    monkeypatch.setenv("DEBUG", "true")
    monkeypatch.setenv("SECURITY_CONFIG__ROOT_DOMAIN", ROOT_DOMAIN)
    application = create_app(Settings())

    transport = ASGITransport(app=application)
    async with AsyncClient(transport=transport, base_url=BASE_URL) as client:
        yield client


@pytest.fixture
def loguru_records() -> Generator[list[dict[str, Any]]]:
    """Collect Loguru records emitted during the test."""
    records: list[dict[str, Any]] = []
    handler_id = logger.add(lambda message: records.append(message.record))
    yield records
    logger.remove(handler_id)
