"""Shared fixtures for unit tests."""

from typing import cast

import pytest
from pytest_mock import MockerFixture, MockType

from webguard.core.config import Settings


@pytest.fixture
def mock_settings(monkeypatch: pytest.MonkeyPatch) -> Settings:
    """Provide a Settings object with test values.

    Returns:
        Settings: Settings built from test environment variables.
    """
    monkeypatch.setenv("APP_NAME", "TestApp")
    monkeypatch.setenv("APP_VERSION", "1.0.0")
    monkeypatch.setenv("ENVIRONMENT", "development")
    monkeypatch.setenv("DEBUG", "false")
    monkeypatch.setenv("API_HOST", "127.0.0.1")
    monkeypatch.setenv("API_PORT", "3000")

    return Settings()


@pytest.fixture
def mock_app(mocker: MockerFixture) -> MockType:
    """Provide a mock ASGI app instance.

    Args:
        mocker: Pytest mocker fixture.

    Returns:
        MockType: Mock app that middlewares can wrap.
    """
    app = mocker.Mock()
    app.__name__ = "mock_app"
    app.__module__ = "tests.unit.conftest"
    return cast("MockType", app)


@pytest.fixture
def mock_uvicorn(mocker: MockerFixture) -> MockType:
    """Mock uvicorn.run to prevent server startup.

    Args:
        mocker: Pytest mocker fixture.

    Returns:
        MockType: The mock for assertion purposes.
    """
    return mocker.patch("uvicorn.run")


@pytest.fixture
def isolated_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Isolate environment variables for testing.

    Args:
        monkeypatch: Pytest monkeypatch fixture.

    Returns:
        pytest.MonkeyPatch: The monkeypatch instance for env manipulation.
    """
    monkeypatch.delenv("PORT", raising=False)
    return monkeypatch
