"""Tests for global exception handlers.

Validates that all exception types are handled consistently with
proper HTTP status codes, error format, and no information leakage.
"""

import asyncio
import json
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.core.errors import (
    AppError,
    AuthenticationAppError,
    CacheStoreAppError,
    CountingAppError,
    SettingsStoreAppError,
    ValidationAppError,
)
from app.core.exception_handlers import (
    general_exception_handler,
    setup_exception_handlers,
    status_for_error,
)


@pytest.fixture
def app_with_handlers() -> FastAPI:
    """Create FastAPI app with exception handlers registered."""
    app = FastAPI()
    setup_exception_handlers(app)
    return app


@pytest.fixture
def client(app_with_handlers: FastAPI) -> TestClient:
    return TestClient(app_with_handlers, raise_server_exceptions=False)


@pytest.mark.parametrize(
    ("error", "status_code"),
    [
        (ValidationAppError(code="bad", message="bad"), 400),
        (AuthenticationAppError(code="invalid_api_key", message="no"), 403),
        (CountingAppError(code="order_count_failed", message="down"), 503),
        (CacheStoreAppError(code="cache_down", message="down"), 500),
        (SettingsStoreAppError(code="options_unavailable", message="down"), 500),
        (AppError(code="generic", message="generic"), 400),
    ],
)
def test_status_for_error(error: AppError, status_code: int) -> None:
    assert status_for_error(error) == status_code


class TestAppErrorHandler:
    """Test handler for AppError and subclasses."""

    def test_counting_error_returns_503_with_details(
        self, client: TestClient, app_with_handlers: FastAPI
    ):
        @app_with_handlers.get("/test-counting")
        async def test_endpoint():
            raise CountingAppError(
                code="order_count_failed",
                message="Unable to count qualifying orders",
                details={"interval_start": "2024-01-03T00:00:00+00:00"},
            )

        response = client.get("/test-counting")

        assert response.status_code == 503
        error = response.json()["error"]
        assert error["code"] == "order_count_failed"
        assert error["message"] == "Unable to count qualifying orders"
        assert error["details"]["interval_start"] == "2024-01-03T00:00:00+00:00"
        assert "request_id" in error

    def test_authentication_error_returns_403(self, client: TestClient, app_with_handlers: FastAPI):
        @app_with_handlers.get("/test-auth")
        async def test_endpoint():
            raise AuthenticationAppError(code="invalid_api_key", message="Invalid or missing API key")

        response = client.get("/test-auth")

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "invalid_api_key"

    def test_details_are_omitted_when_absent(self, client: TestClient, app_with_handlers: FastAPI):
        @app_with_handlers.get("/test-format")
        async def test_endpoint():
            raise ValidationAppError(code="test", message="test")

        data = client.get("/test-format").json()

        assert set(data["error"]) == {"code", "message", "request_id"}


class TestGeneralExceptionHandler:
    """Test fallback handler for unexpected exceptions."""

    def test_unexpected_exception_returns_generic_500(
        self, client: TestClient, app_with_handlers: FastAPI
    ):
        @app_with_handlers.get("/test-crash")
        async def test_endpoint():
            raise RuntimeError("orders table is locked")

        response = client.get("/test-crash")

        assert response.status_code == 500
        assert response.json()["error"]["code"] == "internal_server_error"
        assert "locked" not in response.text

    def test_general_exception_handler_never_leaks_stack_trace(self):
        request = AsyncMock()
        request.url.path = "/test"
        request.method = "GET"

        response = asyncio.run(general_exception_handler(request, ValueError("Test error with details")))

        body = bytes(response.body).decode()
        data = json.loads(body)
        assert response.status_code == 500
        assert "request_id" in data["error"]
        assert "Traceback" not in body
        assert "ValueError" not in body


def test_setup_exception_handlers_is_idempotent():
    app = FastAPI()

    setup_exception_handlers(app)
    setup_exception_handlers(app)

    assert AppError in app.exception_handlers
    assert Exception in app.exception_handlers
