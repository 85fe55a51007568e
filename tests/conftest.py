"""Pytest configuration and fixtures shared across all test modules.

Environment variables are set before any app import so the global settings
object is built with test values (and no .env file is loaded).
"""

import os

# CRITICAL: Set this before any imports that might load settings
os.environ["APP_ENV"] = "testing"

os.environ.setdefault("APP_API_KEY_REQUIRED", "true")
os.environ.setdefault("APP_API_KEYS", "test-api-key-123,test-api-key-456")
os.environ.setdefault("LIMIT_ORDERS_DEFAULT_TIMEZONE", "UTC")

from datetime import datetime  # noqa: E402

import pytest  # noqa: E402


class FakeClock:
    """Deterministic clock returning UNIX seconds."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.current = start

    def time(self) -> float:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += seconds

    def set(self, moment: datetime) -> None:
        self.current = moment.timestamp()


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()
