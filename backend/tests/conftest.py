"""
Shared fixtures for the extract-text API tests.
"""

import base64

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.services.intake import RawIntake
from app.services.rate_limiter import RateLimiter, get_rate_limiter


@pytest.fixture
def limiter():
    """Fresh in-memory limiter per test so counters never leak between tests."""
    return RateLimiter(window_sec=60, max_requests=100)


@pytest.fixture
def client(limiter):
    app.dependency_overrides[get_rate_limiter] = lambda: limiter
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def b64():
    def encode(raw: bytes) -> str:
        return base64.b64encode(raw).decode("ascii")
    return encode


@pytest.fixture
def make_intake():
    def build(buffer: bytes, file_name=None, source="base64") -> RawIntake:
        return RawIntake(buffer=buffer, file_name=file_name, source=source)
    return build
