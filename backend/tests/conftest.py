"""
Shared fixtures for palette service tests.
"""
import pytest
from fastapi.testclient import TestClient

from app.utils.metrics import reset_metrics
from main import app


@pytest.fixture
def test_client():
    """HTTP client bound to the palette app."""
    return TestClient(app)


@pytest.fixture(autouse=True)
def fresh_metrics():
    """Start every test with empty counters."""
    reset_metrics()
    yield
