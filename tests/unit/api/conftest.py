"""
Common fixtures for API unit tests.

Provides shared test utilities:
- FastAPI TestClient bound to inspectable components
- Sample order payloads
"""

import pytest


@pytest.fixture
def client(test_client):
    """
    FastAPI TestClient for testing endpoints.

    Alias of the root test_client fixture (lifespan running, zero delays,
    failure probability 0).
    """
    return test_client


@pytest.fixture
def order_payload():
    """Valid POST/PUT body."""
    return {"item": "widget", "amount": 9.99}
