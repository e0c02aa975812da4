import pytest
from fastapi.testclient import TestClient

from main import app
from services.orders import order_store


@pytest.fixture
def client():
    order_store.clear()
    with TestClient(app) as test_client:
        yield test_client
    order_store.clear()
