"""Pytest configuration and fixtures for the product catalog API."""

import os

os.environ.setdefault("MONGODB_URI", "mongodb://localhost:27017")

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from src.config import settings  # noqa: E402
from src.services.product_repository import ProductRepository  # noqa: E402
from src.services.storage.mongo_connection import (  # noqa: E402
    MongoConnectionManager,
    get_connection_manager,
)
from tests.fakes import FakeCollection, FakeMongoClient  # noqa: E402

TEST_DATABASE = "catalog-test"


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: marks tests as unit tests")
    config.addinivalue_line("markers", "asyncio: marks tests as async tests")


@pytest.fixture()
def mongo_client() -> FakeMongoClient:
    return FakeMongoClient()


@pytest.fixture()
def connection_manager(mongo_client) -> MongoConnectionManager:
    return MongoConnectionManager(
        "mongodb://fake-host:27017",
        TEST_DATABASE,
        client_factory=mongo_client.factory,
    )


@pytest.fixture()
def products_collection(mongo_client) -> FakeCollection:
    return mongo_client[TEST_DATABASE][settings.MONGODB_COLLECTION]


@pytest.fixture()
def repository(connection_manager) -> ProductRepository:
    return ProductRepository(connection_manager, settings.MONGODB_COLLECTION)


@pytest.fixture()
def product_payload() -> dict:
    return {
        "title": "iphone 20",
        "description": "black iphone 16",
        "category": "electronics",
        "imageUrl": "https://example.com/i.png",
        "price": 2000,
        "creator": "apple",
    }


@pytest_asyncio.fixture()
async def client(connection_manager):
    """Return an HTTPX async client pointing at the FastAPI app."""
    from src.main import app

    app.dependency_overrides[get_connection_manager] = lambda: connection_manager
    try:
        async with AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://testserver",
        ) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.pop(get_connection_manager, None)
