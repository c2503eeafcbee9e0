"""
Shared fixtures: an in-memory MongoDB (mongomock) behind MongoStore.
"""

import mongomock
import pytest

from src.utils.storage import MongoStore


@pytest.fixture
def mongo_client():
    return mongomock.MongoClient()


@pytest.fixture
def store_factory(mongo_client):
    """Factory returning unconnected stores that share one in-memory server."""
    def factory():
        return MongoStore(
            "mongodb://localhost:27017/",
            "test_db",
            client_factory=lambda *args, **kwargs: mongo_client
        )
    return factory


@pytest.fixture
def store(store_factory):
    store = store_factory()
    store.connect()
    yield store
    store.close()
