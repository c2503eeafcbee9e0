"""
Storage utility.

MongoDB connection handling for the load and report jobs.
"""

import logging
from typing import Callable, Optional

from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from src.errors import StoreConnectionError

logger = logging.getLogger(__name__)


class MongoStore:
    """
    Scoped handle on one MongoDB database.

    Opened once per job and closed on every exit path:

        with MongoStore(uri, "stackexchange_db") as store:
            store.collection("questions").find({})
    """

    def __init__(
        self,
        uri: str,
        db_name: str,
        client_factory: Callable[..., MongoClient] = MongoClient,
        timeout_ms: int = 5000
    ):
        """
        Initialize store handle (no connection is made yet).

        Args:
            uri: MongoDB connection string
            db_name: Database name
            client_factory: Client constructor; tests pass mongomock.MongoClient
            timeout_ms: Server selection timeout
        """
        self.uri = uri
        self.db_name = db_name
        self.client_factory = client_factory
        self.timeout_ms = timeout_ms
        self.client: Optional[MongoClient] = None
        self.db = None

    def connect(self) -> "MongoStore":
        """
        Open the client and verify the server responds.

        Raises:
            StoreConnectionError: If the server cannot be reached
        """
        try:
            self.client = self.client_factory(
                self.uri, serverSelectionTimeoutMS=self.timeout_ms
            )
            self.client.admin.command("ping")
        except PyMongoError as e:
            logger.error(f"Failed to connect to MongoDB: {e}")
            self.close()
            raise StoreConnectionError(f"Cannot connect to MongoDB: {e}") from e

        self.db = self.client[self.db_name]
        logger.info(f"Connected to MongoDB database {self.db_name}")
        return self

    def close(self) -> None:
        """Close the client if open. Safe to call more than once."""
        if self.client is None:
            return
        self.client.close()
        self.client = None
        self.db = None
        logger.info("MongoDB connection closed")

    def collection(self, name: str) -> Collection:
        if self.db is None:
            raise StoreConnectionError("Store is not connected")
        return self.db[name]

    def __enter__(self) -> "MongoStore":
        return self.connect()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
