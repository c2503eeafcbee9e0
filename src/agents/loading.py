"""
Bulk Loader.

Replaces the full contents of a collection with a new document set.
"""

import logging
from typing import List

from pymongo.errors import PyMongoError

from src.errors import StoreWriteError
from src.utils.storage import MongoStore

logger = logging.getLogger(__name__)


class BulkLoader:
    """
    Replace-all loader: delete every document, then insert the new set.

    The two phases are not atomic. If the insert fails after the delete
    succeeded, the collection is left empty.
    """

    def load(self, store: MongoStore, collection_name: str, documents: List[dict]) -> int:
        """
        Replace the collection contents with `documents`.

        Args:
            store: Connected store
            collection_name: Target collection
            documents: Documents to insert, in order

        Returns:
            Number of documents inserted

        Raises:
            StoreWriteError: If the delete or insert phase fails
        """
        collection = store.collection(collection_name)

        try:
            deleted = collection.delete_many({})
        except PyMongoError as e:
            logger.error(f"Failed to clear collection {collection_name}: {e}")
            raise StoreWriteError("delete", str(e)) from e
        logger.info(f"Removed {deleted.deleted_count} existing documents from {collection_name}")

        if not documents:
            logger.warning(f"No documents to insert into {collection_name}")
            return 0

        # insert_many adds _id to each dict; keep the caller's copies clean
        batch = [dict(doc) for doc in documents]
        try:
            result = collection.insert_many(batch, ordered=True)
        except PyMongoError as e:
            logger.error(
                f"Insert into {collection_name} failed after delete; "
                f"collection may be empty: {e}"
            )
            raise StoreWriteError("insert", str(e)) from e

        inserted = len(result.inserted_ids)
        logger.info(f"Inserted {inserted} documents into {collection_name}")
        return inserted
