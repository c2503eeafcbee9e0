"""
Analytics queries over the stored questions collection.

Both queries are read-only and independent of each other.
"""

import logging
import re
from typing import Iterable, List

from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from src.errors import StoreConnectionError
from src.models.question import DOCUMENT_FIELD

logger = logging.getLogger(__name__)

VIEW_COUNT_FIELD = f"{DOCUMENT_FIELD}.ViewCount"
TITLE_FIELD = f"{DOCUMENT_FIELD}.Title"


def average_view_count(collection: Collection) -> float:
    """
    Mean ViewCount over the whole collection.

    Returns 0 for an empty collection.
    """
    pipeline = [
        {"$group": {"_id": None, "avgViewCount": {"$avg": f"${VIEW_COUNT_FIELD}"}}}
    ]
    try:
        result = list(collection.aggregate(pipeline))
    except PyMongoError as e:
        logger.error(f"Average ViewCount aggregate failed: {e}")
        raise StoreConnectionError(f"Aggregate failed: {e}") from e

    if not result or result[0].get("avgViewCount") is None:
        return 0
    return result[0]["avgViewCount"]


def above_average_view_count(collection: Collection) -> List[dict]:
    """Documents whose ViewCount is strictly greater than the mean."""
    mean = average_view_count(collection)
    logger.info(f"Mean ViewCount: {mean}")

    try:
        return list(collection.find({VIEW_COUNT_FIELD: {"$gt": mean}}))
    except PyMongoError as e:
        logger.error(f"Above-average ViewCount query failed: {e}")
        raise StoreConnectionError(f"Query failed: {e}") from e


def keyword_title_search(collection: Collection, keywords: Iterable[str]) -> List[dict]:
    """
    Documents whose Title contains any keyword, case-insensitively.

    Keywords match as literal substrings. A title matching several
    keywords is returned once.
    """
    keywords = [k for k in keywords if k]
    if not keywords:
        logger.warning("No keywords configured, skipping title search")
        return []

    pattern = "|".join(re.escape(k) for k in keywords)
    try:
        return list(collection.find({TITLE_FIELD: {"$regex": pattern, "$options": "i"}}))
    except PyMongoError as e:
        logger.error(f"Keyword title search failed: {e}")
        raise StoreConnectionError(f"Query failed: {e}") from e
