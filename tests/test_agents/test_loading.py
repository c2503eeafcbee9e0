"""
Unit tests for the replace-all Bulk Loader.
"""

from unittest.mock import MagicMock

import pytest
from pymongo.errors import PyMongoError

from src.agents.loading import BulkLoader
from src.errors import StoreWriteError


def make_docs(count, prefix="q"):
    return [
        {"question": {"Id": f"{prefix}{i}", "PostTypeId": "1", "ViewCount": i, "Title": f"T{i}"}}
        for i in range(count)
    ]


def test_load_into_empty_collection(store):
    inserted = BulkLoader().load(store, "questions", make_docs(3))

    assert inserted == 3
    assert store.collection("questions").count_documents({}) == 3


def test_load_replaces_prior_contents(store):
    collection = store.collection("questions")
    collection.insert_many(make_docs(5, prefix="old"))

    inserted = BulkLoader().load(store, "questions", make_docs(2, prefix="new"))

    assert inserted == 2
    ids = sorted(d["question"]["Id"] for d in collection.find({}))
    assert ids == ["new0", "new1"]


def test_load_is_idempotent(store):
    loader = BulkLoader()
    docs = make_docs(4)

    loader.load(store, "questions", docs)
    first = sorted(d["question"]["Id"] for d in store.collection("questions").find({}))
    loader.load(store, "questions", docs)
    second = sorted(d["question"]["Id"] for d in store.collection("questions").find({}))

    assert first == second
    assert store.collection("questions").count_documents({}) == 4


def test_load_does_not_mutate_input(store):
    docs = make_docs(2)

    BulkLoader().load(store, "questions", docs)

    assert all("_id" not in d for d in docs)


def test_load_empty_set_clears_collection(store):
    store.collection("questions").insert_many(make_docs(3))

    inserted = BulkLoader().load(store, "questions", [])

    assert inserted == 0
    assert store.collection("questions").count_documents({}) == 0


def test_delete_failure_raises_before_insert():
    collection = MagicMock()
    collection.delete_many.side_effect = PyMongoError("not authorized")
    store = MagicMock()
    store.collection.return_value = collection

    with pytest.raises(StoreWriteError) as exc_info:
        BulkLoader().load(store, "questions", make_docs(1))

    assert exc_info.value.phase == "delete"
    collection.insert_many.assert_not_called()


def test_insert_failure_leaves_collection_empty(store):
    """A failed insert after the delete is surfaced, not masked."""
    store.collection("questions").insert_many(make_docs(3, prefix="old"))
    real_collection = store.collection("questions")

    failing = MagicMock(wraps=real_collection)
    failing.insert_many.side_effect = PyMongoError("disk full")
    proxy = MagicMock()
    proxy.collection.return_value = failing

    with pytest.raises(StoreWriteError) as exc_info:
        BulkLoader().load(proxy, "questions", make_docs(2))

    assert exc_info.value.phase == "insert"
    assert real_collection.count_documents({}) == 0
