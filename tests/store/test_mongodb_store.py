# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Tests for MongoDocumentStore using mongomock, and the backend on top of it."""

from __future__ import annotations

import mongomock
import pytest
from pymongo.errors import DuplicateKeyError, PyMongoError

from dscache.cache.backend import DocumentStoreCacheBackend
from dscache.kernel.exceptions import ConfigurationError, StoreReadError, StoreWriteError
from dscache.store.adapters.mongodb import MongoDocumentStore
from dscache.store.ports.outbound import DocumentStoreClient
from dscache.store.types import EntityQuery, PropertyFilter


@pytest.fixture
def database():
    return mongomock.MongoClient()["dscache_test"]


@pytest.fixture
def mongo_store(database):
    return MongoDocumentStore(database)


def _all(store, query):
    return [entity for page in store.run_query(query) for entity in page]


class FailingCollection:
    """Collection stub whose every call raises the given error."""

    def __init__(self, error: Exception) -> None:
        self._error = error

    def insert_one(self, document):
        raise self._error

    def replace_one(self, filter, document, upsert=False):
        raise self._error

    def find(self, *args, **kwargs):
        def cursor():
            raise self._error
            yield  # pragma: no cover

        return cursor()

    def delete_one(self, filter):
        raise self._error

    def delete_many(self, filter):
        raise self._error


class FailingDatabase:
    def __init__(self, error: Exception) -> None:
        self._collection = FailingCollection(error)

    def __getitem__(self, name):
        return self._collection


class TrackingCursor:
    """Wraps a mongomock cursor and records whether it was closed."""

    def __init__(self, cursor) -> None:
        self._cursor = cursor
        self.closed = False

    def __iter__(self):
        return self

    def __next__(self):
        return next(self._cursor)

    def close(self) -> None:
        self.closed = True
        self._cursor.close()


class TrackingCollection:
    def __init__(self, collection, cursors: list[TrackingCursor]) -> None:
        self._collection = collection
        self._cursors = cursors

    def find(self, *args, **kwargs):
        cursor = TrackingCursor(self._collection.find(*args, **kwargs))
        self._cursors.append(cursor)
        return cursor

    def __getattr__(self, name):
        return getattr(self._collection, name)


class TrackingDatabase:
    def __init__(self, database) -> None:
        self._database = database
        self.cursors: list[TrackingCursor] = []

    def __getitem__(self, name):
        return TrackingCollection(self._database[name], self.cursors)


class TestMongoCursorLifecycle:
    def test_cursor_closed_when_iteration_stops_early(self, database):
        tracking = TrackingDatabase(database)
        store = MongoDocumentStore(tracking)
        for i in range(3):
            store.insert("K", {"n": i})

        pages = store.run_query(EntityQuery(kind="K", page_size=1))
        assert len(next(pages)) == 1
        pages.close()
        assert [cursor.closed for cursor in tracking.cursors] == [True]

    def test_cursor_closed_after_exhaustion(self, database):
        tracking = TrackingDatabase(database)
        store = MongoDocumentStore(tracking)
        store.insert("K", {"n": 1})

        assert sum(len(page) for page in store.run_query(EntityQuery(kind="K", page_size=1))) == 1
        assert tracking.cursors[0].closed is True


class TestMongoDocumentStore:
    def test_protocol_compliance(self, mongo_store):
        assert isinstance(mongo_store, DocumentStoreClient)

    def test_insert_uses_collection_per_kind(self, mongo_store, database):
        key = mongo_store.insert("CacheEntry", {"a": 1})
        assert key[0] == "CacheEntry"
        assert database["CacheEntry"].count_documents({}) == 1

    def test_insert_does_not_mutate_properties(self, mongo_store):
        properties = {"a": 1}
        mongo_store.insert("CacheEntry", properties)
        assert "_id" not in properties

    def test_put_named_upserts(self, mongo_store, database):
        mongo_store.put_named("CacheEntry", "name", {"v": 1})
        key = mongo_store.put_named("CacheEntry", "name", {"v": 2})
        assert key == ("CacheEntry", "name")
        assert database["CacheEntry"].find_one({"_id": "name"})["v"] == 2

    def test_filters(self, mongo_store):
        mongo_store.insert("K", {"ns": "a", "tags": ["x", "y"], "ttl": 5})
        mongo_store.insert("K", {"ns": "a", "tags": ["y"], "ttl": 50})
        mongo_store.insert("K", {"ns": "b", "tags": ["y"], "ttl": 5})

        by_tag = EntityQuery(kind="K", filters=(PropertyFilter.eq("ns", "a"), PropertyFilter.eq("tags", "y")))
        assert len(_all(mongo_store, by_tag)) == 2

        expired = EntityQuery(kind="K", filters=(PropertyFilter.eq("ns", "a"), PropertyFilter.le("ttl", 10)))
        assert [e.properties["ttl"] for e in _all(mongo_store, expired)] == [5]

    def test_pages(self, mongo_store):
        for i in range(7):
            mongo_store.insert("K", {"n": i})
        pages = list(mongo_store.run_query(EntityQuery(kind="K", page_size=3)))
        assert [len(p) for p in pages] == [3, 3, 1]

    def test_limit(self, mongo_store):
        for i in range(7):
            mongo_store.insert("K", {"n": i})
        assert len(_all(mongo_store, EntityQuery(kind="K", limit=2))) == 2

    def test_keys_only(self, mongo_store):
        key = mongo_store.insert("K", {"data": b"payload"})
        [entity] = _all(mongo_store, EntityQuery(kind="K", keys_only=True))
        assert entity.key == key
        assert entity.properties == {}

    def test_delete_and_delete_batch(self, mongo_store, database):
        keys = [mongo_store.insert("K", {"n": i}) for i in range(5)]
        mongo_store.delete(keys[0])
        mongo_store.delete_batch(keys[1:4])
        assert database["K"].count_documents({}) == 1


class TestMongoErrorTranslation:
    def test_duplicate_key(self):
        store = MongoDocumentStore(FailingDatabase(DuplicateKeyError("dup")))
        with pytest.raises(StoreWriteError) as exc_info:
            store.insert("K", {})
        assert exc_info.value.code == "ALREADY_EXISTS"

    def test_insert_failure(self):
        store = MongoDocumentStore(FailingDatabase(PyMongoError("down")))
        with pytest.raises(StoreWriteError) as exc_info:
            store.insert("K", {})
        assert exc_info.value.code == "WRITE_FAILED"

    def test_upsert_failure(self):
        store = MongoDocumentStore(FailingDatabase(PyMongoError("down")))
        with pytest.raises(StoreWriteError):
            store.put_named("K", "n", {})

    def test_query_failure(self):
        store = MongoDocumentStore(FailingDatabase(PyMongoError("down")))
        with pytest.raises(StoreReadError):
            list(store.run_query(EntityQuery(kind="K")))

    def test_delete_failures(self):
        store = MongoDocumentStore(FailingDatabase(PyMongoError("down")))
        with pytest.raises(StoreWriteError):
            store.delete(("K", 1))
        with pytest.raises(StoreWriteError) as exc_info:
            store.delete_batch([("K", 1), ("K", 2)])
        assert exc_info.value.code == "DELETE_FAILED"

    def test_from_settings_requires_uri_and_database(self):
        with pytest.raises(ConfigurationError):
            MongoDocumentStore.from_settings({"uri": "mongodb://localhost:27017"})


class TestBackendOnMongo:
    @pytest.fixture
    def backend(self, mongo_store, clock):
        return DocumentStoreCacheBackend(mongo_store, namespace="app", page_size=2, compression_level=6, clock=clock)

    def test_round_trip(self, backend):
        backend.set("key", b"\x00binary\xff" * 50, ["t"])
        assert backend.get("key") == b"\x00binary\xff" * 50
        assert backend.has("key") is True
        assert backend.remove("key") is True
        assert backend.remove("key") is False

    def test_tag_scenario(self, backend):
        backend.set("a", b"x", ["t1", "t2"])
        backend.set("b", b"y", ["t2"])
        backend.set("c", b"z", [])
        assert set(backend.find_identifiers_by_tag("t2")) == {"a", "b"}
        assert backend.flush_by_tag("t2") == 1
        assert backend.has("a") is False
        assert backend.has("b") is False
        assert backend.has("c") is True

    def test_garbage_collection(self, backend, clock):
        backend.set("forever", b"x", lifetime=0)
        backend.set("short", b"x", lifetime=1)
        clock.advance(10_000_000)
        assert backend.collect_garbage() == 1
        assert backend.has("forever") is True
        assert backend.has("short") is False

    def test_flush_is_namespace_scoped(self, mongo_store, backend, clock):
        other = DocumentStoreCacheBackend(mongo_store, namespace="other", clock=clock)
        for i in range(5):
            backend.set(f"k{i}", b"x")
        other.set("k0", b"y")
        backend.flush()
        assert not any(backend.has(f"k{i}") for i in range(5))
        assert other.get("k0") == b"y"

    def test_atomic_set(self, mongo_store, database, clock):
        backend = DocumentStoreCacheBackend(mongo_store, namespace="app", atomic_set=True, clock=clock)
        backend.set("key", b"one")
        backend.set("key", b"two")
        assert database["CacheEntry"].count_documents({}) == 1
        assert database["CacheEntry"].find_one({"_id": "app:entry:key"}) is not None
        assert backend.get("key") == b"two"
