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
"""MongoDB document store adapter built on pymongo."""

from __future__ import annotations

import itertools
from collections import defaultdict
from collections.abc import Iterable, Iterator
from typing import Any

import pymongo
import structlog
from pymongo.errors import DuplicateKeyError, PyMongoError

from dscache.kernel.exceptions import ConfigurationError, StoreReadError, StoreWriteError
from dscache.store.types import EntityQuery, PropertyFilter, StoredEntity

logger = structlog.get_logger("dscache.store.mongodb")

MongoKey = tuple[str, Any]


class MongoDocumentStore:
    """Document store adapter for a ``pymongo`` database.

    Each entity kind maps to one collection. Keys handed out by this adapter
    are ``(collection, _id)`` tuples. Pages are read from a single server-side
    cursor, so deleting a page does not shift the ones after it.

    Indexes on ``cacheIdentifier``, ``cacheNamespace``, ``tags`` and
    ``ttlDatetime`` are recommended but not created here.
    """

    def __init__(self, database: Any) -> None:
        self._db = database

    @classmethod
    def from_settings(cls, settings: dict[str, Any]) -> MongoDocumentStore:
        """Build from ``uri`` and ``database`` settings."""
        uri = settings.get("uri")
        database = settings.get("database")
        if not uri or not database:
            raise ConfigurationError(
                "MongoDB store requires both 'uri' and 'database'",
                context={"field": "mongodb"},
            )
        client: pymongo.MongoClient = pymongo.MongoClient(uri)
        return cls(client[database])

    def insert(
        self, kind: str, properties: dict[str, Any], exclude_from_indexes: Iterable[str] = ()
    ) -> MongoKey:
        """Insert a new document with a generated ``_id``."""
        try:
            result = self._db[kind].insert_one(dict(properties))
        except DuplicateKeyError as exc:
            raise StoreWriteError(
                f"Document already exists: {exc}", code="ALREADY_EXISTS", context={"kind": kind}
            ) from exc
        except PyMongoError as exc:
            raise StoreWriteError(
                f"MongoDB insert failed: {exc}", code="WRITE_FAILED", context={"kind": kind}
            ) from exc
        return (kind, result.inserted_id)

    def put_named(
        self, kind: str, name: str, properties: dict[str, Any], exclude_from_indexes: Iterable[str] = ()
    ) -> MongoKey:
        """Insert or replace the document whose ``_id`` is *name*."""
        try:
            self._db[kind].replace_one({"_id": name}, dict(properties), upsert=True)
        except PyMongoError as exc:
            raise StoreWriteError(
                f"MongoDB upsert failed: {exc}", code="WRITE_FAILED", context={"kind": kind}
            ) from exc
        return (kind, name)

    def run_query(self, query: EntityQuery) -> Iterator[list[StoredEntity]]:
        """Yield result pages of at most ``query.page_size`` documents."""
        projection = {"_id": 1} if query.keys_only else None
        try:
            cursor = self._db[query.kind].find(
                self._compile_filters(query.filters),
                projection,
                limit=query.limit or 0,
                batch_size=query.page_size,
            )
        except PyMongoError as exc:
            raise StoreReadError(
                f"MongoDB query failed: {exc}", code="READ_FAILED", context={"kind": query.kind}
            ) from exc

        try:
            while True:
                try:
                    documents = list(itertools.islice(cursor, query.page_size))
                except PyMongoError as exc:
                    raise StoreReadError(
                        f"MongoDB query failed: {exc}", code="READ_FAILED", context={"kind": query.kind}
                    ) from exc
                if not documents:
                    return
                yield [self._to_entity(query, document) for document in documents]
        finally:
            cursor.close()

    @staticmethod
    def _to_entity(query: EntityQuery, document: dict[str, Any]) -> StoredEntity:
        doc_id = document.pop("_id")
        return StoredEntity(key=(query.kind, doc_id), properties={} if query.keys_only else document)

    @staticmethod
    def _compile_filters(filters: tuple[PropertyFilter, ...]) -> dict[str, Any]:
        """Translate filters into a MongoDB filter document."""
        clauses: list[dict[str, Any]] = []
        for f in filters:
            if f.operator == "=":
                clauses.append({f.name: f.value})
            else:
                clauses.append({f.name: {"$lte": f.value}})
        if not clauses:
            return {}
        if len(clauses) == 1:
            return clauses[0]
        return {"$and": clauses}

    def delete(self, key: MongoKey) -> None:
        kind, doc_id = key
        try:
            self._db[kind].delete_one({"_id": doc_id})
        except PyMongoError as exc:
            raise StoreWriteError(
                f"MongoDB delete failed: {exc}", code="DELETE_FAILED", context={"kind": kind}
            ) from exc

    def delete_batch(self, keys: list[MongoKey]) -> None:
        """Delete documents with one ``delete_many`` per collection."""
        by_kind: dict[str, list[Any]] = defaultdict(list)
        for kind, doc_id in keys:
            by_kind[kind].append(doc_id)

        for kind, ids in by_kind.items():
            try:
                self._db[kind].delete_many({"_id": {"$in": ids}})
            except PyMongoError as exc:
                raise StoreWriteError(
                    f"MongoDB batch delete failed: {exc}",
                    code="DELETE_FAILED",
                    context={"kind": kind, "batch_size": len(ids)},
                ) from exc
            logger.debug("mongodb_batch_deleted", kind=kind, batch_size=len(ids))
