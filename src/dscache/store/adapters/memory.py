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
"""In-memory document store adapter."""

from __future__ import annotations

import copy
import itertools
import threading
from collections.abc import Iterable, Iterator
from typing import Any

from dscache.store.types import EntityQuery, StoredEntity

MemoryKey = tuple[str, int | str]


class InMemoryDocumentStore:
    """Dict-backed document store.

    Suitable for development, testing and single-process applications.
    Each call is atomic under an internal lock. Queries read a snapshot
    taken when iteration starts, so writes made while a caller is walking
    pages are not visible to that walk.
    """

    def __init__(self) -> None:
        self._entities: dict[MemoryKey, dict[str, Any]] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def insert(
        self, kind: str, properties: dict[str, Any], exclude_from_indexes: Iterable[str] = ()
    ) -> MemoryKey:
        """Store a new entity under an allocated numeric id."""
        with self._lock:
            key: MemoryKey = (kind, next(self._ids))
            self._entities[key] = copy.deepcopy(properties)
        return key

    def put_named(
        self, kind: str, name: str, properties: dict[str, Any], exclude_from_indexes: Iterable[str] = ()
    ) -> MemoryKey:
        """Insert or replace the entity named *name*."""
        key: MemoryKey = (kind, name)
        with self._lock:
            self._entities[key] = copy.deepcopy(properties)
        return key

    def run_query(self, query: EntityQuery) -> Iterator[list[StoredEntity]]:
        """Yield matching entities in pages of ``query.page_size``."""
        with self._lock:
            matches = [
                StoredEntity(key=key, properties={} if query.keys_only else copy.deepcopy(props))
                for key, props in self._entities.items()
                if key[0] == query.kind and query.matches(props)
            ]
        if query.limit is not None:
            matches = matches[: query.limit]

        for start in range(0, len(matches), query.page_size):
            yield matches[start : start + query.page_size]

    def delete(self, key: MemoryKey) -> None:
        """Remove one entity. Missing keys are ignored."""
        with self._lock:
            self._entities.pop(key, None)

    def delete_batch(self, keys: list[MemoryKey]) -> None:
        """Remove several entities in one call."""
        with self._lock:
            for key in keys:
                self._entities.pop(key, None)

    def count(self, kind: str | None = None) -> int:
        """Number of stored entities, optionally restricted to one kind."""
        with self._lock:
            if kind is None:
                return len(self._entities)
            return sum(1 for k in self._entities if k[0] == kind)

    def clear(self) -> None:
        """Remove all entities of every kind."""
        with self._lock:
            self._entities.clear()
