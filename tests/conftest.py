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
"""Shared fixtures: a controllable clock and a spying in-memory store."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from typing import Any

import pytest

from dscache.cache.backend import DocumentStoreCacheBackend
from dscache.kernel.exceptions import StoreReadError, StoreWriteError
from dscache.store.adapters.memory import InMemoryDocumentStore
from dscache.store.types import EntityQuery, StoredEntity

START_TIME = 1_700_000_000.0


class FakeClock:
    """Manually advanced unix clock."""

    def __init__(self, now: float = START_TIME) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class SpyStore(InMemoryDocumentStore):
    """InMemoryDocumentStore that records calls and can inject failures or hooks."""

    def __init__(self) -> None:
        super().__init__()
        self.batch_sizes: list[int] = []
        self.single_deletes = 0
        self.inserts = 0
        self.queries: list[EntityQuery] = []
        self.fail_batch_on_call: int | None = None
        self.fail_insert = False
        self.fail_query = False
        self.before_write: Callable[[], None] | None = None
        self.after_batch: Callable[[int], None] | None = None

    def reset_counters(self) -> None:
        self.batch_sizes.clear()
        self.single_deletes = 0
        self.inserts = 0
        self.queries.clear()

    @property
    def batch_calls(self) -> int:
        return len(self.batch_sizes)

    def insert(self, kind: str, properties: dict[str, Any], exclude_from_indexes: Iterable[str] = ()) -> Any:
        if self.before_write is not None:
            self.before_write()
        if self.fail_insert:
            raise StoreWriteError("insert rejected", code="WRITE_FAILED")
        self.inserts += 1
        return super().insert(kind, properties, exclude_from_indexes)

    def put_named(
        self, kind: str, name: str, properties: dict[str, Any], exclude_from_indexes: Iterable[str] = ()
    ) -> Any:
        if self.before_write is not None:
            self.before_write()
        return super().put_named(kind, name, properties, exclude_from_indexes)

    def run_query(self, query: EntityQuery) -> Iterator[list[StoredEntity]]:
        self.queries.append(query)
        if self.fail_query:
            raise StoreReadError("query failed", code="READ_FAILED")
        return super().run_query(query)

    def delete(self, key: Any) -> None:
        self.single_deletes += 1
        super().delete(key)

    def delete_batch(self, keys: list[Any]) -> None:
        if self.fail_batch_on_call is not None and self.batch_calls + 1 >= self.fail_batch_on_call:
            raise StoreWriteError("batch delete failed", code="DELETE_FAILED")
        self.batch_sizes.append(len(keys))
        super().delete_batch(keys)
        if self.after_batch is not None:
            self.after_batch(self.batch_calls)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> SpyStore:
    return SpyStore()


@pytest.fixture
def backend(store: SpyStore, clock: FakeClock) -> DocumentStoreCacheBackend:
    return DocumentStoreCacheBackend(store, namespace="app", page_size=3, clock=clock)
