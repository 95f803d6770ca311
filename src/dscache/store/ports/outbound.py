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
"""Document store client protocol."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Any, Protocol, runtime_checkable

from dscache.store.types import EntityQuery, StoredEntity


@runtime_checkable
class DocumentStoreClient(Protocol):
    """Abstract document store interface consumed by the cache backend.

    All store adapters (Datastore, MongoDB, in-memory) must implement this
    protocol. Failures are reported as ``StoreReadError`` for queries and
    ``StoreWriteError`` for mutations; adapters never retry.
    """

    def insert(
        self, kind: str, properties: dict[str, Any], exclude_from_indexes: Iterable[str] = ()
    ) -> Any: ...

    def put_named(
        self, kind: str, name: str, properties: dict[str, Any], exclude_from_indexes: Iterable[str] = ()
    ) -> Any: ...

    def run_query(self, query: EntityQuery) -> Iterator[list[StoredEntity]]: ...

    def delete(self, key: Any) -> None: ...

    def delete_batch(self, keys: list[Any]) -> None: ...
