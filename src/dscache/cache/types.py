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
"""The persisted cache entry and its property names."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

CACHE_IDENTIFIER = "cacheIdentifier"
CACHE_NAMESPACE = "cacheNamespace"
CREATION_DATETIME = "creationDatetime"
TTL_DATETIME = "ttlDatetime"
EXPIRES = "expires"
TAGS = "tags"
DATA = "data"

# Payloads can be large and are never queried.
UNINDEXED_PROPERTIES: tuple[str, ...] = (DATA,)


@dataclass(frozen=True)
class CacheEntry:
    """One cache entry as stored in the document store.

    An entry with ``lifetime == 0`` never expires: ``expires`` is ``False``
    and ``ttl_datetime`` is ``None``. Garbage collection filters on
    ``expires``, so such entries cannot match an expiry query whatever the
    current time is.
    """

    cache_identifier: str
    namespace: str
    creation_datetime: int
    ttl_datetime: int | None
    tags: tuple[str, ...] = ()
    data: bytes = b""

    @property
    def expires(self) -> bool:
        return self.ttl_datetime is not None

    @classmethod
    def create(
        cls,
        cache_identifier: str,
        namespace: str,
        data: bytes,
        tags: tuple[str, ...],
        lifetime: int,
        now: int,
    ) -> CacheEntry:
        return cls(
            cache_identifier=cache_identifier,
            namespace=namespace,
            creation_datetime=now,
            ttl_datetime=now + lifetime if lifetime > 0 else None,
            tags=tags,
            data=data,
        )

    def to_properties(self) -> dict[str, Any]:
        return {
            CACHE_IDENTIFIER: self.cache_identifier,
            CACHE_NAMESPACE: self.namespace,
            CREATION_DATETIME: self.creation_datetime,
            TTL_DATETIME: self.ttl_datetime,
            EXPIRES: self.expires,
            TAGS: list(self.tags),
            DATA: self.data,
        }

    @classmethod
    def from_properties(cls, properties: dict[str, Any]) -> CacheEntry:
        return cls(
            cache_identifier=properties[CACHE_IDENTIFIER],
            namespace=properties.get(CACHE_NAMESPACE, ""),
            creation_datetime=properties.get(CREATION_DATETIME, 0),
            ttl_datetime=properties.get(TTL_DATETIME) if properties.get(EXPIRES, True) else None,
            tags=tuple(properties.get(TAGS) or ()),
            data=bytes(properties.get(DATA) or b""),
        )
