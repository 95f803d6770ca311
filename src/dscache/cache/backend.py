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
"""Taggable cache backend on top of a document store."""

from __future__ import annotations

import time
from collections.abc import Callable, Iterable
from typing import Any

import structlog

from dscache.cache.codec import CompressionCodec
from dscache.cache.keys import KeyScheme
from dscache.cache.paging import delete_in_pages
from dscache.cache.sweeper import ExpirySweeper
from dscache.cache.tags import TagIndex
from dscache.cache.types import CACHE_IDENTIFIER, CACHE_NAMESPACE, UNINDEXED_PROPERTIES, CacheEntry
from dscache.config.properties.cache import CacheBackendProperties
from dscache.kernel.exceptions import ConfigurationError, InvalidLifetimeError
from dscache.store.ports.outbound import DocumentStoreClient
from dscache.store.types import EntityQuery, PropertyFilter

logger = structlog.get_logger("dscache.cache.backend")


class DocumentStoreCacheBackend:
    """Cache backend storing one document per entry in a single entity kind.

    The store offers no unique constraint on ``cacheIdentifier``, so ``set``
    removes existing entries before inserting the new one. Between those two
    calls a concurrent reader sees a miss, and a crash leaves the entry
    absent until the next ``set``. With ``atomic_set`` enabled the entry is
    written with a keyed upsert instead, which closes that window.

    Bulk operations (``flush``, ``flush_by_tag``, ``collect_garbage``) walk
    result pages one at a time and are not atomic across pages: an entry
    written concurrently may or may not be removed.

    Args:
        store: Document store client.
        namespace: Cache identifier prefix; all queries are scoped to it.
        entity_kind: Entity kind (collection) holding the entries.
        compression_level: 0 stores payloads raw, 1-9 gzips them.
        default_lifetime: Lifetime in seconds used when ``set`` gets none;
            0 means unlimited.
        page_size: Page size for bulk queries.
        atomic_set: Write entries with a keyed upsert.
        clock: Returns the current unix time in seconds.
    """

    def __init__(
        self,
        store: DocumentStoreClient,
        namespace: str,
        entity_kind: str = "CacheEntry",
        compression_level: int = 0,
        default_lifetime: int = 3600,
        page_size: int = 500,
        atomic_set: bool = False,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if not entity_kind or not entity_kind.strip():
            raise ConfigurationError("Entity kind must not be empty", context={"field": "entity_kind"})
        if default_lifetime < 0:
            raise ConfigurationError(
                f"Default lifetime must be >= 0, got {default_lifetime}",
                context={"field": "default_lifetime"},
            )
        if page_size < 1:
            raise ConfigurationError(f"Page size must be >= 1, got {page_size}", context={"field": "page_size"})

        self._store = store
        self._keys = KeyScheme(namespace)
        self._codec = CompressionCodec(compression_level)
        self._kind = entity_kind
        self._default_lifetime = default_lifetime
        self._page_size = page_size
        self._atomic_set = atomic_set
        self._clock = clock
        self._tags = TagIndex(store, entity_kind, namespace, page_size)
        self._sweeper = ExpirySweeper(store, entity_kind, namespace, page_size, clock)

    @classmethod
    def from_properties(
        cls,
        properties: CacheBackendProperties,
        store: DocumentStoreClient,
        clock: Callable[[], float] = time.time,
    ) -> DocumentStoreCacheBackend:
        """Create a backend from validated configuration properties."""
        properties.validate()
        return cls(
            store,
            namespace=properties.namespace,
            entity_kind=properties.entity_kind,
            compression_level=properties.compression_level,
            default_lifetime=properties.default_lifetime,
            page_size=properties.page_size,
            atomic_set=properties.atomic_set,
            clock=clock,
        )

    @property
    def namespace(self) -> str:
        return self._keys.namespace

    @property
    def default_lifetime(self) -> int:
        return self._default_lifetime

    @default_lifetime.setter
    def default_lifetime(self, lifetime: int) -> None:
        if lifetime < 0:
            raise InvalidLifetimeError(f"Lifetime must be >= 0, got {lifetime}", code="INVALID_LIFETIME")
        self._default_lifetime = lifetime

    def _identifier_query(self, cache_identifier: str, *, keys_only: bool, limit: int | None = None) -> EntityQuery:
        return EntityQuery(
            kind=self._kind,
            filters=(PropertyFilter.eq(CACHE_IDENTIFIER, cache_identifier),),
            limit=limit,
            keys_only=keys_only,
            page_size=self._page_size,
        )

    # -------------------------------------------------------------------------
    # Entry operations
    # -------------------------------------------------------------------------

    def set(
        self,
        entry_identifier: str,
        data: bytes | str,
        tags: Iterable[str] = (),
        lifetime: int | None = None,
    ) -> None:
        """Store *data* under *entry_identifier*, replacing any previous entry.

        Args:
            entry_identifier: Logical identifier of the entry.
            data: Payload; ``str`` is stored UTF-8 encoded.
            tags: Tags to associate with the entry.
            lifetime: Lifetime in seconds. ``None`` uses the default
                lifetime, 0 means unlimited.

        Raises:
            StoreWriteError: if the store rejects the write.
        """
        cache_identifier = self._keys.build_key(entry_identifier)
        if lifetime is None:
            lifetime = self._default_lifetime
        if lifetime < 0:
            raise InvalidLifetimeError(
                f"Lifetime must be >= 0, got {lifetime}",
                code="INVALID_LIFETIME",
                context={"entry_identifier": entry_identifier},
            )
        # a bare string is one tag, not a sequence of characters
        tags = (tags,) if isinstance(tags, str) else tuple(tags)

        if not self._atomic_set:
            self.remove(entry_identifier)

        if isinstance(data, str):
            data = data.encode("utf-8")
        entry = CacheEntry.create(
            cache_identifier=cache_identifier,
            namespace=self._keys.namespace,
            data=self._codec.compress(data),
            tags=tags,
            lifetime=lifetime,
            now=int(self._clock()),
        )

        if self._atomic_set:
            key = self._store.put_named(self._kind, cache_identifier, entry.to_properties(), UNINDEXED_PROPERTIES)
            self._remove_duplicates(cache_identifier, keep=key)
        else:
            self._store.insert(self._kind, entry.to_properties(), UNINDEXED_PROPERTIES)

        logger.debug("cache_entry_set", cache_identifier=cache_identifier, lifetime=lifetime, tags=list(entry.tags))

    def _remove_duplicates(self, cache_identifier: str, keep: Any) -> None:
        for page in self._store.run_query(self._identifier_query(cache_identifier, keys_only=True)):
            for entity in page:
                if entity.key != keep:
                    self._store.delete(entity.key)

    def get(self, entry_identifier: str) -> bytes | None:
        """Return the payload stored under *entry_identifier*, or ``None`` on a miss.

        Raises:
            DecodeError: if the stored payload is corrupt.
        """
        cache_identifier = self._keys.build_key(entry_identifier)
        query = self._identifier_query(cache_identifier, keys_only=False, limit=1)
        page = next(iter(self._store.run_query(query)), [])
        if not page:
            logger.debug("cache_miss", cache_identifier=cache_identifier)
            return None
        entry = CacheEntry.from_properties(page[0].properties)
        return self._codec.decompress(entry.data)

    def has(self, entry_identifier: str) -> bool:
        """Whether an entry exists for *entry_identifier*. No payload is fetched."""
        cache_identifier = self._keys.build_key(entry_identifier)
        query = self._identifier_query(cache_identifier, keys_only=True, limit=1)
        page = next(iter(self._store.run_query(query)), [])
        return bool(page)

    def remove(self, entry_identifier: str) -> bool:
        """Remove every entry stored under *entry_identifier*.

        Usually there is at most one, but leftovers of an interrupted
        ``set`` are removed as well.

        Returns:
            ``True`` if at least one entry was removed, ``False`` if none existed.
        """
        cache_identifier = self._keys.build_key(entry_identifier)
        removed = False
        for page in self._store.run_query(self._identifier_query(cache_identifier, keys_only=True)):
            for entity in page:
                self._store.delete(entity.key)
                removed = True
        return removed

    # -------------------------------------------------------------------------
    # Bulk operations
    # -------------------------------------------------------------------------

    def flush(self) -> None:
        """Remove all entries of this namespace."""
        query = EntityQuery(
            kind=self._kind,
            filters=(PropertyFilter.eq(CACHE_NAMESPACE, self._keys.namespace),),
            keys_only=True,
            page_size=self._page_size,
        )
        pages = delete_in_pages(self._store, query)
        logger.info("cache_flushed", namespace=self._keys.namespace, pages=pages)

    def collect_garbage(self) -> int:
        """Remove expired entries; returns the number of pages deleted."""
        return self._sweeper.collect_garbage()

    def flush_by_tag(self, tag: str) -> int:
        """Remove entries tagged *tag*; returns the number of pages deleted."""
        return self._tags.flush_by_tag(tag)

    def flush_by_tags(self, tags: Iterable[str]) -> int:
        """Remove entries carrying any of *tags*; returns the summed page count."""
        return self._tags.flush_by_tags(tags)

    def find_identifiers_by_tag(self, tag: str) -> list[str]:
        """Logical identifiers of all entries tagged *tag*."""
        return [self._keys.strip_key(ci) for ci in self._tags.find_identifiers_by_tag(tag)]
