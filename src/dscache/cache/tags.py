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
"""Tag lookups and tag-based invalidation."""

from __future__ import annotations

from collections.abc import Iterable

import structlog

from dscache.cache.paging import collect_from_pages, delete_in_pages
from dscache.cache.types import CACHE_IDENTIFIER, CACHE_NAMESPACE, TAGS
from dscache.store.ports.outbound import DocumentStoreClient
from dscache.store.types import EntityQuery, PropertyFilter

logger = structlog.get_logger("dscache.cache.tags")


class TagIndex:
    """Finds and deletes entries of one namespace by tag.

    There is no separate tag index: queries filter the entries' ``tags``
    array directly.
    """

    def __init__(self, store: DocumentStoreClient, kind: str, namespace: str, page_size: int) -> None:
        self._store = store
        self._kind = kind
        self._namespace = namespace
        self._page_size = page_size

    def _tag_query(self, tag: str, keys_only: bool) -> EntityQuery:
        return EntityQuery(
            kind=self._kind,
            filters=(
                PropertyFilter.eq(CACHE_NAMESPACE, self._namespace),
                PropertyFilter.eq(TAGS, tag),
            ),
            keys_only=keys_only,
            page_size=self._page_size,
        )

    def flush_by_tag(self, tag: str) -> int:
        """Delete all entries tagged *tag*.

        Returns the number of result pages deleted, not the number of
        entries: any positive value means something was removed.
        """
        pages = delete_in_pages(self._store, self._tag_query(tag, keys_only=True))
        logger.info("cache_flushed_by_tag", namespace=self._namespace, tag=tag, pages=pages)
        return pages

    def flush_by_tags(self, tags: Iterable[str]) -> int:
        """Flush each tag in turn; returns the summed page count."""
        return sum(self.flush_by_tag(tag) for tag in tags)

    def find_identifiers_by_tag(self, tag: str) -> list[str]:
        """Cache identifiers of all entries tagged *tag*, page by page."""
        return collect_from_pages(
            self._store,
            self._tag_query(tag, keys_only=False),
            lambda entity: entity.properties[CACHE_IDENTIFIER],
        )
