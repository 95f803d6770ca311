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
"""Expired entry garbage collection."""

from __future__ import annotations

from collections.abc import Callable

import structlog

from dscache.cache.paging import delete_in_pages
from dscache.cache.types import CACHE_NAMESPACE, EXPIRES, TTL_DATETIME
from dscache.store.ports.outbound import DocumentStoreClient
from dscache.store.types import EntityQuery, PropertyFilter

logger = structlog.get_logger("dscache.cache.sweeper")


class ExpirySweeper:
    """Deletes entries whose TTL has elapsed.

    The query requires ``expires == True``; entries stored with unlimited
    lifetime carry ``expires == False`` and are never matched. Scheduling
    is up to the host.
    """

    def __init__(
        self,
        store: DocumentStoreClient,
        kind: str,
        namespace: str,
        page_size: int,
        clock: Callable[[], float],
    ) -> None:
        self._store = store
        self._kind = kind
        self._namespace = namespace
        self._page_size = page_size
        self._clock = clock

    def collect_garbage(self) -> int:
        """Delete expired entries; returns the number of pages deleted."""
        now = int(self._clock())
        query = EntityQuery(
            kind=self._kind,
            filters=(
                PropertyFilter.eq(CACHE_NAMESPACE, self._namespace),
                PropertyFilter.eq(EXPIRES, True),
                PropertyFilter.le(TTL_DATETIME, now),
            ),
            keys_only=True,
            page_size=self._page_size,
        )
        pages = delete_in_pages(self._store, query)
        if pages:
            logger.info("cache_garbage_collected", namespace=self._namespace, pages=pages, now=now)
        return pages
