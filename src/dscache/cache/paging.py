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
"""Page-wise bulk deletion and collection over store queries.

Tag flushes, garbage collection and full flushes all delete result sets of
unbounded size. They share :func:`delete_in_pages`, which holds at most one
page of keys in memory and issues exactly one batch delete per page.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TypeVar

import structlog

from dscache.kernel.exceptions import PartialDeletionError, StoreException
from dscache.store.ports.outbound import DocumentStoreClient
from dscache.store.types import EntityQuery, StoredEntity

T = TypeVar("T")

logger = structlog.get_logger("dscache.cache.paging")


def delete_in_pages(store: DocumentStoreClient, query: EntityQuery) -> int:
    """Delete every entity matched by *query*, one batch per page.

    Returns:
        The number of pages deleted.

    Raises:
        PartialDeletionError: if the store fails after at least one page
            was deleted. Deleted pages stay deleted.
        StoreException: if the store fails before anything was deleted.
    """
    pages_deleted = 0
    try:
        for page in store.run_query(query):
            if not page:
                break
            store.delete_batch([entity.key for entity in page])
            pages_deleted += 1
    except StoreException as exc:
        if pages_deleted == 0:
            raise
        logger.warning(
            "paged_delete_interrupted",
            kind=query.kind,
            pages_deleted=pages_deleted,
            error=str(exc),
        )
        raise PartialDeletionError(
            f"Bulk delete failed after {pages_deleted} page(s): {exc}",
            pages_deleted=pages_deleted,
            context={"kind": query.kind},
        ) from exc
    return pages_deleted


def collect_from_pages(
    store: DocumentStoreClient, query: EntityQuery, extract: Callable[[StoredEntity], T]
) -> list[T]:
    """Read every page of *query* and return ``extract(entity)`` for each match.

    Results keep page order, then order within the page. The whole result
    set is materialized.
    """
    collected: list[T] = []
    for page in store.run_query(query):
        if not page:
            break
        collected.extend(extract(entity) for entity in page)
    return collected
