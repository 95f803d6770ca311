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
"""Build a cache backend from configuration."""

from __future__ import annotations

import time
from collections.abc import Callable

import structlog

from dscache.cache.backend import DocumentStoreCacheBackend
from dscache.config.properties.cache import CacheBackendProperties
from dscache.core.config import Config
from dscache.kernel.exceptions import ConfigurationError
from dscache.store.ports.outbound import DocumentStoreClient

logger = structlog.get_logger("dscache.cache.auto_configuration")


def create_store(properties: CacheBackendProperties) -> DocumentStoreClient:
    """Instantiate the document store adapter named by ``properties.store``."""
    if properties.store == "mongodb":
        from dscache.store.adapters.mongodb import MongoDocumentStore

        return MongoDocumentStore.from_settings(properties.mongodb)

    from dscache.store.adapters.memory import InMemoryDocumentStore

    return InMemoryDocumentStore()


def create_cache_backend(
    config: Config,
    store: DocumentStoreClient | None = None,
    clock: Callable[[], float] = time.time,
) -> DocumentStoreCacheBackend:
    """Bind ``dscache.cache.*``, validate it and build the backend.

    A *store* passed in takes precedence over the configured store type.

    Raises:
        ConfigurationError: before any store call, if the settings are invalid.
    """
    try:
        properties = config.bind(CacheBackendProperties)
    except ValueError as exc:
        raise ConfigurationError(f"Invalid cache configuration: {exc}") from exc
    properties.validate()

    if store is None:
        store = create_store(properties)

    backend = DocumentStoreCacheBackend.from_properties(properties, store, clock=clock)
    logger.info(
        "cache_backend_created",
        namespace=properties.namespace,
        entity_kind=properties.entity_kind,
        store=type(store).__name__,
        compression_level=properties.compression_level,
        atomic_set=properties.atomic_set,
        config_sources=config.loaded_sources,
    )
    return backend
