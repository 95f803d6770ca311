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
"""Cache backend configuration properties."""

from __future__ import annotations

from dataclasses import dataclass, field

from dscache.core.config import config_properties
from dscache.kernel.exceptions import ConfigurationError

STORE_TYPES = ("memory", "mongodb")


@config_properties(prefix="dscache.cache")
@dataclass
class CacheBackendProperties:
    """Configuration for the document store cache backend (dscache.cache.*).

    ``namespace`` is the cache identifier prefix; every key this backend
    writes starts with it, and flush / tag / garbage collection queries are
    restricted to it. ``default_lifetime`` of 0 means unlimited.
    """

    namespace: str = ""
    store: str = "mongodb"
    entity_kind: str = "CacheEntry"
    compression_level: int = 0
    default_lifetime: int = 3600
    page_size: int = 500
    atomic_set: bool = False
    mongodb: dict = field(default_factory=lambda: {"uri": "mongodb://localhost:27017", "database": "dscache"})

    def validate(self) -> None:
        """Fail fast on settings that would only break at the first store call."""
        if not self.namespace or not self.namespace.strip():
            raise ConfigurationError("Cache namespace must not be empty", context={"field": "namespace"})
        if not self.entity_kind or not self.entity_kind.strip():
            raise ConfigurationError("Entity kind must not be empty", context={"field": "entity_kind"})
        if self.store not in STORE_TYPES:
            raise ConfigurationError(
                f"Unknown store type '{self.store}', expected one of {', '.join(STORE_TYPES)}",
                context={"field": "store"},
            )
        if not 0 <= self.compression_level <= 9:
            raise ConfigurationError(
                f"Compression level must be between 0 and 9, got {self.compression_level}",
                context={"field": "compression_level"},
            )
        if self.default_lifetime < 0:
            raise ConfigurationError(
                f"Default lifetime must be >= 0, got {self.default_lifetime}",
                context={"field": "default_lifetime"},
            )
        if self.page_size < 1:
            raise ConfigurationError(
                f"Page size must be >= 1, got {self.page_size}",
                context={"field": "page_size"},
            )
