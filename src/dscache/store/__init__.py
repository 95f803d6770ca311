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
"""dscache Store — document store port, query types and adapters."""

from dscache.store.adapters.memory import InMemoryDocumentStore
from dscache.store.ports.outbound import DocumentStoreClient
from dscache.store.types import EntityQuery, PropertyFilter, StoredEntity

__all__ = [
    "DocumentStoreClient",
    "EntityQuery",
    "InMemoryDocumentStore",
    "PropertyFilter",
    "StoredEntity",
]
