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
"""dscache Cache — taggable cache backend on a document store."""

from dscache.cache.auto_configuration import create_cache_backend
from dscache.cache.backend import DocumentStoreCacheBackend
from dscache.cache.codec import CompressionCodec
from dscache.cache.keys import KeyScheme
from dscache.cache.paging import collect_from_pages, delete_in_pages
from dscache.cache.ports.outbound import TaggableCacheBackend
from dscache.cache.sweeper import ExpirySweeper
from dscache.cache.tags import TagIndex
from dscache.cache.types import CacheEntry

__all__ = [
    "CacheEntry",
    "CompressionCodec",
    "DocumentStoreCacheBackend",
    "ExpirySweeper",
    "KeyScheme",
    "TagIndex",
    "TaggableCacheBackend",
    "collect_from_pages",
    "create_cache_backend",
    "delete_in_pages",
]
