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
"""Taggable cache backend protocol."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol, runtime_checkable


@runtime_checkable
class TaggableCacheBackend(Protocol):
    """Cache backend contract exposed to the host caching framework.

    ``get`` returns ``None`` on a miss. ``flush_by_tag`` and
    ``flush_by_tags`` return a count that is positive when something was
    removed; it is not an exact entry count.
    """

    def set(self, entry_identifier: str, data: bytes | str, tags: Iterable[str] = (), lifetime: int | None = None) -> None: ...

    def get(self, entry_identifier: str) -> bytes | None: ...

    def has(self, entry_identifier: str) -> bool: ...

    def remove(self, entry_identifier: str) -> bool: ...

    def flush(self) -> None: ...

    def collect_garbage(self) -> int: ...

    def flush_by_tag(self, tag: str) -> int: ...

    def flush_by_tags(self, tags: Iterable[str]) -> int: ...

    def find_identifiers_by_tag(self, tag: str) -> list[str]: ...
