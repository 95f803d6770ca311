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
"""Store-neutral query and entity types.

Adapters translate these into the native query API of their document
store. Only the two operators the cache needs are supported.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

Operator = Literal["=", "<="]

OPERATORS: tuple[str, ...] = ("=", "<=")


@dataclass(frozen=True)
class PropertyFilter:
    """A single ``property <operator> value`` condition.

    ``=`` against an array property matches when the array contains
    ``value`` (array membership), as in Datastore and MongoDB.
    """

    name: str
    operator: Operator
    value: Any

    def __post_init__(self) -> None:
        if self.operator not in OPERATORS:
            raise ValueError(f"Unsupported operator '{self.operator}', expected one of {OPERATORS}")

    @staticmethod
    def eq(name: str, value: Any) -> PropertyFilter:
        """Create an equality (or array membership) filter."""
        return PropertyFilter(name=name, operator="=", value=value)

    @staticmethod
    def le(name: str, value: Any) -> PropertyFilter:
        """Create a less-than-or-equal filter."""
        return PropertyFilter(name=name, operator="<=", value=value)

    def matches(self, properties: dict[str, Any]) -> bool:
        """Evaluate the filter against a property dict.

        Missing and ``None`` values never satisfy ``<=``.
        """
        actual = properties.get(self.name)
        if self.operator == "=":
            if isinstance(actual, (list, tuple)):
                return self.value in actual
            return actual == self.value
        if actual is None or isinstance(actual, (list, tuple)):
            return False
        return bool(actual <= self.value)


@dataclass(frozen=True)
class EntityQuery:
    """A query scoped to one entity kind.

    Attributes:
        kind: Entity kind (Datastore kind, MongoDB collection).
        filters: Conditions combined with AND.
        limit: Maximum number of results overall, or ``None`` for all.
        keys_only: Return keys without properties.
        page_size: Maximum number of entities per page.
    """

    kind: str
    filters: tuple[PropertyFilter, ...] = ()
    limit: int | None = None
    keys_only: bool = False
    page_size: int = 500

    def __post_init__(self) -> None:
        if self.page_size < 1:
            raise ValueError(f"page_size must be >= 1, got {self.page_size}")
        if self.limit is not None and self.limit < 1:
            raise ValueError(f"limit must be >= 1, got {self.limit}")

    def matches(self, properties: dict[str, Any]) -> bool:
        """Whether an entity's properties satisfy every filter."""
        return all(f.matches(properties) for f in self.filters)


@dataclass(frozen=True)
class StoredEntity:
    """An entity returned by a query.

    ``key`` is the store's native key and is opaque to callers; it is only
    passed back to ``delete`` / ``delete_batch``. ``properties`` is empty
    for keys-only queries.
    """

    key: Any
    properties: dict[str, Any] = field(default_factory=dict)

    def get(self, name: str, default: Any = None) -> Any:
        return self.properties.get(name, default)
