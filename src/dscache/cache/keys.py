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
"""Fully qualified cache identifiers."""

from __future__ import annotations

from dscache.kernel.exceptions import ConfigurationError, InvalidEntryIdentifierError

SEPARATOR = ":"
ENTRY_SEGMENT = "entry"


class KeyScheme:
    """Builds cache identifiers of the form ``<namespace>:entry:<identifier>``.

    The mapping is pure, so the same logical identifier always resolves to
    the same cache identifier within a namespace, and identifiers from
    different namespaces never collide.
    """

    def __init__(self, namespace: str) -> None:
        if not namespace or not namespace.strip():
            raise ConfigurationError("Cache namespace must not be empty", context={"field": "namespace"})
        self._namespace = namespace
        self._prefix = f"{namespace}{SEPARATOR}{ENTRY_SEGMENT}{SEPARATOR}"

    @property
    def namespace(self) -> str:
        return self._namespace

    def build_key(self, entry_identifier: str) -> str:
        """Return the cache identifier for *entry_identifier*."""
        if not entry_identifier:
            raise InvalidEntryIdentifierError("Entry identifier must not be empty", code="INVALID_IDENTIFIER")
        return self._prefix + entry_identifier

    def strip_key(self, cache_identifier: str) -> str:
        """Inverse of :meth:`build_key`."""
        if not cache_identifier.startswith(self._prefix):
            raise InvalidEntryIdentifierError(
                f"'{cache_identifier}' does not belong to namespace '{self._namespace}'",
                code="FOREIGN_IDENTIFIER",
                context={"namespace": self._namespace},
            )
        return cache_identifier[len(self._prefix) :]
