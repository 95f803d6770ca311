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
"""Exception hierarchy for dscache.

All errors inherit from DscacheException so that hosts can catch every
backend failure in one place, or target a specific subclass.

Categories:
- ConfigurationError: invalid backend settings, raised before any store call
- Invalid*Error: bad arguments passed to a cache operation
- StoreException: failures reported by the document store
- DecodeError: a stored payload could not be decompressed

A cache miss is not an error: ``get`` returns ``None``.
"""

from __future__ import annotations


# =============================================================================
# Base Exception
# =============================================================================


class DscacheException(Exception):
    """Base exception for all dscache errors.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "WRITE_FAILED").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


# =============================================================================
# Usage Errors
# =============================================================================


class ConfigurationError(DscacheException):
    """Missing or invalid backend configuration."""

    def __init__(self, message: str, context: dict | None = None) -> None:
        super().__init__(message, code="CONFIGURATION", context=context)


class InvalidEntryIdentifierError(DscacheException):
    """Entry identifier is empty or otherwise unusable."""


class InvalidLifetimeError(DscacheException):
    """Lifetime is negative."""


# =============================================================================
# Store Exceptions
# =============================================================================


class StoreException(DscacheException):
    """The document store rejected or failed an operation."""


class StoreReadError(StoreException):
    """A query against the document store failed."""


class StoreWriteError(StoreException):
    """An insert, upsert or delete against the document store failed."""


class PartialDeletionError(StoreWriteError):
    """A paginated bulk delete failed after some pages were already deleted.

    ``pages_deleted`` tells how many pages were removed before the failure;
    those deletions are not rolled back.
    """

    def __init__(self, message: str, pages_deleted: int, context: dict | None = None) -> None:
        ctx = dict(context or {})
        ctx["pages_deleted"] = pages_deleted
        super().__init__(message, code="PARTIAL_DELETION", context=ctx)
        self.pages_deleted = pages_deleted


# =============================================================================
# Payload Exceptions
# =============================================================================


class DecodeError(DscacheException):
    """A stored payload is corrupt and cannot be decompressed."""
