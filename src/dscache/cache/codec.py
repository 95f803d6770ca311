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
"""Payload compression."""

from __future__ import annotations

import gzip
import zlib

from dscache.kernel.exceptions import ConfigurationError, DecodeError


class CompressionCodec:
    """gzip transform gated by a compression level.

    Level 0 stores payloads as-is; levels 1-9 gzip them at that level.
    """

    def __init__(self, level: int = 0) -> None:
        if not 0 <= level <= 9:
            raise ConfigurationError(
                f"Compression level must be between 0 and 9, got {level}",
                context={"field": "compression_level"},
            )
        self._level = level

    @property
    def level(self) -> int:
        return self._level

    @property
    def enabled(self) -> bool:
        return self._level > 0

    def compress(self, value: bytes) -> bytes:
        if not self.enabled:
            return value
        return gzip.compress(value, compresslevel=self._level)

    def decompress(self, value: bytes) -> bytes:
        """Reverse :meth:`compress`.

        Empty input is returned unchanged without touching gzip.

        Raises:
            DecodeError: if the payload is not valid gzip data.
        """
        if not value or not self.enabled:
            return value
        try:
            return gzip.decompress(value)
        except (OSError, EOFError, zlib.error) as exc:
            raise DecodeError(
                f"Cannot decompress cached payload: {exc}",
                code="DECODE_FAILED",
                context={"payload_size": len(value)},
            ) from exc
