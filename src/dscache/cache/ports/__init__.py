"""Cache ports."""

from dscache.cache.ports.outbound import TaggableCacheBackend

__all__ = ["TaggableCacheBackend"]
