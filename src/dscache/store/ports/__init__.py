"""Document store ports."""

from dscache.store.ports.outbound import DocumentStoreClient

__all__ = ["DocumentStoreClient"]
