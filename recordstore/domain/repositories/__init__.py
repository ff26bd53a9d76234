"""Domain collaborator interfaces."""

from .interfaces import (
    CacheProtocol,
    MetadataFetcherProtocol,
    OrderStoreProtocol,
    RecordStoreProtocol,
)

__all__ = [
    "CacheProtocol",
    "MetadataFetcherProtocol",
    "OrderStoreProtocol",
    "RecordStoreProtocol",
]
