"""Domain collaborator interfaces following Clean Architecture principles.

These interfaces define the contracts for the document store, the cache and
the external metadata fetcher without depending on infrastructure
implementations.
"""

from collections.abc import Awaitable
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from recordstore.domain.entities import (
        BulkInsertResult,
        Order,
        Record,
        RecordFilter,
    )


class RecordStoreProtocol(Protocol):
    """Queryable, indexable collection of catalog records.

    Only single-record operations are atomic.
    """

    def find(
        self,
        record_filter: "RecordFilter",
        projection: tuple[str, ...] = (),
        skip: int = 0,
        limit: int | None = None,
    ) -> Awaitable[list[dict[str, Any]]]:
        """Return serialized records matching the filter, in insertion order.

        With a projection, each document holds ``id`` plus the named fields.
        """
        ...

    def count(self, record_filter: "RecordFilter") -> Awaitable[int]:
        """Count records matching the filter."""
        ...

    def find_by_id(self, record_id: int) -> Awaitable["Record | None"]:
        """Get one record by its store-assigned ID."""
        ...

    def find_one(self, conditions: dict[str, Any]) -> Awaitable["Record | None"]:
        """Get the first record whose attributes equal all given values."""
        ...

    def insert(self, record: "Record") -> Awaitable["Record"]:
        """Persist a new record and return it with its ID."""
        ...

    def insert_many(
        self, records: list["Record"], continue_on_error: bool = False
    ) -> Awaitable["BulkInsertResult"]:
        """Persist many records; optionally skip and report conflicting rows."""
        ...

    def update_by_id(
        self, record_id: int, changes: dict[str, Any]
    ) -> Awaitable["Record | None"]:
        """Atomically apply a partial update; None when no record matches."""
        ...

    def delete_by_id(self, record_id: int) -> Awaitable[None]:
        """Delete a record; deleting a missing ID is a no-op."""
        ...

    def ensure_index(self, name: str) -> Awaitable[None]:
        """Create the named index if it does not exist."""
        ...

    def index_exists(self, name: str) -> Awaitable[bool]:
        """Check whether the named index exists."""
        ...

    def decrement_field(
        self, record_id: int, field_name: str, amount: int
    ) -> Awaitable["Record | None"]:
        """Atomically subtract ``amount`` unless the result would go negative."""
        ...

    def is_empty(self) -> Awaitable[bool]:
        """True when the collection holds no records."""
        ...


class OrderStoreProtocol(Protocol):
    """Persistence for placed orders."""

    def insert(self, order: "Order") -> Awaitable["Order"]:
        """Persist a new order."""
        ...

    def find_all(self) -> Awaitable[list["Order"]]:
        """List all orders."""
        ...

    def find_by_id(self, order_id: int) -> Awaitable["Order | None"]:
        """Get one order by ID."""
        ...


class CacheProtocol(Protocol):
    """Shared key-value cache with per-key TTL.

    Values must be JSON-compatible. Expiry is passive: an expired key reads
    as absent.
    """

    def get(self, key: str) -> Awaitable[Any | None]:
        """Return the cached value or None."""
        ...

    def set(self, key: str, value: Any, ttl: int) -> Awaitable[None]:
        """Store a value for ``ttl`` seconds."""
        ...

    def delete(self, key: str) -> Awaitable[None]:
        """Remove a key; removing an absent key is not an error."""
        ...

    def delete_prefix(self, prefix: str) -> Awaitable[int]:
        """Remove every key that starts with ``prefix``."""
        ...

    def clear(self) -> Awaitable[None]:
        """Flush the whole cache."""
        ...

    def close(self) -> Awaitable[None]:
        """Release client resources."""
        ...


class MetadataFetcherProtocol(Protocol):
    """Raw access to the external metadata service."""

    def fetch_release_xml(self, mbid: str) -> Awaitable[str]:
        """Release detail as XML text."""
        ...

    def fetch_release_json(self, mbid: str) -> Awaitable[str]:
        """Release detail as JSON text."""
        ...

    def search_artists_json(self, query: str, limit: int | None = None) -> Awaitable[str]:
        """Artist search results as JSON text."""
        ...

    def fetch_artist_releases_json(self, artist_id: str) -> Awaitable[str]:
        """Releases of one artist as JSON text."""
        ...

    def close(self) -> Awaitable[None]:
        """Release client resources."""
        ...
