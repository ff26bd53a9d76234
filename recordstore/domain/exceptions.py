"""Error taxonomy for the record store.

Enrichment errors (fetch and parse failures) are recovered locally by the
services; catalog errors propagate to the caller and are mapped to HTTP
status codes at the API boundary.
"""


class RecordStoreError(Exception):
    """Base exception for record store errors."""


class NotFoundError(RecordStoreError):
    """Raised when a requested entity does not exist."""


class ConflictError(RecordStoreError):
    """Raised when a create would duplicate an existing (artist, album) pair."""


class ValidationError(RecordStoreError):
    """Raised when input is malformed."""


class InsufficientStockError(RecordStoreError):
    """Raised when an order asks for more copies than are in stock."""


class StoreError(RecordStoreError):
    """Raised when the persistence layer fails."""


class MetadataFetchError(RecordStoreError):
    """Base class for failures talking to the external metadata service."""


class UpstreamUnavailableError(MetadataFetchError):
    """Raised when the metadata service answers with a non-success status."""

    def __init__(self, status_code: int, url: str) -> None:
        super().__init__(f"MusicBrainz API responded with status: {status_code}")
        self.status_code = status_code
        self.url = url


class NetworkError(MetadataFetchError):
    """Raised on transport failures (DNS, connect, timeout)."""


class ParseFailureError(RecordStoreError):
    """Raised when an external payload cannot be interpreted."""
