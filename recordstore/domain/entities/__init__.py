"""Core domain entities representing record store concepts."""

# Catalog query entities
from .catalog import (
    BulkInsertResult,
    RecordFilter,
    RecordPage,
    RecordQuery,
    clamp_limit,
    clamp_page,
    parse_fields,
)

# Order entities
from .order import Order

# Record entities
from .record import (
    PROJECTABLE_FIELDS,
    Record,
    RecordCategory,
    RecordFields,
    RecordFormat,
    Track,
)

# External metadata entities
from .release import ArtistSummary, ReleaseMetadata, ReleaseSummary, merge_enrichment

# Shared utilities
from .shared import ensure_utc, parse_timestamp

__all__ = [
    "BulkInsertResult",
    "PROJECTABLE_FIELDS",
    # Release metadata
    "ArtistSummary",
    # Orders
    "Order",
    # Records
    "Record",
    "RecordCategory",
    "RecordFields",
    # Catalog queries
    "RecordFilter",
    "RecordFormat",
    "RecordPage",
    "RecordQuery",
    "ReleaseMetadata",
    "ReleaseSummary",
    "Track",
    "clamp_limit",
    "clamp_page",
    # Shared utilities
    "ensure_utc",
    "merge_enrichment",
    "parse_fields",
    "parse_timestamp",
]
