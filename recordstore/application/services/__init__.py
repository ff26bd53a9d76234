"""Application services coordinating the store, the cache and MusicBrainz."""

from .catalog_query import CatalogQueryService, build_query
from .enrichment_service import ReleaseEnrichmentService
from .order_service import OrderService
from .record_service import RecordService
from .seed_service import SeedService, load_seed_records

__all__ = [
    "CatalogQueryService",
    "OrderService",
    "RecordService",
    "ReleaseEnrichmentService",
    "SeedService",
    "build_query",
    "load_seed_records",
]
