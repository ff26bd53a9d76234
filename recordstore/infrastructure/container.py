"""Service wiring shared by the HTTP API and the CLI.

Builds the stores, cache, MusicBrainz connector and application services
over one database engine, and tears them down together.
"""

from pathlib import Path

from attrs import define
from sqlalchemy.ext.asyncio import AsyncEngine

from recordstore.application.services import (
    CatalogQueryService,
    OrderService,
    RecordService,
    ReleaseEnrichmentService,
    SeedService,
)
from recordstore.config import get_logger, settings
from recordstore.domain.repositories import CacheProtocol, MetadataFetcherProtocol
from recordstore.infrastructure.cache import build_cache
from recordstore.infrastructure.connectors import MusicBrainzConnector
from recordstore.infrastructure.persistence.database.db_connection import (
    create_db_engine,
    create_session_factory,
)
from recordstore.infrastructure.persistence.database.db_models import init_db
from recordstore.infrastructure.persistence.repositories import (
    SQLOrderStore,
    SQLRecordStore,
)

logger = get_logger(__name__)


@define(slots=True)
class ServiceContainer:
    """Everything a request handler or CLI command needs."""

    engine: AsyncEngine
    cache: CacheProtocol
    fetcher: MetadataFetcherProtocol
    records: SQLRecordStore
    orders: SQLOrderStore
    catalog: CatalogQueryService
    enrichment: ReleaseEnrichmentService
    record_service: RecordService
    order_service: OrderService
    seeder: SeedService

    async def startup(self, seed: bool | None = None) -> None:
        """Create the schema and seed an empty catalog."""
        await init_db(self.engine)
        if settings.seed.enabled if seed is None else seed:
            await self.seeder.seed_if_empty()

    async def close(self) -> None:
        await self.fetcher.close()
        await self.cache.close()
        await self.engine.dispose()
        logger.debug("Service container closed")


def build_container(
    engine: AsyncEngine | None = None,
    cache: CacheProtocol | None = None,
    fetcher: MetadataFetcherProtocol | None = None,
    seed_file: Path | None = None,
) -> ServiceContainer:
    """Wire the application from settings, with optional overrides."""
    engine = engine or create_db_engine()
    session_factory = create_session_factory(engine)
    cache = cache or build_cache(settings)
    fetcher = fetcher or MusicBrainzConnector()

    records = SQLRecordStore(session_factory)
    orders = SQLOrderStore(session_factory)
    enrichment = ReleaseEnrichmentService(fetcher, cache)

    return ServiceContainer(
        engine=engine,
        cache=cache,
        fetcher=fetcher,
        records=records,
        orders=orders,
        catalog=CatalogQueryService(records, cache),
        enrichment=enrichment,
        record_service=RecordService(records, cache, enrichment),
        order_service=OrderService(orders, records, cache),
        seeder=SeedService(records, cache, seed_file=seed_file),
    )
