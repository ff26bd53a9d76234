"""Catalog query engine.

Filtered, paginated and projected reads over the record store, with the
assembled page cached under its query signature. A cached page is served
verbatim until its TTL expires, so results may be stale for up to
``settings.cache.query_ttl`` seconds.
"""

import asyncio
from typing import Any

from recordstore.application.utilities.cache_keys import query_signature
from recordstore.config import get_logger, settings
from recordstore.domain.entities import (
    RecordFilter,
    RecordPage,
    RecordQuery,
    clamp_limit,
)
from recordstore.domain.exceptions import ValidationError
from recordstore.domain.repositories import CacheProtocol, RecordStoreProtocol

logger = get_logger(__name__)

TEXT_INDEX = "ix_records_text"


def build_query(
    q: str | None = None,
    artist: str | None = None,
    album: str | None = None,
    format: str | None = None,
    category: str | None = None,
    page: int | None = None,
    limit: int | None = None,
    fields: str | None = None,
) -> RecordQuery:
    """Normalize raw query parameters, clamping the paging window."""
    try:
        record_filter = RecordFilter(
            q=q, artist=artist, album=album, format=format, category=category
        )
    except ValueError as e:
        raise ValidationError(str(e)) from e

    return RecordQuery(
        filter=record_filter,
        page=page,
        limit=clamp_limit(
            limit,
            default=settings.pagination.default_limit,
            maximum=settings.pagination.max_limit,
        ),
        fields=fields,
    )


class CatalogQueryService:
    """Runs catalog queries through the cache and the record store."""

    def __init__(
        self,
        store: RecordStoreProtocol,
        cache: CacheProtocol,
        query_ttl: int | None = None,
    ) -> None:
        self.store = store
        self.cache = cache
        self.query_ttl = settings.cache.query_ttl if query_ttl is None else query_ttl
        self._index_ready = False

    async def query(self, **params: Any) -> RecordPage:
        """Query the catalog; see :func:`build_query` for parameters."""
        return await self.run(build_query(**params))

    async def run(self, query: RecordQuery) -> RecordPage:
        key = query_signature(query)

        cached = await self.cache.get(key)
        if cached is not None:
            logger.debug("Catalog query cache hit", key=key)
            return RecordPage.from_dict(cached)

        logger.debug("Catalog query cache miss", key=key)
        total, records = await asyncio.gather(
            self.store.count(query.filter),
            self.store.find(
                query.filter,
                projection=query.fields,
                skip=query.skip,
                limit=query.limit,
            ),
        )
        page = RecordPage.build(records, total, query.page, query.limit)

        await self.cache.set(key, page.to_dict(), self.query_ttl)
        await self._ensure_text_index()
        return page

    async def _ensure_text_index(self) -> None:
        """Create the text index on first use; failures only cost speed."""
        if self._index_ready:
            return
        try:
            if not await self.store.index_exists(TEXT_INDEX):
                await self.store.ensure_index(TEXT_INDEX)
            self._index_ready = True
        except Exception as e:
            logger.warning(f"Could not ensure index {TEXT_INDEX}: {e}")
