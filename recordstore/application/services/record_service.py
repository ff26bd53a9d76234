"""Record mutation service.

Create, update and delete catalog records, enriching them from MusicBrainz
when a release ID is supplied, and keeping the cache consistent:

- every mutation drops the whole ``records:`` query namespace
- update and delete also drop ``record:<id>`` and ``record:mbid:<mbid>``
- ``musicbrainz:`` entries are never touched by local mutations

Enrichment is best-effort. A failed fetch leaves the caller's fields as
given; it never fails the mutation.
"""

from datetime import UTC, datetime
from typing import Any

from recordstore.application.services.enrichment_service import (
    ReleaseEnrichmentService,
)
from recordstore.application.utilities.cache_keys import (
    QUERY_PREFIX,
    record_key,
    record_mbid_key,
)
from recordstore.config import get_logger, settings
from recordstore.domain.entities import Record, RecordFields, merge_enrichment
from recordstore.domain.exceptions import ConflictError, ValidationError
from recordstore.domain.repositories import CacheProtocol, RecordStoreProtocol

logger = get_logger(__name__)


class RecordService:
    """Create/update/delete and cached single-record lookups."""

    def __init__(
        self,
        store: RecordStoreProtocol,
        cache: CacheProtocol,
        enrichment: ReleaseEnrichmentService,
        record_ttl: int | None = None,
    ) -> None:
        self.store = store
        self.cache = cache
        self.enrichment = enrichment
        self.record_ttl = settings.cache.record_ttl if record_ttl is None else record_ttl

    async def _enrich(self, fields: RecordFields) -> RecordFields:
        if not fields.mbid:
            return fields
        metadata = await self.enrichment.fetch_release(fields.mbid)
        if metadata is None:
            logger.info("Proceeding without MusicBrainz enrichment", mbid=fields.mbid)
        return merge_enrichment(fields, metadata)

    async def create(self, fields: RecordFields) -> Record:
        """Create a record, enriching it first when it carries an MBID.

        Raises:
            ValidationError: A required attribute is missing or out of range
            ConflictError: The (artist, album) pair already exists
        """
        missing = fields.missing_required()
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

        existing = await self.store.find_one({"artist": fields.artist, "album": fields.album})
        if existing is not None:
            raise ConflictError(
                f"Record already exists: {fields.artist} - {fields.album}"
            )

        fields = await self._enrich(fields)

        now = datetime.now(UTC)
        try:
            record = Record(
                **fields.present(),
                created=now,
                last_modified=now,
                is_user_created=True,
            )
        except (TypeError, ValueError) as e:
            raise ValidationError(str(e)) from e

        created = await self.store.insert(record)
        await self.cache.delete_prefix(QUERY_PREFIX)
        logger.info("Record created", record_id=created.id, mbid=created.mbid)
        return created

    async def update(self, record_id: int, fields: RecordFields) -> Record | None:
        """Apply a partial update; None when the record does not exist.

        MusicBrainz is only consulted when the update carries an MBID that
        differs from the stored one.
        """
        with logger.contextualize(record_id=record_id):
            current = await self.store.find_by_id(record_id)
            if current is None:
                return None

            if fields.mbid and fields.mbid != current.mbid:
                fields = await self._enrich(fields)

            changes: dict[str, Any] = {
                **fields.present(),
                "last_modified": datetime.now(UTC),
            }
            updated = await self.store.update_by_id(record_id, changes)
            if updated is None:
                return None

            await self._invalidate(record_id, current.mbid, updated.mbid)
            logger.info("Record updated", fields=sorted(fields.present()))
            return updated

    async def delete(self, record_id: int) -> Record | None:
        """Delete a record; returns the deleted record, or None if absent."""
        with logger.contextualize(record_id=record_id):
            record = await self.store.find_by_id(record_id)
            await self.store.delete_by_id(record_id)
            await self._invalidate(record_id, record.mbid if record else None)
            if record is not None:
                logger.info("Record deleted")
            return record

    async def find_one(self, record_id: int) -> Record | None:
        """Cached lookup by ID."""
        key = record_key(record_id)
        cached = await self.cache.get(key)
        if cached is not None:
            return Record.from_dict(cached)

        record = await self.store.find_by_id(record_id)
        if record is not None:
            await self.cache.set(key, record.to_dict(), self.record_ttl)
        return record

    async def find_by_mbid(self, mbid: str) -> Record | None:
        """Cached lookup by MusicBrainz release ID."""
        key = record_mbid_key(mbid)
        cached = await self.cache.get(key)
        if cached is not None:
            return Record.from_dict(cached)

        record = await self.store.find_one({"mbid": mbid})
        if record is not None:
            await self.cache.set(key, record.to_dict(), self.record_ttl)
        return record

    async def _invalidate(self, record_id: int, *mbids: str | None) -> None:
        await self.cache.delete(record_key(record_id))
        for mbid in dict.fromkeys(m for m in mbids if m):
            await self.cache.delete(record_mbid_key(mbid))
        await self.cache.delete_prefix(QUERY_PREFIX)
