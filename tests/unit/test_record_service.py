"""Tests for record mutations: enrichment triggers and cache invalidation."""

from unittest.mock import AsyncMock

import attrs
import pytest

from recordstore.application.services.record_service import RecordService
from recordstore.domain.entities import (
    RecordFields,
    ReleaseMetadata,
    Track,
)
from recordstore.domain.exceptions import ConflictError, ValidationError

NEW_MBID = "5b11f4ce-a62d-471e-81fc-a69a8278c7da"


@pytest.fixture
def store(record):
    store = AsyncMock()
    store.find_one.return_value = None
    store.find_by_id.return_value = record
    store.insert.side_effect = lambda r: attrs.evolve(r, id=42)
    store.update_by_id.side_effect = lambda record_id, changes: attrs.evolve(record, **changes)
    return store


@pytest.fixture
def cache():
    cache = AsyncMock()
    cache.get.return_value = None
    return cache


@pytest.fixture
def enrichment():
    enrichment = AsyncMock()
    enrichment.fetch_release.return_value = None
    return enrichment


@pytest.fixture
def service(store, cache, enrichment):
    return RecordService(store, cache, enrichment, record_ttl=300)


def deleted_keys(cache) -> list[str]:
    return [c.args[0] for c in cache.delete.await_args_list]


class TestCreate:
    async def test_creates_user_record_and_drops_query_cache(self, service, store, cache, create_fields):
        created = await service.create(create_fields)

        assert created.id == 42
        assert created.is_user_created is True
        assert created.created == created.last_modified
        store.find_one.assert_awaited_once_with(
            {"artist": "Beatles", "album": "Abbey Road (Remaster)"}
        )
        cache.delete_prefix.assert_awaited_once_with("records:")
        cache.delete.assert_not_awaited()

    async def test_overlay_applies_only_present_metadata(
        self, service, enrichment, create_fields, release_mbid
    ):
        enrichment.fetch_release.return_value = ReleaseMetadata(
            artist="X", track_list=[Track(title="Come Together", position="1", duration=1)]
        )

        created = await service.create(attrs.evolve(create_fields, mbid=release_mbid))

        enrichment.fetch_release.assert_awaited_once_with(release_mbid)
        assert created.artist == "X"
        assert created.album == "Abbey Road (Remaster)"
        assert [t.title for t in created.track_list] == ["Come Together"]

    async def test_failed_enrichment_keeps_input(self, service, enrichment, create_fields):
        created = await service.create(attrs.evolve(create_fields, mbid="unknown"))

        enrichment.fetch_release.assert_awaited_once_with("unknown")
        assert created.artist == create_fields.artist
        assert created.track_list == []

    async def test_no_mbid_no_fetch(self, service, enrichment, create_fields):
        await service.create(create_fields)
        enrichment.fetch_release.assert_not_awaited()

    async def test_duplicate_rejected_before_enrichment(
        self, service, store, enrichment, record, create_fields
    ):
        store.find_one.return_value = record

        with pytest.raises(ConflictError):
            await service.create(attrs.evolve(create_fields, mbid="abc"))

        enrichment.fetch_release.assert_not_awaited()
        store.insert.assert_not_awaited()

    async def test_missing_required_fields(self, service, store):
        with pytest.raises(ValidationError, match="album"):
            await service.create(RecordFields(artist="A", price=1, qty=1, format="CD", category="Pop"))
        store.find_one.assert_not_awaited()


class TestUpdate:
    async def test_unchanged_mbid_never_fetches(self, service, enrichment, record):
        await service.update(record.id, RecordFields(mbid=record.mbid, price=30))

        enrichment.fetch_release.assert_not_awaited()

    async def test_changed_mbid_fetches_once_with_new_id(self, service, enrichment, record):
        enrichment.fetch_release.return_value = ReleaseMetadata(album="Let It Be")

        updated = await service.update(record.id, RecordFields(mbid=NEW_MBID))

        enrichment.fetch_release.assert_awaited_once_with(NEW_MBID)
        assert updated.album == "Let It Be"
        assert updated.mbid == NEW_MBID

    async def test_sets_last_modified(self, service, store, record):
        await service.update(record.id, RecordFields(qty=3))

        changes = store.update_by_id.await_args.args[1]
        assert changes["qty"] == 3
        assert changes["last_modified"] > record.last_modified

    async def test_invalidates_id_mbid_and_query_keys(self, service, cache, record):
        await service.update(record.id, RecordFields(mbid=NEW_MBID))

        assert deleted_keys(cache) == [
            "record:1",
            f"record:mbid:{record.mbid}",
            f"record:mbid:{NEW_MBID}",
        ]
        cache.delete_prefix.assert_awaited_once_with("records:")

    async def test_missing_record_returns_none(self, service, store, cache, enrichment):
        store.find_by_id.return_value = None

        assert await service.update(99, RecordFields(mbid=NEW_MBID)) is None
        enrichment.fetch_release.assert_not_awaited()
        store.update_by_id.assert_not_awaited()
        cache.delete_prefix.assert_not_awaited()


class TestDelete:
    async def test_purges_id_and_mbid_keys(self, service, store, cache, record):
        deleted = await service.delete(record.id)

        assert deleted == record
        store.delete_by_id.assert_awaited_once_with(record.id)
        assert "record:1" in deleted_keys(cache)
        assert f"record:mbid:{record.mbid}" in deleted_keys(cache)
        cache.delete_prefix.assert_awaited_once_with("records:")

    async def test_missing_record_is_noop(self, service, store, cache):
        store.find_by_id.return_value = None

        assert await service.delete(5) is None
        store.delete_by_id.assert_awaited_once_with(5)
        assert deleted_keys(cache) == ["record:5"]


class TestLookups:
    async def test_find_one_populates_cache(self, service, cache, record):
        found = await service.find_one(record.id)

        assert found == record
        cache.set.assert_awaited_once_with("record:1", record.to_dict(), 300)

    async def test_find_one_hit_skips_store(self, service, store, cache, record):
        cache.get.return_value = record.to_dict()

        assert await service.find_one(record.id) == record
        store.find_by_id.assert_not_awaited()

    async def test_absent_result_not_cached(self, service, store, cache):
        store.find_one.return_value = None

        assert await service.find_by_mbid("nothing") is None
        cache.set.assert_not_awaited()

    async def test_find_by_mbid_uses_mbid_key(self, service, store, cache, record):
        store.find_one.return_value = record

        await service.find_by_mbid(record.mbid)

        store.find_one.assert_awaited_once_with({"mbid": record.mbid})
        cache.set.assert_awaited_once_with(f"record:mbid:{record.mbid}", record.to_dict(), 300)
