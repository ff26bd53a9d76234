"""Tests for cached MusicBrainz release enrichment."""

from unittest.mock import AsyncMock

import pytest

from recordstore.application.services.enrichment_service import ReleaseEnrichmentService
from recordstore.domain.entities import ReleaseMetadata
from recordstore.domain.exceptions import NetworkError, NotFoundError


@pytest.fixture
def service(fake_fetcher, memory_cache):
    return ReleaseEnrichmentService(fake_fetcher, memory_cache, ttl=86400)


class TestFetchRelease:
    async def test_parses_and_caches(self, service, fake_fetcher, memory_cache, release_mbid):
        metadata = await service.fetch_release(release_mbid)

        assert metadata.artist == "The Beatles"
        assert metadata.album == "Abbey Road"
        assert len(metadata.track_list) == 1
        assert await memory_cache.get(f"musicbrainz:{release_mbid}") == metadata.to_dict()
        assert fake_fetcher.calls == [("release_xml", release_mbid)]

    async def test_cache_hit_skips_fetch(self, service, fake_fetcher, release_mbid):
        first = await service.fetch_release(release_mbid)
        second = await service.fetch_release(release_mbid)

        assert first == second
        assert len(fake_fetcher.calls) == 1

    async def test_upstream_failure_is_soft(self, service, memory_cache):
        assert await service.fetch_release("missing") is None
        assert await memory_cache.get("musicbrainz:missing") is None

    async def test_network_failure_is_soft(self, memory_cache):
        fetcher = AsyncMock()
        fetcher.fetch_release_xml.side_effect = NetworkError("connection refused")
        service = ReleaseEnrichmentService(fetcher, memory_cache)

        assert await service.fetch_release("abc") is None

    async def test_malformed_payload_is_soft(self, memory_cache):
        fetcher = AsyncMock()
        fetcher.fetch_release_xml.return_value = "<metadata><release>"
        service = ReleaseEnrichmentService(fetcher, memory_cache)

        assert await service.fetch_release("abc") is None

    async def test_cached_empty_track_list_survives(self, service, memory_cache):
        await memory_cache.set("musicbrainz:x", {"trackList": []}, 60)

        assert await service.fetch_release("x") == ReleaseMetadata(track_list=[])


class TestLookups:
    async def test_lookup_missing_release_raises(self, service):
        with pytest.raises(NotFoundError):
            await service.lookup_release("missing")

    async def test_release_xml_is_raw(self, service, single_track_xml, release_mbid):
        assert await service.release_xml(release_mbid) == single_track_xml

    async def test_release_xml_missing_raises(self, service):
        with pytest.raises(NotFoundError):
            await service.release_xml("missing")

    async def test_release_document(self, service, release_mbid):
        document = await service.release_document(release_mbid)
        assert document == {"id": release_mbid, "title": "Abbey Road"}


class TestArtistSearch:
    @pytest.mark.parametrize("query", [None, "", " a "])
    async def test_short_queries_return_nothing(self, service, fake_fetcher, query):
        assert await service.search_artists(query) == []
        assert fake_fetcher.calls == []

    async def test_search_is_cached(self, service, fake_fetcher):
        first = await service.search_artists("Beatles")
        second = await service.search_artists("beatles")

        assert [a.name for a in first] == ["The Beatles"]
        assert second == first
        assert fake_fetcher.calls == [("search_artists", "Beatles")]

    async def test_no_releases_is_not_found(self, service):
        with pytest.raises(NotFoundError):
            await service.artist_releases("a1")
