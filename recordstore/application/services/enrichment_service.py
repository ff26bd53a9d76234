"""Release metadata enrichment from MusicBrainz.

Fetches are cache-aside: a cached result costs neither a request nor the
rate-limit delay. Fetch and parse failures are soft for enrichment (the
caller proceeds without metadata) and become ``NotFoundError`` only on the
dedicated lookup operations.
"""

from typing import Any

from recordstore.application.utilities.cache_keys import (
    artist_releases_key,
    artist_search_key,
    release_key,
)
from recordstore.config import get_logger, settings
from recordstore.domain.entities import ArtistSummary, ReleaseMetadata, ReleaseSummary
from recordstore.domain.exceptions import (
    MetadataFetchError,
    NotFoundError,
    ParseFailureError,
)
from recordstore.domain.repositories import CacheProtocol, MetadataFetcherProtocol
from recordstore.infrastructure.connectors.musicbrainz_parser import (
    parse_artist_releases,
    parse_artist_search,
    parse_release_document,
    parse_release_xml,
)

logger = get_logger(__name__).bind(service="musicbrainz")

MIN_SEARCH_LENGTH = 2


class ReleaseEnrichmentService:
    """Cached access to normalized MusicBrainz release data."""

    def __init__(
        self,
        fetcher: MetadataFetcherProtocol,
        cache: CacheProtocol,
        ttl: int | None = None,
    ) -> None:
        self.fetcher = fetcher
        self.cache = cache
        self.ttl = settings.cache.musicbrainz_ttl if ttl is None else ttl

    async def fetch_release(self, mbid: str) -> ReleaseMetadata | None:
        """Normalized metadata for a release, or None when unavailable."""
        key = release_key(mbid)
        cached = await self.cache.get(key)
        if cached is not None:
            logger.debug(f"Cache hit for MusicBrainz data {mbid}")
            return ReleaseMetadata.from_dict(cached)

        try:
            payload = await self.fetcher.fetch_release_xml(mbid)
        except MetadataFetchError as e:
            logger.warning(f"Error fetching from MusicBrainz: {e}", mbid=mbid)
            return None

        metadata = parse_release_xml(payload)
        if metadata is None:
            logger.warning("Unusable MusicBrainz release payload", mbid=mbid)
            return None

        await self.cache.set(key, metadata.to_dict(), self.ttl)
        return metadata

    async def lookup_release(self, mbid: str) -> ReleaseMetadata:
        """Like :meth:`fetch_release`, but a missing release is an error."""
        metadata = await self.fetch_release(mbid)
        if metadata is None:
            raise NotFoundError(f"MusicBrainz data not found for MBID: {mbid}")
        return metadata

    async def release_document(self, mbid: str) -> dict[str, Any]:
        """The full MusicBrainz JSON release document (not cached)."""
        try:
            return parse_release_document(await self.fetcher.fetch_release_json(mbid))
        except (MetadataFetchError, ParseFailureError) as e:
            raise NotFoundError(
                f"Failed to fetch data from MusicBrainz or invalid MBID: {e}"
            ) from e

    async def release_xml(self, mbid: str) -> str:
        """Raw release XML (not cached)."""
        try:
            return await self.fetcher.fetch_release_xml(mbid)
        except MetadataFetchError as e:
            raise NotFoundError(f"Failed to retrieve XML for release: {e}") from e

    async def search_artists(self, query: str | None) -> list[ArtistSummary]:
        """Artist autocomplete; short queries return nothing."""
        if not query or len(query.strip()) < MIN_SEARCH_LENGTH:
            return []

        key = artist_search_key(query)
        cached = await self.cache.get(key)
        if cached is not None:
            return [ArtistSummary.from_dict(item) for item in cached]

        try:
            artists = parse_artist_search(await self.fetcher.search_artists_json(query.strip()))
        except (MetadataFetchError, ParseFailureError) as e:
            logger.warning(f"MusicBrainz artist search failed: {e}", query=query)
            return []

        await self.cache.set(key, [a.to_dict() for a in artists], self.ttl)
        return artists

    async def artist_releases(self, artist_id: str) -> list[ReleaseSummary]:
        """Releases of an artist; NotFoundError when there are none."""
        key = artist_releases_key(artist_id)
        cached = await self.cache.get(key)
        if cached is not None:
            return [ReleaseSummary.from_dict(item) for item in cached]

        try:
            releases = parse_artist_releases(
                await self.fetcher.fetch_artist_releases_json(artist_id)
            )
        except (MetadataFetchError, ParseFailureError) as e:
            logger.warning(f"MusicBrainz release listing failed: {e}", artist_id=artist_id)
            releases = []

        if not releases:
            raise NotFoundError(f"No releases found for artist ID: {artist_id}")

        await self.cache.set(key, [r.to_dict() for r in releases], self.ttl)
        return releases

