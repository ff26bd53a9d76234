"""MusicBrainz web service integration.

This module provides raw access to the MusicBrainz XML/JSON web service
(https://musicbrainz.org/doc/MusicBrainz_API) on top of httpx. It returns
response bodies as text; normalizing them is the job of
``musicbrainz_parser``.

MusicBrainz allows roughly one request per second per client and blocks
clients that go over. Every request made through this connector therefore
waits ``request_delay`` seconds first. The delay throttles each call on its
own; it is not a global rate limiter across concurrent callers.
"""

import asyncio

import httpx

from recordstore.config import get_logger, resilient_operation, settings
from recordstore.domain.exceptions import NetworkError, UpstreamUnavailableError

logger = get_logger(__name__).bind(service="musicbrainz")

XML_ACCEPT = "application/xml"
JSON_ACCEPT = "application/json"


class MusicBrainzConnector:
    """Rate-aware HTTP client for the MusicBrainz web service.

    Args:
        base_url: Web service root, e.g. ``http://musicbrainz.org/ws/2``
        user_agent: Client identification string MusicBrainz requires
        request_delay: Seconds to wait before every request
        timeout: Per-request timeout in seconds
        client: Optional preconfigured httpx client (tests inject one backed
            by ``httpx.MockTransport``)
    """

    def __init__(
        self,
        base_url: str | None = None,
        user_agent: str | None = None,
        request_delay: float | None = None,
        timeout: float | None = None,
        search_limit: int | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        config = settings.musicbrainz
        self.base_url = (base_url or config.base_url).rstrip("/")
        self.user_agent = user_agent or config.user_agent
        self.request_delay = config.request_delay if request_delay is None else request_delay
        self.search_limit = search_limit or config.search_limit
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=config.timeout if timeout is None else timeout,
        )

    @property
    def headers(self) -> dict[str, str]:
        return {"User-Agent": self.user_agent}

    async def _get(self, path: str, params: dict[str, str | int], accept: str) -> str:
        """Wait out the request delay, then GET ``path`` and return the body."""
        await asyncio.sleep(self.request_delay)

        url = f"{self.base_url}/{path}"
        headers = {**self.headers, "Accept": accept}
        try:
            response = await self._client.get(url, params=params, headers=headers)
        except httpx.TransportError as e:
            raise NetworkError(f"MusicBrainz request failed: {e}") from e

        if not response.is_success:
            raise UpstreamUnavailableError(response.status_code, str(response.url))

        logger.debug(
            "MusicBrainz request succeeded",
            path=path,
            status=response.status_code,
            bytes=len(response.content),
        )
        return response.text

    @resilient_operation("musicbrainz_release_xml")
    async def fetch_release_xml(self, mbid: str) -> str:
        """Release detail with recordings and artist credits, as XML."""
        return await self._get(
            f"release/{mbid}", {"inc": "recordings artist-credits"}, XML_ACCEPT
        )

    @resilient_operation("musicbrainz_release_json")
    async def fetch_release_json(self, mbid: str) -> str:
        """Release detail with recordings and artists, as JSON."""
        return await self._get(
            f"release/{mbid}", {"inc": "recordings artists", "fmt": "json"}, JSON_ACCEPT
        )

    @resilient_operation("musicbrainz_artist_search")
    async def search_artists_json(self, query: str, limit: int | None = None) -> str:
        """Artist search hits for a free-text name query, as JSON."""
        return await self._get(
            "artist",
            {"query": query, "limit": limit or self.search_limit, "fmt": "json"},
            JSON_ACCEPT,
        )

    @resilient_operation("musicbrainz_artist_releases")
    async def fetch_artist_releases_json(self, artist_id: str) -> str:
        """Releases credited to one artist, as JSON."""
        return await self._get(
            "release", {"artist": artist_id, "limit": 100, "fmt": "json"}, JSON_ACCEPT
        )

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()
