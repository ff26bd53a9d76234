"""Shared fixtures: sample entities, MusicBrainz payloads and test databases."""

from datetime import UTC, datetime

import pytest

from recordstore.domain.entities import Record, RecordFields, Track
from recordstore.domain.exceptions import UpstreamUnavailableError
from recordstore.infrastructure.cache import InMemoryCache
from recordstore.infrastructure.persistence.database.db_connection import (
    create_db_engine,
    create_session_factory,
)
from recordstore.infrastructure.persistence.database.db_models import init_db
from recordstore.infrastructure.persistence.repositories import (
    SQLOrderStore,
    SQLRecordStore,
)

RELEASE_MBID = "b84ee12a-09ef-421b-82de-0441a926375b"

# Single track, no list wrappers beyond what MusicBrainz emits for one result
SINGLE_TRACK_XML = """<?xml version="1.0" encoding="UTF-8"?>
<metadata xmlns="http://musicbrainz.org/ns/mmd-2.0#">
  <release id="b84ee12a-09ef-421b-82de-0441a926375b">
    <title>Abbey Road</title>
    <artist-credit>
      <name-credit>
        <artist id="b10bbbfc-cf9e-42e0-be17-e2c3e1d2600d">
          <name>The Beatles</name>
        </artist>
      </name-credit>
    </artist-credit>
    <medium-list count="1">
      <medium>
        <position>1</position>
        <track-list count="1" offset="0">
          <track id="t1">
            <position>1</position>
            <length>259000</length>
            <recording id="r1">
              <title>Come Together</title>
              <length>259946</length>
            </recording>
          </track>
        </track-list>
      </medium>
    </medium-list>
  </release>
</metadata>
"""

TWO_TRACK_XML = """<metadata>
  <release>
    <title>Kind of Blue</title>
    <artist-credit>
      <name-credit><name>Miles Davis</name></name-credit>
    </artist-credit>
    <media>
      <track-list>
        <track>
          <position>A1</position>
          <length>562000</length>
          <recording><title>So What</title></recording>
        </track>
        <track>
          <position>A2</position>
          <title>Freddie Freeloader</title>
          <length>not-a-number</length>
        </track>
      </track-list>
    </media>
  </release>
</metadata>
"""


@pytest.fixture
def now():
    return datetime(2024, 5, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def record(now):
    """A stored vinyl record with an MBID."""
    return Record(
        id=1,
        artist="The Beatles",
        album="Abbey Road",
        price=25,
        qty=10,
        format="Vinyl",
        category="Rock",
        mbid=RELEASE_MBID,
        track_list=[Track(title="Come Together", position="1", duration=259000)],
        created=now,
        last_modified=now,
    )


@pytest.fixture
def create_fields():
    return RecordFields(
        artist="Beatles",
        album="Abbey Road (Remaster)",
        price=30,
        qty=5,
        format="Vinyl",
        category="Rock",
    )


@pytest.fixture
def memory_cache():
    return InMemoryCache()


class FakeFetcher:
    """In-memory stand-in for MusicBrainzConnector that records calls."""

    def __init__(self, releases: dict[str, str] | None = None) -> None:
        self.releases = releases or {}
        self.calls: list[tuple[str, str]] = []
        self.closed = False

    async def fetch_release_xml(self, mbid: str) -> str:
        self.calls.append(("release_xml", mbid))
        if mbid not in self.releases:
            raise UpstreamUnavailableError(404, f"release/{mbid}")
        return self.releases[mbid]

    async def fetch_release_json(self, mbid: str) -> str:
        self.calls.append(("release_json", mbid))
        return '{"id": "%s", "title": "Abbey Road"}' % mbid

    async def search_artists_json(self, query: str, limit: int | None = None) -> str:
        self.calls.append(("search_artists", query))
        return (
            '{"artists": [{"id": "a1", "name": "The Beatles", '
            '"sort-name": "Beatles, The", "country": "GB", "score": 100}]}'
        )

    async def fetch_artist_releases_json(self, artist_id: str) -> str:
        self.calls.append(("artist_releases", artist_id))
        return '{"releases": []}'

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_fetcher():
    return FakeFetcher({RELEASE_MBID: SINGLE_TRACK_XML})


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'recordstore.db'}"


@pytest.fixture
async def db_engine(database_url):
    """File-backed SQLite engine with the schema created."""
    engine = create_db_engine(database_url)
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return create_session_factory(db_engine)


@pytest.fixture
def record_store(session_factory):
    return SQLRecordStore(session_factory)


@pytest.fixture
def order_store(session_factory):
    return SQLOrderStore(session_factory)


@pytest.fixture
def release_mbid():
    return RELEASE_MBID


@pytest.fixture
def single_track_xml():
    return SINGLE_TRACK_XML


@pytest.fixture
def two_track_xml():
    return TWO_TRACK_XML
