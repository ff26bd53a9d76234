"""Cache key construction for every cache namespace.

Namespaces:
- ``record:<id>`` single record by ID
- ``record:mbid:<mbid>`` single record by MusicBrainz ID
- ``records:<signature>`` one page of a catalog query
- ``musicbrainz:<mbid>`` normalized release metadata
- ``musicbrainz:search:<q>`` / ``musicbrainz:artist:<id>:releases``
"""

from recordstore.domain.entities import RecordQuery

RECORD_PREFIX = "record:"
QUERY_PREFIX = "records:"
MUSICBRAINZ_PREFIX = "musicbrainz:"


def record_key(record_id: int | str) -> str:
    return f"{RECORD_PREFIX}{record_id}"


def record_mbid_key(mbid: str) -> str:
    return f"{RECORD_PREFIX}mbid:{mbid}"


def release_key(mbid: str) -> str:
    return f"{MUSICBRAINZ_PREFIX}{mbid}"


def artist_search_key(query: str) -> str:
    return f"{MUSICBRAINZ_PREFIX}search:{query.strip().lower()}"


def artist_releases_key(artist_id: str) -> str:
    return f"{MUSICBRAINZ_PREFIX}artist:{artist_id}:releases"


def _escape_segment(value: str) -> str:
    return value.replace("%", "%25").replace(":", "%3A")


def query_signature(query: RecordQuery) -> str:
    """Deterministic key for a normalized catalog query.

    Built from the ordered tuple (q, artist, album, format, category, page,
    limit, fields). Absent values render as empty segments, so an empty
    string and a missing parameter produce the same key. Colons inside a
    segment are percent-escaped so segment boundaries stay unambiguous.
    """
    record_filter = query.filter
    parts = (
        record_filter.q or "",
        record_filter.artist or "",
        record_filter.album or "",
        record_filter.format.value if record_filter.format else "",
        record_filter.category.value if record_filter.category else "",
        str(query.page),
        str(query.limit),
        ",".join(query.fields),
    )
    return QUERY_PREFIX + ":".join(_escape_segment(part) for part in parts)
