"""Shared application utilities."""

from .cache_keys import (
    QUERY_PREFIX,
    artist_releases_key,
    artist_search_key,
    query_signature,
    record_key,
    record_mbid_key,
    release_key,
)

__all__ = [
    "QUERY_PREFIX",
    "artist_releases_key",
    "artist_search_key",
    "query_signature",
    "record_key",
    "record_mbid_key",
    "release_key",
]
