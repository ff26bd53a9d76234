"""External service connectors."""

from recordstore.infrastructure.connectors.musicbrainz import MusicBrainzConnector
from recordstore.infrastructure.connectors.musicbrainz_parser import (
    as_list,
    parse_artist_releases,
    parse_artist_search,
    parse_release_document,
    parse_release_xml,
)

__all__ = [
    "MusicBrainzConnector",
    "as_list",
    "parse_artist_releases",
    "parse_artist_search",
    "parse_release_document",
    "parse_release_xml",
]
