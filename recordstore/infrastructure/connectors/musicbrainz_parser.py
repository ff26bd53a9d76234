"""Normalization of MusicBrainz payloads into domain shapes.

The MusicBrainz schema omits list wrappers for single results. On the XML
side ``findall`` already yields a list for one or many matches; JSON nodes
that may be a lone object or a list go through ``as_list``.

``parse_release_xml`` never raises: unusable input yields ``None``, which
callers treat as "no enrichment available". Empty extracted strings are
treated as absent.
"""

import json
from typing import Any
from xml.etree import ElementTree as ET

from recordstore.config import get_logger
from recordstore.domain.entities import (
    ArtistSummary,
    ReleaseMetadata,
    ReleaseSummary,
    Track,
)
from recordstore.domain.exceptions import ParseFailureError

logger = get_logger(__name__).bind(service="musicbrainz")


def as_list(value: Any) -> list[Any]:
    """Normalize a singleton-or-list node to a list."""
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


# -----------------------------------------------------------------------------
# XML
# -----------------------------------------------------------------------------


def _strip_namespaces(root: ET.Element) -> ET.Element:
    for element in root.iter():
        if isinstance(element.tag, str) and "}" in element.tag:
            element.tag = element.tag.split("}", 1)[1]
    return root


def _text(element: ET.Element | None, path: str) -> str | None:
    """Stripped text at ``path``, or None when missing or empty."""
    if element is None:
        return None
    found = element.find(path)
    if found is None or found.text is None:
        return None
    return found.text.strip() or None


def _to_int(value: str | None) -> int:
    try:
        return int(value) if value is not None else 0
    except ValueError:
        return 0


def _parse_artist(release: ET.Element) -> str | None:
    credits = release.findall("artist-credit/name-credit")
    if not credits:
        return None
    first = credits[0]
    return _text(first, "name") or _text(first, "artist/name")


def _parse_track(track: ET.Element) -> Track:
    title = _text(track, "recording/title") or _text(track, "title") or ""
    length = _text(track, "length") or _text(track, "recording/length")
    return Track(
        title=title,
        position=_text(track, "position") or "",
        duration=_to_int(length),
    )


def _parse_tracks(release: ET.Element) -> list[Track] | None:
    """Tracks across every track list in document order.

    None when the release carries no track list at all; an empty list when
    track lists are present but hold no tracks.
    """
    track_lists = list(release.iter("track-list"))
    if not track_lists:
        return None
    return [
        _parse_track(track)
        for track_list in track_lists
        for track in track_list.findall("track")
    ]


def parse_release_xml(payload: str) -> ReleaseMetadata | None:
    """Parse a ``metadata > release`` document.

    Returns None for malformed XML or a document without a release.
    """
    try:
        root = _strip_namespaces(ET.fromstring(payload))
    except ET.ParseError as e:
        logger.warning(f"Malformed MusicBrainz XML: {e}")
        return None

    release = root if root.tag == "release" else root.find("release")
    if release is None:
        logger.warning("MusicBrainz XML has no release element")
        return None

    return ReleaseMetadata(
        artist=_parse_artist(release),
        album=_text(release, "title"),
        track_list=_parse_tracks(release),
    )


# -----------------------------------------------------------------------------
# JSON
# -----------------------------------------------------------------------------


def _load_json(payload: str, root_key: str) -> list[dict[str, Any]]:
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        raise ParseFailureError(f"Malformed MusicBrainz JSON: {e}") from e
    if not isinstance(data, dict):
        raise ParseFailureError("MusicBrainz JSON payload is not an object")
    return [item for item in as_list(data.get(root_key)) if isinstance(item, dict)]


def parse_artist_search(payload: str) -> list[ArtistSummary]:
    """Map an artist search response to flat summaries."""
    return [
        ArtistSummary(
            id=item["id"],
            name=item.get("name") or "",
            sort_name=item.get("sort-name"),
            country=item.get("country"),
            disambiguation=item.get("disambiguation") or None,
            score=item.get("score"),
        )
        for item in _load_json(payload, "artists")
        if item.get("id")
    ]


def parse_artist_releases(payload: str) -> list[ReleaseSummary]:
    """Map an artist release listing to flat summaries."""
    return [
        ReleaseSummary(
            id=item["id"],
            title=item.get("title") or "",
            date=item.get("date") or None,
            country=item.get("country"),
            status=item.get("status"),
        )
        for item in _load_json(payload, "releases")
        if item.get("id")
    ]


def parse_release_document(payload: str) -> dict[str, Any]:
    """Decode a JSON release detail document."""
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        raise ParseFailureError(f"Malformed MusicBrainz JSON: {e}") from e
    if not isinstance(data, dict):
        raise ParseFailureError("MusicBrainz JSON payload is not an object")
    return data
