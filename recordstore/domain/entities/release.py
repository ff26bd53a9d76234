"""External release metadata and the enrichment overlay.

``ReleaseMetadata`` is the normalized result of parsing a MusicBrainz
release. ``None`` on any attribute means the payload did not provide it;
an empty ``track_list`` means the release explicitly has no tracks.
"""

from typing import Any

import attrs
from attrs import define, field

from .record import RecordFields, Track, _to_track_list


@define(frozen=True, slots=True)
class ReleaseMetadata:
    """Normalized ``{artist, album, trackList}`` shape of an external release."""

    artist: str | None = None
    album: str | None = None
    track_list: list[Track] | None = field(
        default=None, converter=attrs.converters.optional(_to_track_list)
    )

    def is_empty(self) -> bool:
        """True when the payload carried nothing usable."""
        return self.artist is None and self.album is None and self.track_list is None

    def to_dict(self) -> dict[str, Any]:
        """Serialize, omitting absent keys."""
        data: dict[str, Any] = {}
        if self.artist is not None:
            data["artist"] = self.artist
        if self.album is not None:
            data["album"] = self.album
        if self.track_list is not None:
            data["trackList"] = [t.to_dict() for t in self.track_list]
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ReleaseMetadata":
        """Rebuild from :meth:`to_dict` output."""
        return cls(
            artist=data.get("artist"),
            album=data.get("album"),
            track_list=data.get("trackList"),
        )


@define(frozen=True, slots=True)
class ArtistSummary:
    """Flat artist search hit, used for autocomplete."""

    id: str
    name: str
    sort_name: str | None = None
    country: str | None = None
    disambiguation: str | None = None
    score: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "sortName": self.sort_name,
            "country": self.country,
            "disambiguation": self.disambiguation,
            "score": self.score,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ArtistSummary":
        return cls(
            id=data["id"],
            name=data["name"],
            sort_name=data.get("sortName"),
            country=data.get("country"),
            disambiguation=data.get("disambiguation"),
            score=data.get("score"),
        )


@define(frozen=True, slots=True)
class ReleaseSummary:
    """Flat release listing entry for an artist."""

    id: str
    title: str
    date: str | None = None
    country: str | None = None
    status: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "date": self.date,
            "country": self.country,
            "status": self.status,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ReleaseSummary":
        return cls(
            id=data["id"],
            title=data["title"],
            date=data.get("date"),
            country=data.get("country"),
            status=data.get("status"),
        )


def merge_enrichment(fields: RecordFields, metadata: ReleaseMetadata | None) -> RecordFields:
    """Overlay external release metadata onto caller-supplied fields.

    Only artist, album and track list take part. A metadata value wins over
    the caller's value when it is present; absent metadata values leave the
    caller's value untouched. Nothing else on ``fields`` is ever changed.
    """
    if metadata is None:
        return fields

    overlay: dict[str, Any] = {}
    if metadata.artist is not None:
        overlay["artist"] = metadata.artist
    if metadata.album is not None:
        overlay["album"] = metadata.album
    if metadata.track_list is not None:
        overlay["track_list"] = list(metadata.track_list)

    return attrs.evolve(fields, **overlay) if overlay else fields
