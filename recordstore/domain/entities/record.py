"""Catalog record entities.

Pure record representations and related value objects with zero external
dependencies beyond attrs.
"""

from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

import attrs
from attrs import define, field, validators

from .shared import ensure_utc, parse_timestamp

MAX_PRICE = 10000
MAX_QTY = 100


class RecordFormat(StrEnum):
    """Physical or digital medium of a record."""

    VINYL = "Vinyl"
    CD = "CD"
    CASSETTE = "Cassette"
    DIGITAL = "Digital"


class RecordCategory(StrEnum):
    """Genre bucket used for browsing the catalog."""

    ROCK = "Rock"
    JAZZ = "Jazz"
    HIPHOP = "Hip-Hop"
    CLASSICAL = "Classical"
    POP = "Pop"
    ALTERNATIVE = "Alternative"
    INDIE = "Indie"


def _is_number(_instance: Any, attribute: attrs.Attribute, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise TypeError(f"'{attribute.name}' must be a number, got {value!r}")


def _is_int(_instance: Any, attribute: attrs.Attribute, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"'{attribute.name}' must be an integer, got {value!r}")


@define(frozen=True, slots=True)
class Track:
    """A single track on a record.

    Tracks have no identity of their own; the whole list is replaced every
    time release metadata is re-fetched.
    """

    title: str = field(validator=validators.instance_of(str))
    position: str = field(default="", converter=lambda v: "" if v is None else str(v))
    duration: int = field(default=0, converter=lambda v: 0 if v is None else int(v))

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the JSON shape used by the cache and the API."""
        return {"title": self.title, "position": self.position, "duration": self.duration}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Track":
        """Build a track from its serialized shape."""
        return cls(
            title=data.get("title", ""),
            position=data.get("position"),
            duration=data.get("duration"),
        )


def _to_track_list(value: Any) -> list[Track]:
    if value is None:
        return []
    return [t if isinstance(t, Track) else Track.from_dict(t) for t in value]


@define(frozen=True, slots=True)
class Record:
    """Immutable catalog record.

    Price is bounded to [0, 10000] and stock to [0, 100]; format and category
    must be one of the enumerated values.
    """

    artist: str = field(validator=[validators.instance_of(str), validators.min_len(1)])
    album: str = field(validator=[validators.instance_of(str), validators.min_len(1)])
    price: float = field(
        validator=[_is_number, validators.ge(0), validators.le(MAX_PRICE)],
    )
    qty: int = field(validator=[_is_int, validators.ge(0), validators.le(MAX_QTY)])
    format: RecordFormat = field(converter=RecordFormat)
    category: RecordCategory = field(converter=RecordCategory)
    mbid: str | None = field(default=None)
    track_list: list[Track] = field(factory=list, converter=_to_track_list)
    created: datetime = field(factory=lambda: datetime.now(UTC), converter=ensure_utc)
    last_modified: datetime = field(
        factory=lambda: datetime.now(UTC), converter=ensure_utc
    )
    is_user_created: bool = field(default=True)
    id: int | None = field(default=None)

    def with_id(self, db_id: int) -> "Record":
        """Set the store-assigned ID for this record."""
        if not isinstance(db_id, int) or db_id <= 0:
            raise ValueError(f"Invalid database ID: {db_id}. Must be a positive integer.")
        return attrs.evolve(self, id=db_id)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the JSON-compatible shape used by the cache and the API."""
        return {
            "id": self.id,
            "artist": self.artist,
            "album": self.album,
            "price": self.price,
            "qty": self.qty,
            "format": self.format.value,
            "category": self.category.value,
            "mbid": self.mbid,
            "trackList": [t.to_dict() for t in self.track_list],
            "created": self.created.isoformat(),
            "lastModified": self.last_modified.isoformat(),
            "isUserCreated": self.is_user_created,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Record":
        """Rebuild a record from :meth:`to_dict` output."""
        optional: dict[str, Any] = {}
        if data.get("created"):
            optional["created"] = parse_timestamp(data["created"])
        if data.get("lastModified"):
            optional["last_modified"] = parse_timestamp(data["lastModified"])
        return cls(
            artist=data["artist"],
            album=data["album"],
            price=data["price"],
            qty=data["qty"],
            format=data["format"],
            category=data["category"],
            mbid=data.get("mbid"),
            track_list=data.get("trackList") or [],
            is_user_created=data.get("isUserCreated", True),
            id=data.get("id"),
            **optional,
        )


# Fields a caller may set on create/update, in serialized order
RECORD_FIELDS = (
    "artist",
    "album",
    "price",
    "qty",
    "format",
    "category",
    "mbid",
    "track_list",
)

# Attribute names that can be requested through a field projection
PROJECTABLE_FIELDS = {
    "artist": "artist",
    "album": "album",
    "price": "price",
    "qty": "qty",
    "format": "format",
    "category": "category",
    "mbid": "mbid",
    "trackList": "track_list",
    "created": "created",
    "lastModified": "last_modified",
    "isUserCreated": "is_user_created",
}


@define(frozen=True, slots=True)
class RecordFields:
    """Partial set of caller-supplied record attributes.

    ``None`` means "not supplied". Used as create input (where the required
    attributes must all be present) and as a partial update.
    """

    artist: str | None = None
    album: str | None = None
    price: float | None = None
    qty: int | None = None
    format: RecordFormat | None = field(
        default=None, converter=attrs.converters.optional(RecordFormat)
    )
    category: RecordCategory | None = field(
        default=None, converter=attrs.converters.optional(RecordCategory)
    )
    mbid: str | None = None
    track_list: list[Track] | None = field(
        default=None, converter=attrs.converters.optional(_to_track_list)
    )

    def present(self) -> dict[str, Any]:
        """Return only the supplied attributes, keyed by attribute name."""
        return {
            name: getattr(self, name)
            for name in RECORD_FIELDS
            if getattr(self, name) is not None
        }

    def missing_required(self) -> list[str]:
        """Names of required create attributes that were not supplied."""
        required = ("artist", "album", "price", "qty", "format", "category")
        return [name for name in required if getattr(self, name) is None]
