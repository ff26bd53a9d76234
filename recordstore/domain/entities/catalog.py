"""Catalog query value objects."""

import math
from typing import Any

from attrs import define, field

from .record import PROJECTABLE_FIELDS, RecordCategory, RecordFormat


def _blank_to_none(value: Any) -> Any:
    """Treat empty or whitespace-only strings as not supplied."""
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _optional_enum(enum_cls):
    def convert(value: Any) -> Any:
        value = _blank_to_none(value)
        return None if value is None else enum_cls(value)

    return convert


@define(frozen=True, slots=True)
class RecordFilter:
    """Search predicate over the catalog.

    ``q`` matches artist OR album OR category (case-insensitive substring);
    ``artist``/``album`` are independent substring filters; ``format`` and
    ``category`` are exact. All supplied terms are ANDed.
    """

    q: str | None = field(default=None, converter=_blank_to_none)
    artist: str | None = field(default=None, converter=_blank_to_none)
    album: str | None = field(default=None, converter=_blank_to_none)
    format: RecordFormat | None = field(
        default=None, converter=_optional_enum(RecordFormat)
    )
    category: RecordCategory | None = field(
        default=None, converter=_optional_enum(RecordCategory)
    )

    def is_empty(self) -> bool:
        """True when no term restricts the result."""
        return not any((self.q, self.artist, self.album, self.format, self.category))


def clamp_page(page: int | None) -> int:
    """Page numbers start at 1; missing, zero and negative pages become 1."""
    if page is None:
        return 1
    return max(1, int(page))


def clamp_limit(limit: int | None, default: int = 20, maximum: int = 100) -> int:
    """Clamp a page size into [1, maximum], defaulting when not supplied."""
    if limit is None:
        return default
    return min(maximum, max(1, int(limit)))


def parse_fields(fields: str | list[str] | None) -> tuple[str, ...]:
    """Parse a comma-separated projection into known serialized field names.

    Unknown names are dropped; the result keeps first-seen order without
    duplicates. An empty result means "all fields".
    """
    if not fields:
        return ()
    raw = fields.split(",") if isinstance(fields, str) else fields
    seen: list[str] = []
    for name in (part.strip() for part in raw):
        if name in PROJECTABLE_FIELDS and name not in seen:
            seen.append(name)
    return tuple(seen)


@define(frozen=True, slots=True)
class RecordQuery:
    """Normalized catalog query: filter, paging window and projection."""

    filter: RecordFilter = field(factory=RecordFilter)
    page: int = field(default=1, converter=clamp_page)
    limit: int = field(default=20)
    fields: tuple[str, ...] = field(default=(), converter=parse_fields)

    @property
    def skip(self) -> int:
        """Number of matching records before this page."""
        return (self.page - 1) * self.limit


@define(frozen=True, slots=True)
class RecordPage:
    """One page of catalog query results."""

    records: list[dict[str, Any]]
    total: int
    page: int
    total_pages: int

    @classmethod
    def build(
        cls, records: list[dict[str, Any]], total: int, page: int, limit: int
    ) -> "RecordPage":
        """Assemble a page, deriving the page count from the total."""
        return cls(
            records=records,
            total=total,
            page=page,
            total_pages=math.ceil(total / limit) if limit else 0,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the JSON shape used by the cache and the API."""
        return {
            "records": self.records,
            "total": self.total,
            "page": self.page,
            "totalPages": self.total_pages,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RecordPage":
        """Rebuild a page from :meth:`to_dict` output."""
        return cls(
            records=list(data["records"]),
            total=data["total"],
            page=data["page"],
            total_pages=data["totalPages"],
        )


@define(frozen=True, slots=True)
class BulkInsertResult:
    """Outcome of a bulk insert that may skip conflicting rows."""

    inserted: list[Any] = field(factory=list)
    failed: list[tuple[Any, str]] = field(factory=list)

    @property
    def inserted_count(self) -> int:
        return len(self.inserted)

    @property
    def failed_count(self) -> int:
        return len(self.failed)
