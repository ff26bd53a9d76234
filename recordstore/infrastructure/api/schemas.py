"""Request models for the HTTP API.

Malformed input is rejected here, before it reaches the services.
"""

from pydantic import BaseModel, ConfigDict, Field

from recordstore.domain.entities import (
    RecordCategory,
    RecordFields,
    RecordFormat,
    Track,
)
from recordstore.domain.entities.record import MAX_PRICE, MAX_QTY


class TrackPayload(BaseModel):
    title: str
    position: str = ""
    duration: int = Field(default=0, ge=0)

    def to_domain(self) -> Track:
        return Track(title=self.title, position=self.position, duration=self.duration)


class _RecordPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def to_fields(self) -> RecordFields:
        data = self.model_dump(exclude_none=True, exclude={"track_list"})
        if self.track_list is not None:
            data["track_list"] = [t.to_domain() for t in self.track_list]
        return RecordFields(**data)


class CreateRecordRequest(_RecordPayload):
    artist: str = Field(min_length=1)
    album: str = Field(min_length=1)
    price: float = Field(ge=0, le=MAX_PRICE)
    qty: int = Field(ge=0, le=MAX_QTY)
    format: RecordFormat
    category: RecordCategory
    mbid: str | None = None
    track_list: list[TrackPayload] | None = Field(default=None, alias="trackList")


class UpdateRecordRequest(_RecordPayload):
    """Partial update; omitted or null fields are left unchanged."""

    artist: str | None = Field(default=None, min_length=1)
    album: str | None = Field(default=None, min_length=1)
    price: float | None = Field(default=None, ge=0, le=MAX_PRICE)
    qty: int | None = Field(default=None, ge=0, le=MAX_QTY)
    format: RecordFormat | None = None
    category: RecordCategory | None = None
    mbid: str | None = None
    track_list: list[TrackPayload] | None = Field(default=None, alias="trackList")


class CreateOrderRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    record_id: int = Field(alias="recordId")
    quantity: int = Field(ge=1)
