"""Order entities."""

from datetime import UTC, datetime
from typing import Any

from attrs import define, field, validators

from .shared import ensure_utc


@define(frozen=True, slots=True)
class Order:
    """A placed order for some copies of one catalog record."""

    record_id: int = field(validator=validators.instance_of(int))
    quantity: int = field(validator=[validators.instance_of(int), validators.ge(1)])
    created: datetime = field(factory=lambda: datetime.now(UTC), converter=ensure_utc)
    id: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "recordId": self.record_id,
            "quantity": self.quantity,
            "created": self.created.isoformat(),
        }
