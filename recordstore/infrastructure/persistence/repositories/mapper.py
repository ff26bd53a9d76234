"""Mapping between ORM rows and domain entities."""

from typing import Any

from recordstore.domain.entities import Order, Record, Track
from recordstore.infrastructure.persistence.database.db_models import DBOrder, DBRecord


class RecordMapper:
    """Bidirectional mapping for catalog records."""

    @staticmethod
    def to_domain(db_model: DBRecord) -> Record:
        """Convert a row to a Record."""
        return Record(
            id=db_model.id,
            artist=db_model.artist,
            album=db_model.album,
            price=db_model.price,
            qty=db_model.qty,
            format=db_model.format,
            category=db_model.category,
            mbid=db_model.mbid,
            track_list=[Track.from_dict(t) for t in db_model.track_list or []],
            created=db_model.created,
            last_modified=db_model.last_modified,
            is_user_created=db_model.is_user_created,
        )

    @staticmethod
    def to_db(record: Record) -> DBRecord:
        """Convert a Record to a new row (ID left for the database)."""
        return DBRecord(
            artist=record.artist,
            album=record.album,
            price=record.price,
            qty=record.qty,
            format=record.format.value,
            category=record.category.value,
            mbid=record.mbid,
            track_list=[t.to_dict() for t in record.track_list],
            created=record.created,
            last_modified=record.last_modified,
            is_user_created=record.is_user_created,
        )

    @staticmethod
    def column_values(record: Record) -> dict[str, Any]:
        """Column values for writing a whole record back onto a row."""
        return {
            "artist": record.artist,
            "album": record.album,
            "price": record.price,
            "qty": record.qty,
            "format": record.format.value,
            "category": record.category.value,
            "mbid": record.mbid,
            "track_list": [t.to_dict() for t in record.track_list],
            "last_modified": record.last_modified,
        }


class OrderMapper:
    """Bidirectional mapping for orders."""

    @staticmethod
    def to_domain(db_model: DBOrder) -> Order:
        return Order(
            id=db_model.id,
            record_id=db_model.record_id,
            quantity=db_model.quantity,
            created=db_model.created,
        )

    @staticmethod
    def to_db(order: Order) -> DBOrder:
        return DBOrder(
            record_id=order.record_id,
            quantity=order.quantity,
            created=order.created,
        )
