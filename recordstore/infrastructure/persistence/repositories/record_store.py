"""SQLAlchemy-backed document store for catalog records.

Every public method runs in its own session and transaction, so the store
is safe to share between concurrently running requests. Results come back
in insertion order (ascending ID).
"""

from typing import Any

import attrs
from sqlalchemy import Select, delete, func, inspect, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.sql import ColumnElement

from recordstore.config import get_logger
from recordstore.domain.entities import (
    PROJECTABLE_FIELDS,
    BulkInsertResult,
    Record,
    RecordFilter,
)
from recordstore.domain.exceptions import ConflictError, ValidationError
from recordstore.infrastructure.persistence.database.db_connection import get_session
from recordstore.infrastructure.persistence.database.db_models import (
    DBRecord,
    get_on_demand_index,
)
from recordstore.infrastructure.persistence.repositories.mapper import RecordMapper
from recordstore.infrastructure.persistence.repositories.repo_decorator import (
    db_operation,
)

logger = get_logger(__name__)

# Columns that may be decremented atomically
_DECREMENTABLE = {"qty": DBRecord.qty}

# Attributes usable in equality lookups
_EQUALITY_COLUMNS = {
    "id": DBRecord.id,
    "artist": DBRecord.artist,
    "album": DBRecord.album,
    "mbid": DBRecord.mbid,
    "format": DBRecord.format,
    "category": DBRecord.category,
    "is_user_created": DBRecord.is_user_created,
}


def build_conditions(record_filter: RecordFilter) -> list[ColumnElement[bool]]:
    """Translate a RecordFilter into AND-ed SQL conditions.

    The free-text term is a single OR group over artist, album and category.
    Substring matching is case-insensitive with LIKE wildcards escaped.
    """
    conditions: list[ColumnElement[bool]] = []

    if record_filter.q:
        conditions.append(
            or_(
                DBRecord.artist.icontains(record_filter.q, autoescape=True),
                DBRecord.album.icontains(record_filter.q, autoescape=True),
                DBRecord.category.icontains(record_filter.q, autoescape=True),
            )
        )
    if record_filter.artist:
        conditions.append(DBRecord.artist.icontains(record_filter.artist, autoescape=True))
    if record_filter.album:
        conditions.append(DBRecord.album.icontains(record_filter.album, autoescape=True))
    if record_filter.format:
        conditions.append(DBRecord.format == record_filter.format.value)
    if record_filter.category:
        conditions.append(DBRecord.category == record_filter.category.value)

    return conditions


def project(document: dict[str, Any], projection: tuple[str, ...]) -> dict[str, Any]:
    """Keep ``id`` plus the projected fields of a serialized record."""
    if not projection:
        return document
    return {"id": document["id"], **{name: document[name] for name in projection}}


class SQLRecordStore:
    """Record collection over an async SQLAlchemy session factory."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession] | None = None) -> None:
        self._session_factory = session_factory
        self.mapper = RecordMapper

    def _select(self, record_filter: RecordFilter) -> Select[tuple[DBRecord]]:
        return select(DBRecord).where(*build_conditions(record_filter))

    # -------------------------------------------------------------------------
    # READS
    # -------------------------------------------------------------------------

    @db_operation("find_records")
    async def find(
        self,
        record_filter: RecordFilter,
        projection: tuple[str, ...] = (),
        skip: int = 0,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        """Return serialized, optionally projected records in insertion order."""
        stmt = self._select(record_filter).order_by(DBRecord.id).offset(skip)
        if limit is not None:
            stmt = stmt.limit(limit)

        async with get_session(self._session_factory) as session:
            rows = (await session.scalars(stmt)).all()

        projection = tuple(name for name in projection if name in PROJECTABLE_FIELDS)
        return [project(self.mapper.to_domain(row).to_dict(), projection) for row in rows]

    @db_operation("count_records")
    async def count(self, record_filter: RecordFilter) -> int:
        stmt = select(func.count(DBRecord.id)).where(*build_conditions(record_filter))
        async with get_session(self._session_factory) as session:
            return (await session.scalar(stmt)) or 0

    @db_operation("find_record_by_id")
    async def find_by_id(self, record_id: int) -> Record | None:
        async with get_session(self._session_factory) as session:
            row = await session.get(DBRecord, record_id)
            return self.mapper.to_domain(row) if row else None

    @db_operation("find_one_record")
    async def find_one(self, conditions: dict[str, Any]) -> Record | None:
        """Get the first record (lowest ID) matching all equality conditions."""
        unknown = set(conditions) - set(_EQUALITY_COLUMNS)
        if unknown:
            raise ValidationError(f"Cannot look records up by: {sorted(unknown)}")

        stmt = select(DBRecord).order_by(DBRecord.id).limit(1)
        for name, value in conditions.items():
            stmt = stmt.where(_EQUALITY_COLUMNS[name] == getattr(value, "value", value))

        async with get_session(self._session_factory) as session:
            row = (await session.scalars(stmt)).first()
            return self.mapper.to_domain(row) if row else None

    @db_operation("records_empty")
    async def is_empty(self) -> bool:
        async with get_session(self._session_factory) as session:
            return (await session.scalar(select(func.count(DBRecord.id)))) == 0

    # -------------------------------------------------------------------------
    # WRITES
    # -------------------------------------------------------------------------

    @db_operation("insert_record")
    async def insert(self, record: Record) -> Record:
        async with get_session(self._session_factory) as session:
            db_record = self.mapper.to_db(record)
            session.add(db_record)
            await session.flush()
            return record.with_id(db_record.id)

    async def insert_many(
        self, records: list[Record], continue_on_error: bool = False
    ) -> BulkInsertResult:
        """Insert many records.

        Without ``continue_on_error`` the batch is one transaction and the
        first conflict aborts it. With it, every record is committed on its
        own and conflicting records are reported in ``failed``.
        """
        if not continue_on_error:
            inserted = await self._insert_batch(records)
            return BulkInsertResult(inserted=inserted)

        inserted: list[Record] = []
        failed: list[tuple[Record, str]] = []
        for record in records:
            try:
                inserted.append(await self.insert(record))
            except ConflictError as e:
                failed.append((record, str(e)))

        if failed:
            logger.warning(
                f"Skipped {len(failed)} of {len(records)} records on bulk insert",
                inserted=len(inserted),
                failed=len(failed),
            )
        return BulkInsertResult(inserted=inserted, failed=failed)

    @db_operation("insert_record_batch")
    async def _insert_batch(self, records: list[Record]) -> list[Record]:
        async with get_session(self._session_factory) as session:
            db_records = [self.mapper.to_db(record) for record in records]
            session.add_all(db_records)
            await session.flush()
            return [
                record.with_id(db_record.id)
                for record, db_record in zip(records, db_records, strict=True)
            ]

    @db_operation("update_record")
    async def update_by_id(self, record_id: int, changes: dict[str, Any]) -> Record | None:
        """Apply a partial update to one record in a single transaction.

        The merged record is validated against the domain invariants before
        it is written.
        """
        async with get_session(self._session_factory) as session:
            row = await session.get(DBRecord, record_id, with_for_update=True)
            if row is None:
                return None

            current = self.mapper.to_domain(row)
            try:
                updated = attrs.evolve(current, **changes)
            except (TypeError, ValueError) as e:
                raise ValidationError(str(e)) from e

            for column, value in self.mapper.column_values(updated).items():
                setattr(row, column, value)
            await session.flush()
            return updated

    @db_operation("delete_record")
    async def delete_by_id(self, record_id: int) -> None:
        async with get_session(self._session_factory) as session:
            await session.execute(delete(DBRecord).where(DBRecord.id == record_id))

    @db_operation("decrement_record_field")
    async def decrement_field(
        self, record_id: int, field_name: str, amount: int
    ) -> Record | None:
        """Subtract ``amount`` in one conditional UPDATE.

        Returns None when the record is missing or holds less than ``amount``.
        """
        column = _DECREMENTABLE.get(field_name)
        if column is None:
            raise ValidationError(f"Field cannot be decremented: {field_name}")
        if amount < 1:
            raise ValidationError("Decrement amount must be at least 1")

        stmt = (
            update(DBRecord)
            .where(DBRecord.id == record_id, column >= amount)
            .values({column: column - amount})
            .execution_options(synchronize_session=False)
        )
        async with get_session(self._session_factory) as session:
            result = await session.execute(stmt)
            if result.rowcount == 0:
                return None
            row = await session.get(DBRecord, record_id, populate_existing=True)
            return self.mapper.to_domain(row) if row else None

    # -------------------------------------------------------------------------
    # INDEXES
    # -------------------------------------------------------------------------

    @db_operation("index_exists")
    async def index_exists(self, name: str) -> bool:
        async with get_session(self._session_factory) as session:
            conn = await session.connection()
            names = await conn.run_sync(
                lambda sync_conn: {
                    ix["name"] for ix in inspect(sync_conn).get_indexes(DBRecord.__tablename__)
                }
            )
            return name in names

    @db_operation("ensure_index")
    async def ensure_index(self, name: str) -> None:
        index = get_on_demand_index(name)
        async with get_session(self._session_factory) as session:
            conn = await session.connection()
            await conn.run_sync(lambda sync_conn: index.create(sync_conn, checkfirst=True))
        logger.info(f"Ensured index {name}")
