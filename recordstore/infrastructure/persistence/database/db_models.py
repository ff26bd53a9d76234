"""SQLAlchemy database models for the record store.

Records are stored one row per document with the track list embedded as a
JSON column, so a record is always read and written as a whole.
"""

from datetime import UTC, datetime
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Float,
    Index,
    Integer,
    MetaData,
    String,
    UniqueConstraint,
)
from sqlalchemy.ext.asyncio import AsyncAttrs, AsyncEngine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from recordstore.config import get_logger

logger = get_logger(__name__)

# Define naming convention for constraints
convention = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",  # Index
    "uq": "uq_%(table_name)s_%(column_0_name)s",  # Unique constraint
    "ck": "ck_%(table_name)s_%(constraint_name)s",  # Check constraint
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",  # Foreign key
    "pk": "pk_%(table_name)s",  # Primary key
}

metadata = MetaData(naming_convention=convention)


class RecordStoreDBBase(AsyncAttrs, DeclarativeBase):
    """Base class for all database models."""

    metadata = metadata

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)


class DBRecord(RecordStoreDBBase):
    """Catalog record document."""

    __tablename__ = "records"

    artist: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    album: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    price: Mapped[float] = mapped_column(Float, nullable=False)
    qty: Mapped[int] = mapped_column(Integer, nullable=False)
    format: Mapped[str] = mapped_column(String(16), nullable=False, index=True)
    category: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    mbid: Mapped[str | None] = mapped_column(String(36), index=True)
    track_list: Mapped[list[dict[str, Any]]] = mapped_column(
        JSON, nullable=False, default=list
    )
    created: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )
    last_modified: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )
    is_user_created: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    __table_args__ = (UniqueConstraint("artist", "album"),)


class DBOrder(RecordStoreDBBase):
    """Placed order for a catalog record."""

    __tablename__ = "orders"

    record_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    created: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )


# Secondary indexes created on demand rather than with the schema
ON_DEMAND_INDEXES: dict[str, tuple[str, ...]] = {
    "ix_records_text": ("artist", "album", "category"),
}

_index_objects: dict[str, Index] = {}


def get_on_demand_index(name: str) -> Index:
    """Return the Index object for a named on-demand index."""
    if name not in ON_DEMAND_INDEXES:
        raise KeyError(f"Unknown index: {name}")
    if name not in _index_objects:
        table = DBRecord.__table__
        _index_objects[name] = Index(
            name, *(table.c[col] for col in ON_DEMAND_INDEXES[name])
        )
    return _index_objects[name]


async def init_db(engine: AsyncEngine | None = None) -> None:
    """Initialize database schema.

    Creates all tables if they don't exist. Safe to call on an existing
    database.
    """
    from recordstore.infrastructure.persistence.database.db_connection import (
        get_engine,
    )

    engine = engine or get_engine()

    try:
        async with engine.begin() as conn:
            await conn.run_sync(RecordStoreDBBase.metadata.create_all)
    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        raise
    else:
        logger.info("Database schema initialization complete")
