"""Repository layer for database operations with SQLAlchemy 2.0."""

from recordstore.infrastructure.persistence.repositories.mapper import (
    OrderMapper,
    RecordMapper,
)
from recordstore.infrastructure.persistence.repositories.order_store import SQLOrderStore
from recordstore.infrastructure.persistence.repositories.record_store import (
    SQLRecordStore,
    build_conditions,
)
from recordstore.infrastructure.persistence.repositories.repo_decorator import db_operation

__all__ = [
    "OrderMapper",
    "RecordMapper",
    "SQLOrderStore",
    "SQLRecordStore",
    "build_conditions",
    "db_operation",
]
